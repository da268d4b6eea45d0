import io
import zipfile

import pytest
from PIL import Image

from zeroplugins import fortune


def test_kind_index_round_trip():
    for name in fortune.TABLE:
        assert fortune.kind_for(fortune.kind_index(name)) == name


def test_kind_index_first_is_default():
    assert fortune.kind_index("车万") == 0


def test_kind_index_unknown():
    with pytest.raises(LookupError):
        fortune.kind_index("不存在")


def test_kind_for_values():
    assert fortune.kind_for(1) == "DC4"
    assert fortune.kind_for(0x100 | 1) == "DC4"
    assert fortune.kind_for(255) == "车万"


@pytest.mark.parametrize("div", [2, 9])
def test_rows_num_is_ceiling(div):
    for total in range(0, 40):
        rows = fortune.rows_num(total, div)
        assert rows * div >= total
        assert (rows - 1) * div < total or total == 0


def test_rows_num_exact():
    assert fortune.rows_num(9, 9) == 1
    assert fortune.rows_num(0, 9) == 0


@pytest.mark.parametrize("total", [1, 2, 3, 8, 9])
def test_offset_steps_by_distance(total):
    for now in range(1, total):
        step = fortune.offset(total, now + 1, 7.5) - fortune.offset(total, now, 7.5)
        assert step == pytest.approx(7.5)
    assert fortune.offset(total, 1, 0) == 0


def test_layout_single_column():
    placed = fortune.layout("一二三四五", 30, 40)
    assert [c for c, _, _ in placed] == list("一二三四五")
    assert len({x for _, x, _ in placed}) == 1
    ys = [y for _, _, y in placed]
    assert all(b - a == pytest.approx(40) for a, b in zip(ys, ys[1:]))


def test_layout_two_full_columns_align():
    text = "甲" * 18
    placed = fortune.layout(text, 30, 40)
    first, second = placed[:9], placed[9:]
    assert [y for _, _, y in first] == pytest.approx([y for _, _, y in second])
    assert first[0][1] - second[0][1] == pytest.approx(30)


def test_layout_two_columns_second_bottom_aligned():
    placed = fortune.layout("子" * 11, 30, 40)
    assert len(placed) == 11
    # Second column ends on the ninth slot, first starts on the first.
    assert placed[-1][2] - placed[0][2] == pytest.approx(8 * 40)


def test_layout_many_columns():
    placed = fortune.layout("字" * 20, 25, 35)
    xs = sorted({x for _, x, _ in placed}, reverse=True)
    assert len(xs) == 3
    assert all(a - b == pytest.approx(25) for a, b in zip(xs, xs[1:]))


def test_layout_empty():
    assert fortune.layout("", 10, 10) == []


def test_cache_name_properties():
    name = fortune.cache_name("data/Fortune/车万.zip", 3, "大吉", "好运")
    assert len(name) == 32
    assert all(c in "0123456789abcdef" for c in name)
    assert name == fortune.cache_name("data/Fortune/车万.zip", 3, "大吉", "好运")
    assert name != fortune.cache_name("data/Fortune/车万.zip", 4, "大吉", "好运")


def _png(size):
    buf = io.BytesIO()
    Image.new("RGB", size, (10, 20, 30)).save(buf, format="PNG")
    return buf.getvalue()


def test_pick_background(tmp_path):
    path = tmp_path / "bg.zip"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("a.png", _png((12, 20)))
        zf.writestr("b.png", _png((30, 16)))
    assert fortune.pick_background(path, 0).size == (12, 20)
    assert fortune.pick_background(path, 1).size == (30, 16)
    assert fortune.pick_background(path, 2).size == (12, 20)


def test_pick_background_empty_zip(tmp_path):
    path = tmp_path / "empty.zip"
    with zipfile.ZipFile(path, "w"):
        pass
    with pytest.raises(ValueError):
        fortune.pick_background(path, 0)


def test_draw_missing_font(tmp_path):
    background = Image.new("RGB", (40, 60))
    with pytest.raises(OSError):
        fortune.draw(background, "大吉", "今天运气很好", tmp_path / "missing.ttf")