"""Daily fortune slips drawn onto a background picture."""

from __future__ import annotations

import hashlib
import zipfile
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

# Background kinds; a stored setting is an index into this table.
TABLE = (
    "车万", "DC4", "爱因斯坦", "星空列车", "樱云之恋", "富婆妹", "李清歌", "公主连结",
    "原神", "明日方舟", "碧蓝航线", "碧蓝幻想", "战双", "阴阳师", "赛马娘", "东方归言录",
    "奇异恩典", "夏日口袋", "ASoul",
)
DEFAULT_KIND = "车万"

IMAGES = "data/Fortune/"
OMIKUJI_JSON = "data/Fortune/text.json"
FONT = "data/Font/sakura.ttf"
CACHE = IMAGES + "cache/"

COLUMN_SIZE = 9
TITLE_FONT_SIZE = 45
TEXT_FONT_SIZE = 23
TITLE_CENTER_X = 140
TITLE_BASELINE = 112
TEXT_ORIGIN_X = 115.0
TEXT_ORIGIN_Y = 320.0
CHAR_PADDING = 10

_INDEX = {name: i for i, name in enumerate(TABLE)}


def kind_index(name: str) -> int:
    """Stored value for a background kind; LookupError if there is no such kind."""
    try:
        return _INDEX[name] & 0xFF
    except KeyError:
        raise LookupError("没有这个底图哦～") from None


def kind_for(value: int) -> str:
    """Background kind of a stored value, falling back to the default."""
    v = value & 0xFF
    return TABLE[v] if v < len(TABLE) else DEFAULT_KIND


def rows_num(total: int, div: int) -> int:
    """Number of columns of size div needed for total characters."""
    rows = total // div
    if total % div != 0:
        rows += 1
    return rows


def offset(total: int, now: int, distance: float) -> float:
    """Offset of the now-th of total slots, spaced by distance."""
    if total % 2 == 0:
        return (now - total // 2 - 1) * distance
    return (now - total // 2 - 1.5) * distance


def layout(text: str, char_width: float, char_height: float) -> list[tuple[str, float, float]]:
    """Place the characters of a slip in vertical columns, right to left."""
    chars = list(text)
    n = len(chars)
    xsum = rows_num(n, COLUMN_SIZE)
    placed: list[tuple[str, float, float]] = []
    if xsum == 2:
        div = rows_num(n, 2)
        for i, ch in enumerate(chars):
            xnow = rows_num(i + 1, div)
            ysum = min(n - (xnow - 1) * div, div)
            ynow = i % div + 1
            x = -offset(xsum, xnow, char_width) + TEXT_ORIGIN_X
            if xnow == 1:
                y = offset(COLUMN_SIZE, ynow, char_height) + TEXT_ORIGIN_Y
            else:
                y = offset(COLUMN_SIZE, ynow + (COLUMN_SIZE - ysum), char_height) + TEXT_ORIGIN_Y
            placed.append((ch, x, y))
        return placed
    for i, ch in enumerate(chars):
        xnow = rows_num(i + 1, COLUMN_SIZE)
        ysum = min(n - (xnow - 1) * COLUMN_SIZE, COLUMN_SIZE)
        ynow = i % COLUMN_SIZE + 1
        x = -offset(xsum, xnow, char_width) + TEXT_ORIGIN_X
        y = offset(ysum, ynow, char_height) + TEXT_ORIGIN_Y
        placed.append((ch, x, y))
    return placed


def cache_name(zipfile: str, index: int, title: str, text: str) -> str:
    """File name under which a drawn slip is cached."""
    return hashlib.md5(f"{zipfile}{index}{title}{text}".encode()).hexdigest()


def pick_background(zip_path: str | Path, index: int) -> Image.Image:
    """Decode the index-th picture of a zip, wrapping around its entry count."""
    with zipfile.ZipFile(zip_path) as archive:
        entries = archive.infolist()
        if not entries:
            raise ValueError(f"no pictures in {zip_path}")
        with archive.open(entries[index % len(entries)]) as member:
            with Image.open(member) as image:
                image.load()
                return image.copy()


def draw(
    background: Image.Image,
    title: str,
    text: str,
    font_path: str | Path = FONT,
) -> Image.Image:
    """Draw the title and the slip text onto a copy of the background."""
    width, height = background.size
    canvas = Image.new("RGBA", (height, width), (0, 0, 0, 0))
    canvas.paste(background.convert("RGBA"), (0, 0))
    pen = ImageDraw.Draw(canvas)

    title_font = ImageFont.truetype(str(font_path), TITLE_FONT_SIZE)
    title_width = title_font.getlength(title)
    pen.text(
        (TITLE_CENTER_X - title_width / 2, TITLE_BASELINE),
        title,
        font=title_font,
        fill=(255, 255, 255, 255),
        anchor="ls",
    )

    text_font = ImageFont.truetype(str(font_path), TEXT_FONT_SIZE)
    ascent, descent = text_font.getmetrics()
    char_width = text_font.getlength("测") + CHAR_PADDING
    char_height = ascent + descent + CHAR_PADDING
    for ch, x, y in layout(text, char_width, char_height):
        pen.text((x, y), ch, font=text_font, fill=(0, 0, 0, 255), anchor="ls")
    return canvas