import json

import pytest

from zeroplugins.hearthstone import (
    HS,
    SITE,
    deck_image,
    deck_url,
    extract_hash,
    match_deck_code,
    search_cards,
    search_url,
)

PAGE = b'<script>var hash = "abc123"; var x = 1;</script>'


def fake_get(answers):
    calls = []

    def get(url):
        calls.append(url)
        if url == SITE:
            return PAGE
        return answers

    get.calls = calls
    return get


def test_extract_hash():
    assert extract_hash(PAGE.decode()) == "abc123"


def test_extract_hash_missing():
    with pytest.raises(ValueError):
        extract_hash("<html></html>")


def test_search_url_shape():
    url = search_url("h1", "火球术")
    assert url.startswith(HS + "mod=get_cards_list&")
    assert url.endswith("&hash=h1&search=火球术")


def test_deck_url_shape():
    url = deck_url("h1", "AAECODE")
    assert "mod=general_deck_image&deck_code=AAECODE&deck_text=&hash=h1" in url
    assert url.endswith("&search=AAECODE")


def test_match_deck_code():
    code = "AAE" + "Bc9+/=" * 12
    assert match_deck_code(f"我的卡组\n{code}\n好用") == code


def test_match_deck_code_too_short():
    assert match_deck_code("AAE" + "A" * 10) is None


def test_search_cards_limits_to_five():
    cards = [{"CardID": f"C{i}", "auth_key": f"k{i}"} for i in range(8)]
    get = fake_get(json.dumps({"list": cards}).encode())
    found = search_cards("x", get)
    assert [c for c, _ in found] == ["C0", "C1", "C2", "C3", "C4"]
    assert found[0][1] == "https://res.fbigame.com/hs/v13/C0.png?auth_key=k0"
    assert get.calls[1] == search_url("abc123", "x")


def test_search_cards_empty():
    assert search_cards("x", fake_get(b'{"list": []}')) == []
    assert search_cards("x", fake_get(b"")) == []


def test_deck_image():
    get = fake_get(b'{"img": "QUJD"}')
    assert deck_image("AAEcode", get) == "base64://QUJD"
    assert get.calls[1] == deck_url("abc123", "AAEcode")


def test_deck_image_without_img():
    assert deck_image("AAEcode", fake_get(b"{}")) == "base64://"