"""Hearthstone card search and deck pictures."""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

import requests

SITE = "https://hs.fbigame.com"
USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 6.0; Nexus 5 Build/MRA58N) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/86.0.4240.198 Mobile Safari/537.36"
)
HS = "https://hs.fbigame.com/ajax.php?"
PARA = (
    "mod=get_cards_list&"
    "mode=-1&"
    "extend=-1&"
    "mutil_extend=&"
    "hero=-1&"
    "rarity=-1&"
    "cost=-1&"
    "mutil_cost=&"
    "techlevel=-1&"
    "type=-1&"
    "collectible=-1&"
    "isbacon=-1&"
    "page=1&"
    "search_type=1&"
    "deckmode=normal"
)
CARD_IMAGE = "https://res.fbigame.com/hs/v13/{card_id}.png?auth_key={auth_key}"
MAX_CARDS = 5

_HASH_MARK = 'var hash = "'
_DECK_RE = re.compile(r"[\s\S]*?(AAE[a-zA-Z0-9/+=]{70,})[\s\S]*")


def _default_get(url: str) -> bytes:
    resp = requests.get(
        url, headers={"Referer": SITE, "User-Agent": USER_AGENT}, timeout=30
    )
    resp.raise_for_status()
    return resp.content


def extract_hash(html: str) -> str:
    """Find the page hash the search API wants."""
    _, mark, rest = html.partition(_HASH_MARK)
    if not mark:
        raise ValueError("page hash not found")
    return rest.split('"', 1)[0]


def search_url(page_hash: str, query: str) -> str:
    """URL of the card search."""
    return f"{HS}{PARA}&hash={page_hash}&search={query}"


def deck_url(page_hash: str, code: str) -> str:
    """URL of the deck picture request."""
    return (
        f"{HS}{PARA}mod=general_deck_image&deck_code={code}"
        f"&deck_text=&hash={page_hash}&search={code}"
    )


def match_deck_code(text: str) -> str | None:
    """Find a deck code in a message."""
    match = _DECK_RE.fullmatch(text)
    return match.group(1) if match else None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _page_hash(get: Callable[[str], bytes]) -> str:
    return extract_hash(get(SITE).decode("utf-8", "replace"))


def search_cards(
    query: str, get: Callable[[str], bytes] | None = None
) -> list[tuple[str, str]]:
    """Search cards; return (card id, image URL) of at most five of them."""
    fetch = get or _default_get
    body = fetch(search_url(_page_hash(fetch), query))
    try:
        doc = json.loads(body) if body else {}
    except ValueError:
        return []
    cards = doc.get("list") if isinstance(doc, dict) else None
    if not isinstance(cards, list):
        return []
    found = []
    for card in cards[:MAX_CARDS]:
        card = card if isinstance(card, dict) else {}
        card_id = _text(card.get("CardID"))
        found.append(
            (card_id, CARD_IMAGE.format(card_id=card_id, auth_key=_text(card.get("auth_key"))))
        )
    return found


def deck_image(code: str, get: Callable[[str], bytes] | None = None) -> str:
    """Return the deck picture as a base64:// reference."""
    fetch = get or _default_get
    body = fetch(deck_url(_page_hash(fetch), code))
    try:
        doc = json.loads(body) if body else {}
    except ValueError:
        doc = {}
    img = doc.get("img") if isinstance(doc, dict) else None
    return "base64://" + _text(img)