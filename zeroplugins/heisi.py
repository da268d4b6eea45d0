"""Random pictures from packed URL tables."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from pathlib import Path

ITEM_SIZE = 10

TEMPLATE_BASE = "http://hs.heisiwu.com/wp-content/uploads/"

FILE_LIST = ("heisi.bin", "baisi.bin", "jk.bin", "jur.bin", "zuk.bin", "mcn.bin")
COMMANDS = ("来点黑丝", "来点白丝", "来点jk", "来点巨乳", "来点足控", "来点网红")

_EXTENSIONS = {0: ".jpg", 1: ".png", 2: ".webp"}


@dataclass(frozen=True)
class Item:
    """A picture address packed into ten bytes."""

    raw: bytes

    def __post_init__(self) -> None:
        if len(self.raw) != ITEM_SIZE:
            raise ValueError(f"item must be {ITEM_SIZE} bytes, got {len(self.raw)}")

    def url(self) -> str:
        """Unpack the picture URL."""
        head = self.raw[0]
        year = ((head >> 4) & 0x0F) + 2021
        month = head & 0x0F
        if year == 2021:
            num = int.from_bytes(self.raw[1:5], "big")
            digest = self.raw[5:9].hex()
            return (
                f"{TEMPLATE_BASE}{year:4d}/{month:02d}/"
                f"{year:4d}{month:02d}16{num:06d}-611a3{digest:>8}.jpg"
            )
        d = int.from_bytes(self.raw[1:9], "big")
        tail = self.raw[9]
        scaled = tail & 0x80 != 0
        num = tail & 0x7F
        url = f"{TEMPLATE_BASE}{year:4d}/{month:02d}/{d & 0x0FFFFFFFFFFFFFFF:015x}"
        if num > 0:
            url += f"-{num}"
        if scaled:
            url += "-scaled"
        ext = _EXTENSIONS.get(d >> 60)
        if ext is None:
            raise ValueError("invalid ext")
        return url + ext

    def __str__(self) -> str:
        return self.url()


def load_items(data: bytes) -> list[Item]:
    """Split a packed table into items."""
    if len(data) % ITEM_SIZE:
        raise ValueError("invalid data")
    return [Item(bytes(data[i:i + ITEM_SIZE])) for i in range(0, len(data), ITEM_SIZE)]


@dataclass
class Gallery:
    """Item tables keyed by the command that asks for them."""

    tables: dict[str, list[Item]] = field(default_factory=dict)

    def pick(self, command: str, rng: random.Random | None = None) -> Item:
        """Pick a random item for a command."""
        items = self.tables[command]
        if not items:
            raise LookupError(f"no pictures for {command}")
        return (rng or random).choice(items)


def load_gallery(folder: str | Path) -> Gallery:
    """Load every table file from a folder."""
    base = Path(folder)
    tables: dict[str, list[Item]] = {}
    for i, (command, name) in enumerate(zip(COMMANDS, FILE_LIST)):
        data = (base / name).read_bytes()
        try:
            tables[command] = load_items(data)
        except ValueError:
            raise ValueError(f"invalid data {i}") from None
    return Gallery(tables)