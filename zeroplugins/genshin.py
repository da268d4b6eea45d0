"""Genshin-style ten-pull gacha drawn from a zip of card pictures."""

from __future__ import annotations

import random
import re
import threading
import zipfile
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO

from PIL import Image

CANVAS_SIZE = (1920, 1080)
CANVAS_COLOR = (50, 50, 50, 255)
FIRST_TILE_X = 230
TILE_STEP = 146
SHARE_ICON_POS = (1270, 945)

_NAME_RE = re.compile(r"_(.*)\.png")
_STAR_FILES = {"ThreeStar.png": 3, "FourStar.png": 4, "FiveStar.png": 5}
_PREFIX_LEN = 8

# Display order of the pulled cards: folder, star rank, background.
_ORDER = (
    ("five", 5, "five_bg.jpg"),
    ("four", 4, "four_bg.jpg"),
    ("five2", 5, "five_bg.jpg"),
    ("four2", 4, "four_bg.jpg"),
    ("Three", 3, "three_bg.jpg"),
)


def is_five_star_mode(value: int) -> bool:
    """Whether the stored setting selects the five-star pool."""
    return value & 1 == 1


def toggle_mode(value: int) -> tuple[int, bool]:
    """Flip the pool; return the new stored value and whether it is five-star."""
    if is_five_star_mode(value):
        return value & ~1, False
    return value | 1, True


class CardArchive:
    """The card pictures inside a zip, indexed by folder."""

    def __init__(self, path: str | Path) -> None:
        self._zip = zipfile.ZipFile(path)
        self._entries: dict[str, zipfile.ZipInfo] = {}
        self.tree: dict[str, list[str]] = {}
        self.star_icons: dict[int, str] = {}
        for info in self._zip.infolist():
            if info.is_dir():
                self.tree[info.filename] = []
                continue
            name = info.filename[_PREFIX_LEN:]
            self._entries[name] = info
            slash = name.rfind("/")
            if slash < 0:
                self.tree[name] = [name]
                continue
            folder = name[:slash]
            if not folder:
                continue
            self.tree.setdefault(folder, []).append(name)
            if folder == "gacha":
                rank = _STAR_FILES.get(name[slash + 1:])
                if rank is not None:
                    self.star_icons[rank] = name

    def open(self, name: str) -> IO[bytes]:
        """Open a member by its name inside the archive."""
        return self._zip.open(self._entries[name])

    def close(self) -> None:
        """Close the zip file."""
        self._zip.close()

    def __enter__(self) -> CardArchive:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


@dataclass
class PullResult:
    """The cards of one pull and how to show them."""

    five_characters: list[str] = field(default_factory=list)
    four_characters: list[str] = field(default_factory=list)
    five_weapons: list[str] = field(default_factory=list)
    four_weapons: list[str] = field(default_factory=list)
    three_weapons: list[str] = field(default_factory=list)
    # (background, card, star icon, element icon) in display order.
    tiles: list[tuple[str, str, str, str]] = field(default_factory=list)
    message: str = ""
    has_five_star: bool = False


def reply_names(names: Sequence[str], kind: int, prefix: str) -> str:
    """List the five-star names; kind 1 is characters, 2 weapons."""
    if kind == 1:
        head = "★五星角色★\n"
    elif kind == 2 and prefix:
        head = "\n★五星武器★\n"
    else:
        head = "★五星武器★\n"
    parts = [head]
    for name in names:
        match = _NAME_RE.search(name)
        if match is None:
            raise ValueError(f"bad card name {name!r}")
        parts.append(match.group(1) + " * ")
    return "".join(parts)


def _over(canvas: Image.Image, image: Image.Image, pos: tuple[int, int]) -> None:
    canvas.alpha_composite(image.convert("RGBA"), dest=pos)


class Gacha:
    """Draws cards from an archive, with a five-star every ninth pull."""

    def __init__(self, archive: CardArchive, rng: random.Random | None = None) -> None:
        self._archive = archive
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self.total = 0

    def _first(self, key: str) -> str:
        return self._archive.tree[key][0]

    def _icon(self, name: str) -> str:
        element = name[name.rfind("/") + 1:name.find("_")] + ".png"
        return self._first(element)

    def ten_pull(self, nums: int, five_star_mode: bool) -> PullResult:
        """Draw nums cards."""
        rng = self._rng
        tree = self._archive.tree
        picks: dict[str, list[str]] = {folder: [] for folder, _, _ in _ORDER}

        def draw(folder: str) -> None:
            picks[folder].append(rng.choice(tree.get(folder, [])))

        def draw_five() -> None:
            draw("five" if rng.randrange(2) == 0 else "five2")

        with self._lock:
            if self.total % 9 == 0:
                draw_five()
                nums -= 1
            if five_star_mode:
                for _ in range(nums):
                    draw_five()
            else:
                for _ in range(nums):
                    roll = rng.randrange(1000)
                    if roll <= 800:
                        draw("Three")
                    elif roll <= 885:
                        draw("four")
                    elif roll <= 970:
                        draw("four2")
                    elif roll <= 985:
                        draw("five")
                    else:
                        draw("five2")
                if not picks["four"] and not picks["four2"] and picks["Three"]:
                    picks["Three"].pop()
                    draw("four" if rng.randrange(2) == 0 else "four2")
                self.total += 1

        result = PullResult(
            five_characters=picks["five"],
            four_characters=picks["four"],
            five_weapons=picks["five2"],
            four_weapons=picks["four2"],
            three_weapons=picks["Three"],
        )
        for folder, rank, background in _ORDER:
            for card in picks[folder]:
                result.tiles.append(
                    (
                        self._first(background),
                        card,
                        self._archive.star_icons[rank],
                        self._icon(card),
                    )
                )
        if picks["five"]:
            result.message += reply_names(picks["five"], 1, result.message)
            result.has_five_star = True
        if picks["five2"]:
            result.message += reply_names(picks["five2"], 2, result.message)
            result.has_five_star = True
        return result

    def _paste(self, canvas: Image.Image, name: str, pos: tuple[int, int]) -> None:
        with self._archive.open(name) as member:
            with Image.open(member) as image:
                _over(canvas, image, pos)

    def render(self, result: PullResult) -> Image.Image:
        """Draw the pull result picture."""
        canvas = Image.new("RGBA", CANVAS_SIZE, CANVAS_COLOR)
        self._paste(canvas, self._first("bg0.jpg"), (0, 0))
        x = FIRST_TILE_X
        for i, tile in enumerate(result.tiles):
            if i > 0:
                x += TILE_STEP
            for name in tile:
                self._paste(canvas, name, (x, 0))
        self._paste(canvas, self._first("Reply.png"), SHARE_ICON_POS)
        return canvas