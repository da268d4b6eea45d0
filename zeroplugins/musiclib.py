"""Local song library for the guessing game: configuration, playlists and clips."""

from __future__ import annotations

import json
import random
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

# Points in a song where the three clips start (hh:mm:ss).
CUT_TIMES = ("00:00:05", "00:00:30", "00:01:00")
CLIP_SECONDS = "10"

DEFAULT_PLAYLIST_NAME = "FM"
DEFAULT_PLAYLIST_ID = 3136952023

BAD_NAME_MESSAGE = "歌单名称错误，可以发送“歌单列表”获取歌单名称"


class MusicLibraryError(Exception):
    """A library operation could not be completed."""


class _Entry(Protocol):
    @property
    def name(self) -> str: ...

    def is_dir(self) -> bool: ...


@dataclass
class PlaylistBinding:
    """A local playlist bound to an online playlist id."""

    name: str
    id: int

    def to_json(self) -> dict[str, Any]:
        return {"name": self.name, "id": self.id}


@dataclass
class DefaultList:
    """The playlist a group plays by default."""

    group_id: int
    name: str

    def to_json(self) -> dict[str, Any]:
        return {"gid": self.group_id, "name": self.name}


@dataclass
class Playlist:
    """A playlist folder found in the library."""

    name: str
    number: int
    id: int = 0


def _default_music_path() -> str:
    return str(Path.cwd() / "data" / "guessmusic" / "music") + "/"


@dataclass
class Config:
    """User settings of the song library."""

    music_path: str = field(default_factory=_default_music_path)
    local: bool = True
    api: bool = True
    cookie: str = ""
    playlist: list[PlaylistBinding] = field(
        default_factory=lambda: [PlaylistBinding(DEFAULT_PLAYLIST_NAME, DEFAULT_PLAYLIST_ID)]
    )
    defaultlist: list[DefaultList] = field(default_factory=list)

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """Read the settings; write and return the defaults if there are none."""
        target = Path(path)
        if not target.exists():
            config = cls()
            config.save(target)
            return config
        data = json.loads(target.read_text(encoding="utf-8"))
        return cls(
            music_path=data.get("musicPath") or "",
            local=bool(data.get("local")),
            api=bool(data.get("api")),
            cookie=data.get("cookie") or "",
            playlist=[
                PlaylistBinding(p.get("name") or "", int(p.get("id") or 0))
                for p in data.get("playlist") or []
            ],
            defaultlist=[
                DefaultList(int(d.get("gid") or 0), d.get("name") or "")
                for d in data.get("defaultlist") or []
            ],
        )

    def save(self, path: str | Path) -> None:
        """Write the settings as JSON."""
        doc = {
            "musicPath": self.music_path,
            "local": self.local,
            "api": self.api,
            "cookie": self.cookie,
            "playlist": [p.to_json() for p in self.playlist],
            "defaultlist": [d.to_json() for d in self.defaultlist],
        }
        Path(path).write_text(json.dumps(doc, ensure_ascii=False) + "\n", encoding="utf-8")

    def default_for(self, group_id: int) -> str | None:
        """The first default playlist set for a group, if any."""
        for entry in self.defaultlist:
            if entry.group_id == group_id:
                return entry.name
        return None


def list_playlists(config: Config) -> list[Playlist]:
    """Every playlist folder in the library, sorted by name."""
    root = Path(config.music_path)
    bound = {b.name: b.id for b in config.playlist if b.id != 0}
    root.mkdir(parents=True, exist_ok=True)
    entries = sorted(root.iterdir(), key=lambda p: p.name)
    if not entries:
        raise MusicLibraryError("所设置的歌库不存在任何歌单！")
    playlists = []
    for entry in entries:
        if not entry.is_dir():
            continue
        try:
            count = sum(1 for _ in entry.iterdir())
        except OSError:
            continue
        playlists.append(Playlist(entry.name, count, bound.get(entry.name, 0)))
    return playlists


def set_default_playlist(config: Config, group_id: int, name: str) -> None:
    """Record a group's default playlist; the playlist must exist."""
    if group_id == 0:
        raise PermissionError("无权设置！")
    if not any(p.name == name for p in list_playlists(config)):
        raise LookupError(BAD_NAME_MESSAGE)
    config.defaultlist.append(DefaultList(group_id, name))


def delete_playlist(config: Config, name: str) -> None:
    """Unbind a playlist by its id, or delete it with its files by its name."""
    playlists = list_playlists(config)
    for playlist in playlists:
        if name == playlist.name or name == str(playlist.id):
            if name == playlist.name:
                shutil.rmtree(Path(config.music_path) / name)
            found = playlist.name
            break
    else:
        raise LookupError(BAD_NAME_MESSAGE)
    config.playlist = [b for b in config.playlist if b.name != found]


def pick_local_music(entries: Sequence[_Entry], rng: random.Random | None = None) -> str:
    """Pick a random file name from a folder listing; '' if it holds no files."""
    if not entries:
        raise LookupError("empty playlist")
    if len(entries) == 1:
        only = entries[0]
        return "" if only.is_dir() else only.name
    if all(entry.is_dir() for entry in entries):
        return ""
    chooser = rng or random
    while True:
        entry = chooser.choice(entries)
        if not entry.is_dir():
            return entry.name


def music_lottery(
    config: Config, list_name: str, rng: random.Random | None = None
) -> tuple[Path, str]:
    """Pick a random song of a playlist; return its folder and file name."""
    try:
        playlists = list_playlists(config)
    except MusicLibraryError as exc:
        raise MusicLibraryError(f"获取列表错误,{exc}") from exc
    ids = {p.name: p.id for p in playlists}
    if list_name not in ids:
        raise LookupError("指定的歌单不存在与列表当中")
    folder = Path(config.music_path) / list_name
    folder.mkdir(parents=True, exist_ok=True)
    entries = sorted(folder.iterdir(), key=lambda p: p.name)
    if not entries:
        if ids[list_name] == 0 or not config.api:
            raise MusicLibraryError("本地歌单数据为0")
        raise MusicLibraryError("本地歌单数据为0,API下载歌曲失败")
    return folder, pick_local_music(entries, rng)


def cut_music(source: str | Path, output_dir: str | Path) -> list[Path]:
    """Cut three ten-second clips 0.wav, 1.wav and 2.wav out of a song with ffmpeg."""
    out = Path(output_dir)
    try:
        out.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MusicLibraryError(f"[生成歌曲目录错误]ERROR: {exc}") from exc
    clips = [out / f"{i}.wav" for i in range(len(CUT_TIMES))]
    args = ["ffmpeg", "-y", "-i", str(source)]
    for start, clip in zip(CUT_TIMES, clips):
        args += ["-ss", start, "-t", CLIP_SECONDS, str(clip)]
    args.append("-hide_banner")
    try:
        proc = subprocess.run(args, capture_output=True, check=False)
    except OSError as exc:
        raise MusicLibraryError(f"[生成歌曲错误]ERROR: {exc}") from exc
    if proc.returncode != 0:
        stderr = proc.stderr.decode("utf-8", "replace") if proc.stderr else ""
        raise MusicLibraryError(f"[生成歌曲错误]ERROR: {stderr}")
    return clips