"""Drift bottles: messages thrown into a shared sea and picked at random."""

from __future__ import annotations

import sqlite3
import threading
from dataclasses import dataclass
from pathlib import Path

_ISO_POLY = 0xD800000000000000
_MASK64 = 0xFFFFFFFFFFFFFFFF
MIN_LENGTH = 10


def _make_table() -> list[int]:
    table = []
    for i in range(256):
        crc = i
        for _ in range(8):
            crc = (crc >> 1) ^ _ISO_POLY if crc & 1 else crc >> 1
        table.append(crc)
    return table


_TABLE = _make_table()


def crc64_iso(data: bytes) -> int:
    """CRC-64 with the ISO polynomial."""
    crc = _MASK64
    for byte in data:
        crc = _TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ _MASK64


@dataclass
class Bottle:
    """A message in the sea."""

    id: int
    qq: int
    name: str
    msg: str
    grp: int
    time: str


def make_bottle(qq: int, grp: int, time: str, name: str, msg: str) -> Bottle:
    """Create a bottle whose id hashes its contents."""
    digest = crc64_iso(f"{grp}_{qq}_{time}_{name}_{msg}".encode())
    if digest >= 1 << 63:
        digest -= 1 << 64
    return Bottle(id=digest, qq=qq, name=name, msg=msg, grp=grp, time=time)


def validate_message(msg: str) -> str:
    """Unescape the message text and check that it is long enough."""
    text = msg.replace("&#91;", "[").replace("&#93;", "]").replace("&amp;", "&")
    if len(text) < MIN_LENGTH:
        raise ValueError("需要投递的内容过少( ")
    return text


def format_bottle(bottle: Bottle, botname: str) -> str:
    """Render a picked bottle as a chat message."""
    return (
        f"{botname}试着帮你捞出来了这个~\nID:{bottle.id}"
        f"\n投递人: {bottle.name}({bottle.qq})"
        f"\n群号: {bottle.grp}"
        f"\n时间: {bottle.time}"
        f"\n内容: \n{bottle.msg}"
    )


class Sea:
    """The database that holds every thrown bottle."""

    def __init__(self, path: str | Path) -> None:
        self._lock = threading.Lock()
        self._db = sqlite3.connect(str(path), check_same_thread=False)
        with self._lock, self._db:
            self._db.execute(
                'CREATE TABLE IF NOT EXISTS "global" ('
                "id INTEGER PRIMARY KEY NOT NULL, qq INTEGER, Name TEXT, "
                "msg TEXT, grp INTEGER, time TEXT)"
            )

    def throw(self, bottle: Bottle) -> None:
        """Store a bottle, replacing one with the same id."""
        with self._lock, self._db:
            self._db.execute(
                'REPLACE INTO "global" (id, qq, Name, msg, grp, time) VALUES (?, ?, ?, ?, ?, ?)',
                (bottle.id, bottle.qq, bottle.name, bottle.msg, bottle.grp, bottle.time),
            )

    def pick(self) -> Bottle:
        """Return a random bottle; LookupError if the sea is empty."""
        with self._lock:
            row = self._db.execute(
                'SELECT id, qq, Name, msg, grp, time FROM "global" ORDER BY RANDOM() LIMIT 1'
            ).fetchone()
        if row is None:
            raise LookupError("the sea is empty")
        return Bottle(id=row[0], qq=row[1], name=row[2], msg=row[3], grp=row[4], time=row[5])

    def close(self) -> None:
        """Close the database."""
        with self._lock:
            self._db.close()

    def __enter__(self) -> Sea:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()