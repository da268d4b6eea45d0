"""Jokes picked from a database, with the listener's name filled in."""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path


class JokeBook:
    """A database of jokes."""

    def __init__(self, path: str | Path) -> None:
        self._lock = threading.Lock()
        self._db = sqlite3.connect(str(path), check_same_thread=False)
        with self._lock, self._db:
            self._db.execute(
                "CREATE TABLE IF NOT EXISTS jokes (id INTEGER PRIMARY KEY NOT NULL, text TEXT)"
            )

    def count(self) -> int:
        """Number of jokes in the book."""
        with self._lock:
            return self._db.execute("SELECT COUNT(*) FROM jokes").fetchone()[0]

    def pick(self) -> str:
        """Return a random joke; LookupError if there are none."""
        with self._lock:
            row = self._db.execute(
                "SELECT text FROM jokes ORDER BY RANDOM() LIMIT 1"
            ).fetchone()
        if row is None:
            raise LookupError("no jokes")
        return row[0]

    def close(self) -> None:
        """Close the database."""
        with self._lock:
            self._db.close()

    def __enter__(self) -> JokeBook:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def tell_joke(text: str, name: str) -> str:
    """Put the name into every %name placeholder."""
    return text.replace("%name", name)