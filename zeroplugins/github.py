"""GitHub repository search."""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlencode

import requests

API = "https://api.github.com/search/repositories"
PREVIEW = "https://opengraph.githubassets.com/0/"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/88.0.4324.182 Safari/537.36"
)

_COMMAND_RE = re.compile(r">github\s(-.{1,10}? )?(.*)")


def parse_command(text: str) -> tuple[str, str] | None:
    """Split '>github [-x ]query' into (option, query); None if it is not one."""
    match = _COMMAND_RE.fullmatch(text)
    if match is None:
        return None
    return match.group(1) or "", match.group(2)


def notnull(text: str) -> str:
    """Return the text, or 'None' when it is empty."""
    return text or "None"


def net_get(url: str, headers: Mapping[str, str]) -> bytes:
    """GET a URL; raise on any status other than 200."""
    resp = requests.get(url, headers=dict(headers), timeout=30)
    if resp.status_code != 200:
        raise requests.HTTPError(f"code {resp.status_code}")
    return resp.content


def search_repository(
    query: str,
    get: Callable[[str, Mapping[str, str]], bytes] | None = None,
) -> dict[str, Any]:
    """Return the best-matching repository; LookupError when there is none."""
    url = f"{API}?{urlencode({'q': query})}"
    body = (get or net_get)(url, {"User-Agent": USER_AGENT})
    info = json.loads(body) if body else {}
    if not _int(info.get("total_count")):
        raise LookupError("没有找到这样的仓库")
    items = info.get("items") or []
    if not items:
        raise LookupError("没有找到这样的仓库")
    return items[0]


def _int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value))
        except ValueError:
            return 0
    return 0


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def format_repository(repo: Mapping[str, Any]) -> str:
    """Render a repository as the text reply."""
    license_key = _str((repo.get("license") or {}).get("key"))
    return (
        f"{_str(repo.get('full_name'))}\n"
        f"Description: {_str(repo.get('description'))}\n"
        f"Star/Fork/Issue: {_int(repo.get('watchers'))}/{_int(repo.get('forks'))}"
        f"/{_int(repo.get('open_issues'))}\n"
        f"Language: {notnull(_str(repo.get('language')))}\n"
        f"License: {notnull(license_key.upper())}\n"
        f"Last pushed: {_str(repo.get('pushed_at'))}\n"
        f"Jump: {_str(repo.get('html_url'))}\n"
    )


def preview_url(full_name: str) -> str:
    """URL of the repository's preview card picture."""
    return PREVIEW + full_name