"""City epidemic statistics lookup."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import requests

TXURL = (
    "https://api.inews.qq.com/newsqa/v1/query/inner/publish/modules/list"
    "?modules=statisGradeCityDetail,diseaseh5Shelf"
)


def _int(value: Any) -> int:
    return int(value) if value else 0


@dataclass
class Area:
    """Statistics of one region and its sub-regions."""

    name: str = ""
    today_confirm: int = 0
    today_wzz_add: Any = None
    now_confirm: int = 0
    confirm: int = 0
    dead: int = 0
    heal: int = 0
    grade: str = ""
    wzz: int = 0
    children: list[Area] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> Area:
        """Build an area tree from its decoded JSON object."""
        today = data.get("today") or {}
        total = data.get("total") or {}
        return cls(
            name=data.get("name") or "",
            today_confirm=_int(today.get("confirm")),
            today_wzz_add=today.get("wzz_add"),
            now_confirm=_int(total.get("nowConfirm")),
            confirm=_int(total.get("confirm")),
            dead=_int(total.get("dead")),
            heal=_int(total.get("heal")),
            grade=total.get("grade") or "",
            wzz=_int(total.get("wzz")),
            children=[cls.from_json(c) for c in data.get("children") or [] if c is not None],
        )


def find_city(area: Area | None, name: str) -> Area | None:
    """Search the tree depth first for an area with this name."""
    if area is None:
        return None
    if area.name == name:
        return area
    for child in area.children:
        if child.name == name:
            return child
        found = find_city(child, name)
        if found is not None:
            return found
    return None


def parse_report(data: bytes | str | dict[str, Any]) -> tuple[Area, str]:
    """Return the root area and the last update time of a report."""
    doc = json.loads(data) if isinstance(data, (bytes, str)) else data
    shelf = ((doc.get("data") or {}).get("diseaseh5Shelf")) or {}
    tree = shelf.get("areaTree") or []
    if not tree:
        raise ValueError("empty area tree")
    return Area.from_json(tree[0]), shelf.get("lastUpdateTime") or ""


def _default_fetch(url: str) -> bytes:
    resp = requests.get(url, timeout=30)
    resp.raise_for_status()
    return resp.content


def query_epidemic(
    city: str, fetch: Callable[[str], bytes] | None = None
) -> tuple[Area | None, str]:
    """Fetch the report and look up a city; the area is None if not found."""
    if not city:
        raise ValueError("你还没有输入城市名字呢！")
    root, updated = parse_report((fetch or _default_fetch)(TXURL))
    return find_city(root, city), updated


def _show(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def format_report(area: Area, updated: str) -> str:
    """Render an area's statistics as a chat message."""
    return (
        f"【{area.name}】疫情数据\n"
        f"新增人数：{area.today_confirm}\n"
        f"现有确诊：{area.now_confirm}\n"
        f"累计确诊：{area.confirm}\n"
        f"治愈人数：{area.heal}\n"
        f"死亡人数：{area.dead}\n"
        f"无症状人数：{area.wzz}\n"
        f"新增无症状：{_show(area.today_wzz_add)}\n"
        f"更新时间：\n『{updated}』"
    )