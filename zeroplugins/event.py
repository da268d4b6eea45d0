"""Friend requests and group invitations: auto-accept settings and flags."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

_B14_BASE = 0x4E00
_B14_TAIL = 0x3D00
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_INT_RE = re.compile(r"[+-]?[0-9]+")

_DECISION_RE = re.compile(
    r"(同意|拒绝)(申请|邀请)\s*([一-踀]{4})\s*(.*)", re.ASCII
)
_TOGGLE_RE = re.compile(r"(开启|关闭)自动同意(申请|邀请|主人)")

APPLY = "申请"
INVITE = "邀请"
MASTER = "主人"


def _b14_encode(data: bytes) -> str:
    out: list[str] = []
    for start in range(0, len(data), 7):
        chunk = data[start:start + 7]
        size = len(chunk)
        count = -(-8 * size // 14)
        value = int.from_bytes(chunk, "big") << (14 * count - 8 * size)
        out.extend(
            chr(_B14_BASE + ((value >> (14 * (count - 1 - i))) & 0x3FFF))
            for i in range(count)
        )
        if size < 7:
            out.append(chr(_B14_TAIL + size))
    return "".join(out)


def _b14_decode(text: str) -> bytes:
    tail = 7
    if text and 0x3D01 <= ord(text[-1]) <= 0x3D06:
        tail = ord(text[-1]) - _B14_TAIL
        text = text[:-1]
    values = []
    for ch in text:
        value = ord(ch) - _B14_BASE
        if not 0 <= value <= 0x3FFF:
            raise ValueError(f"invalid character {ch!r}")
        values.append(value)
    out = bytearray()
    for start in range(0, len(values), 4):
        group = values[start:start + 4]
        count = len(group)
        last = start + 4 >= len(values)
        if last and tail < 7:
            size = tail
        else:
            size = 7 if count == 4 else 14 * count // 8
        if 14 * count < 8 * size:
            raise ValueError("truncated data")
        value = 0
        for v in group:
            value = (value << 14) | v
        value >>= 14 * count - 8 * size
        out += value.to_bytes(size, "big")
    return bytes(out)


@dataclass
class AutoAcceptSettings:
    """Which requests are accepted without asking the owner."""

    apply: bool = False
    invite: bool = False
    master_off: bool = False

    @classmethod
    def from_int(cls, value: int) -> AutoAcceptSettings:
        """Unpack the settings from their stored integer."""
        return cls(bool(value & 0b001), bool(value & 0b010), bool(value & 0b100))

    def to_int(self) -> int:
        """Pack the settings into an integer for storage."""
        return (
            (0b001 if self.apply else 0)
            | (0b010 if self.invite else 0)
            | (0b100 if self.master_off else 0)
        )

    def should_accept_invite(self, from_superuser: bool) -> bool:
        """Whether a group invitation is accepted at once."""
        return self.invite or (not self.master_off and from_superuser)

    def should_accept_friend(self, from_superuser: bool) -> bool:
        """Whether a friend request is accepted at once."""
        return self.apply or (not self.master_off and from_superuser)

    def apply_toggle(self, option: str, target: str) -> None:
        """Switch one setting: option is 开启 or 关闭, target 申请, 邀请 or 主人."""
        if option not in ("开启", "关闭"):
            raise ValueError(f"unknown option {option!r}")
        on = option == "开启"
        if target == APPLY:
            self.apply = on
        elif target == INVITE:
            self.invite = on
        elif target == MASTER:
            self.master_off = not on
        else:
            raise ValueError(f"unknown target {target!r}")


def encode_flag(flag: str | int) -> str:
    """Encode a request flag as four base16384 characters."""
    if isinstance(flag, str):
        if not _INT_RE.fullmatch(flag):
            raise ValueError(f"invalid flag {flag!r}")
        number = int(flag)
    else:
        number = int(flag)
    if not _INT64_MIN <= number <= _INT64_MAX:
        raise ValueError(f"flag out of range: {flag!r}")
    raw = (number & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "big")
    return _b14_encode(raw[1:])


def decode_flag(text: str) -> str:
    """Decode four base16384 characters back into the decimal flag."""
    data = _b14_decode(text)[:7]
    raw = b"\x00" + data.ljust(7, b"\x00")
    return str(int.from_bytes(raw, "big", signed=True))


def parse_decision(text: str) -> tuple[bool, str, str, str] | None:
    """Parse '同意/拒绝 申请/邀请 <flag> [reason]' into (accept, target, flag, reason)."""
    match = _DECISION_RE.fullmatch(text)
    if match is None:
        return None
    cmd, target, encoded, other = match.groups()
    return cmd == "同意", target, decode_flag(encoded), other


def parse_toggle(text: str) -> tuple[str, str] | None:
    """Parse '开启/关闭自动同意申请/邀请/主人' into (option, target)."""
    match = _TOGGLE_RE.fullmatch(text)
    if match is None:
        return None
    return match.group(1), match.group(2)


def _stamp(now: datetime | str) -> str:
    if isinstance(now, datetime):
        return now.strftime("%Y-%m-%d %H:%M:%S")
    return now


def format_invite_notice(
    now: datetime | str,
    username: str,
    userid: int,
    groupname: str,
    groupid: int,
    encoded: str,
    accepted: bool,
) -> list[str]:
    """Build the forwarded notice nodes for a group invitation."""
    when = _stamp(now)
    body = (
        f"收到来自\n用户:[{username}]({userid})的群聊邀请"
        f"\n群聊:[{groupname}]({groupid})"
    )
    if accepted:
        return [f"已自动同意在{when}{body}\nflag:{encoded}"]
    return [
        f"在{when}{body}\n请在下方复制flag并在前面加上:\n同意/拒绝邀请，来决定同意还是拒绝",
        encoded,
    ]


def format_friend_notice(
    now: datetime | str,
    username: str,
    userid: int,
    comment: str,
    encoded: str,
    accepted: bool,
) -> list[str]:
    """Build the forwarded notice nodes for a friend request."""
    when = _stamp(now)
    body = f"收到来自\n用户:[{username}]({userid})\n的好友请求:{comment}"
    if accepted:
        return [f"已自动同意在{when}{body}\nflag:{encoded}"]
    return [
        f"在{when}{body}\n请在下方复制flag并在前面加上:\n同意/拒绝申请，来决定同意还是拒绝",
        encoded,
    ]