from datetime import datetime

import pytest

from zeroplugins.event import (
    AutoAcceptSettings,
    decode_flag,
    encode_flag,
    format_friend_notice,
    format_invite_notice,
    parse_decision,
    parse_toggle,
)


@pytest.mark.parametrize("value", range(8))
def test_settings_round_trip(value):
    assert AutoAcceptSettings.from_int(value).to_int() == value


def test_from_int_bits():
    s = AutoAcceptSettings.from_int(0b101)
    assert (s.apply, s.invite, s.master_off) == (True, False, True)


def test_should_accept_invite():
    s = AutoAcceptSettings()
    assert s.should_accept_invite(True) is True
    assert s.should_accept_invite(False) is False
    s.invite = True
    assert s.should_accept_invite(False) is True
    s = AutoAcceptSettings(master_off=True)
    assert s.should_accept_invite(True) is False


def test_should_accept_friend():
    s = AutoAcceptSettings(master_off=True)
    assert s.should_accept_friend(True) is False
    s.apply = True
    assert s.should_accept_friend(False) is True


def test_apply_toggle():
    s = AutoAcceptSettings()
    s.apply_toggle("开启", "申请")
    assert s.apply is True
    s.apply_toggle("关闭", "主人")
    assert s.master_off is True
    s.apply_toggle("开启", "主人")
    assert s.master_off is False
    s.apply_toggle("开启", "邀请")
    assert s.to_int() == 0b011


def test_apply_toggle_unknown():
    with pytest.raises(ValueError):
        AutoAcceptSettings().apply_toggle("开启", "别的")
    with pytest.raises(ValueError):
        AutoAcceptSettings().apply_toggle("也许", "申请")


def test_encode_zero():
    assert encode_flag(0) == "一一一一"


@pytest.mark.parametrize("flag", [0, 1, 123456789, 2**56 - 1])
def test_flag_round_trip(flag):
    encoded = encode_flag(str(flag))
    assert len(encoded) == 4
    assert all(0x4E00 <= ord(ch) <= 0x8DFF for ch in encoded)
    assert decode_flag(encoded) == str(flag)


def test_negative_flag_drops_top_byte():
    assert decode_flag(encode_flag(-1)) == str(2**56 - 1)


def test_encode_rejects_bad_flags():
    with pytest.raises(ValueError):
        encode_flag("abc")
    with pytest.raises(ValueError):
        encode_flag(str(2**63))


def test_decode_rejects_bad_text():
    with pytest.raises(ValueError):
        decode_flag("abcd")


def test_parse_decision():
    enc = encode_flag(987654321)
    assert parse_decision("同意申请 " + enc + " 欢迎") == (True, "申请", "987654321", "欢迎")
    assert parse_decision("拒绝邀请" + enc) == (False, "邀请", "987654321", "")
    assert parse_decision("同意申请abc") is None


def test_parse_toggle():
    assert parse_toggle("开启自动同意邀请") == ("开启", "邀请")
    assert parse_toggle("关闭自动同意主人") == ("关闭", "主人")
    assert parse_toggle("开启自动同意邀请啊") is None


def test_invite_notice():
    enc = encode_flag(42)
    now = datetime(2022, 1, 2, 3, 4, 5)
    accepted = format_invite_notice(now, "alice", 10001, "grp", 20002, enc, True)
    assert len(accepted) == 1
    assert accepted[0].startswith("已自动同意在2022-01-02 03:04:05")
    assert accepted[0].endswith("flag:" + enc)
    pending = format_invite_notice(now, "alice", 10001, "grp", 20002, enc, False)
    assert len(pending) == 2
    assert pending[1] == enc
    assert "群聊:[grp](20002)" in pending[0]


def test_friend_notice():
    enc = encode_flag(7)
    pending = format_friend_notice("now", "bob", 30003, "hi there", enc, False)
    assert pending[1] == enc
    assert "的好友请求:hi there" in pending[0]
    accepted = format_friend_notice("now", "bob", 30003, "hi", enc, True)
    assert accepted == [f"已自动同意在now收到来自\n用户:[bob](30003)\n的好友请求:hi\nflag:{enc}"]