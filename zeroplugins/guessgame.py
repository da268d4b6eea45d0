"""The song guessing round: answer parsing and the hint and attempt counting."""

from __future__ import annotations

from dataclasses import dataclass

MUSIC_TYPES = "mp3;MP3;wav;WAV;amr;AMR;3gp;3GP;3gpp;3GPP;acc;ACC"
CLIP_COUNT = 3
MAX_WRONG_ANSWERS = 6

_LISTEN = "\n\n下面欣赏猜歌的歌曲"


@dataclass
class SongInfo:
    """What a song file's name says about the song."""

    filename: str
    title: str
    singer: str
    alias: str
    answer: str


def parse_song(filename: str) -> SongInfo:
    """Read 'title - singer - other.ext' from a file name."""
    ext = filename.split(".")[-1]
    if ext not in MUSIC_TYPES:
        raise ValueError(
            f"抽取到了歌曲：\n{filename}\n该歌曲不是音乐后缀，请联系bot主人修改"
        )
    parts = filename.replace("." + ext, "").split(" - ")
    if len(parts) == 1:
        raise ValueError(
            f"抽取到了歌曲：\n{filename}\n该歌曲命名不符合命名规则，请联系bot主人修改"
        )
    answer = f"歌名:{parts[0]}\n歌手:{parts[1]}"
    alias = ""
    if len(parts) > 2:
        alias = parts[2]
        answer += "\n其他信息:\n" + alias.replace("&", "\n")
    return SongInfo(filename, parts[0], parts[1], alias, answer)


@dataclass
class Outcome:
    """What the bot answers to one event of the round."""

    reply: str = ""
    clip: int | None = None
    finished: bool = False
    play_song: bool = False


def _matches(field: str, answer: str) -> bool:
    return answer in field or field.casefold() == answer.casefold()


class GuessGame:
    """One round: three clips, hints, and a limited number of wrong answers."""

    def __init__(self, song: SongInfo, owner_id: int) -> None:
        self.song = song
        self.owner_id = owner_id
        self.music_count = 0
        self.answer_count = 0
        self.waiting = True
        self.finished = False

    def _end(self, reply: str) -> Outcome:
        self.finished = True
        self.waiting = False
        return Outcome(reply=reply, finished=True, play_song=True)

    def guess(self, answer: str, user_id: int) -> Outcome:
        """Judge a reply; the first '-' of the message is dropped."""
        if self.finished:
            raise RuntimeError("the game is over")
        text = answer.replace("-", "", 1)
        song = self.song
        if text == "取消":
            if user_id == self.owner_id:
                return self._end(f"游戏已取消，猜歌答案是\n{song.answer}\n\n{_LISTEN}")
            return Outcome(reply="你无权限取消")
        if text == "提示":
            return self.hint()
        if _matches(song.title, text):
            return self._end(f"太棒了，你猜对歌曲名了！答案是\n{song.answer}{_LISTEN}")
        if _matches(song.singer, text):
            return self._end(f"太棒了，你猜对歌手名了！答案是\n{song.answer}{_LISTEN}")
        if _matches(song.alias, text):
            return self._end(f"太棒了，你猜对出处了！答案是\n{song.answer}{_LISTEN}")
        self.music_count += 1
        if self.music_count >= CLIP_COUNT:
            self.waiting = False
            if self.answer_count < MAX_WRONG_ANSWERS:
                self.answer_count += 1
                return Outcome(reply="答案不对哦，加油啊~")
            return self._end(f"次数到了，没能猜出来。答案是\n{song.answer}{_LISTEN}")
        self.answer_count += 1
        return Outcome(reply="答案不对，再听这段音频，要仔细听哦", clip=self.music_count)

    def hint(self) -> Outcome:
        """Play the next clip, if one is left."""
        self.music_count += 1
        if self.music_count >= CLIP_COUNT:
            self.waiting = False
            return Outcome(reply="已经没有提示了哦")
        return Outcome(reply="再听这段音频，要仔细听哦", clip=self.music_count)

    def on_wait_timeout(self) -> Outcome:
        """Nobody answered for a while: play the next clip, if one is left."""
        self.music_count += 1
        if self.music_count >= CLIP_COUNT:
            self.waiting = False
            return Outcome()
        return Outcome(reply="好像有些难度呢，再听这段音频，要仔细听哦", clip=self.music_count)