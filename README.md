# zeroplugins

This package holds the logic for a set of group-chat bot plugins. Each
module does the parsing, storage, lookup or image work for one plugin. It
does not receive messages and it does not send replies. Your bot does that
and calls these functions.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

### `zeroplugins.emojimix`

- `Segment` is one segment of a message.
- `face_to_emoji` turns a text or QQ face segment into an emoji code point.
- `match_emojis` finds a pair of known emoji in a message. It checks the segments first, then the raw text.
- `mix_urls` builds the two candidate sticker URLs.
- `find_mix` returns the first URL that answers HTTP 200, or `None`. By default it probes with a HEAD request. You can pass your own `head` callable.

### `zeroplugins.heisi`

- `Item` is a 10-byte packed record. `Item.url()` unpacks the picture URL. It raises `ValueError` on an unknown extension.
- `load_items` splits a packed table into items.
- `load_gallery` reads the six table files from a folder.
- `Gallery.pick(command, rng)` returns a random `Item` for one of the commands in `COMMANDS`.

### `zeroplugins.event`

- `AutoAcceptSettings` stores the auto-accept switches for friend requests, group invitations and the owner's own requests. It packs them into an integer with `from_int` and `to_int`. It can also decide whether a request is accepted at once, and switch a setting with `apply_toggle`.
- `encode_flag` turns a request flag into short base16384 text. `decode_flag` turns it back.
- `parse_decision` and `parse_toggle` parse the owner's commands.
- `format_invite_notice` and `format_friend_notice` build the text nodes sent to the owner.

### `zeroplugins.driftbottle`

- `Sea` is a SQLite store of bottles. `throw` adds a bottle. `pick` returns a random one and raises `LookupError` when the sea is empty.
- `make_bottle` creates a `Bottle`. Its id is a `crc64_iso` checksum of the bottle's contents.
- `validate_message` unescapes the text. It rejects messages shorter than 10 characters.
- `format_bottle` renders a picked bottle.

### `zeroplugins.funny`

- `JokeBook` is a SQLite table of jokes with `count` and `pick`.
- `tell_joke` fills the `%name` placeholder.

### `zeroplugins.epidemic`

- `parse_report` reads the report JSON into an `Area` tree and the update time.
- `find_city` searches the tree for a city.
- `query_epidemic(city, fetch)` fetches a report and looks up the city.
- `format_report` renders the result.

### `zeroplugins.genshin`

- `CardArchive` indexes the card pictures in a zip.
- `Gacha.ten_pull` draws cards. The rates depend on the pool. Every ninth pull adds a guaranteed five-star.
- `Gacha.render` draws the result as a Pillow image.
- `PullResult` holds the cards, the tiles in display order and the reply text. The reply text is built with `reply_names`.
- `is_five_star_mode` and `toggle_mode` handle the stored pool setting.

### `zeroplugins.github`

- `parse_command` reads `>github [-p |-t ]query`.
- `search_repository(query, get)` returns the best match. It raises `LookupError` when nothing is found.
- `net_get` is the default GET. It raises on any status other than 200.
- `format_repository` gives the text reply and `preview_url` gives the card picture. `notnull` returns the text, or `"None"` when it is empty.

### `zeroplugins.musiclib`

This module manages the local song library for a guessing game.

- `Config` loads and saves the settings as JSON. If no file exists, it writes the defaults.
- `list_playlists` lists the playlist folders.
- `set_default_playlist` and `delete_playlist` manage playlists.
- `music_lottery` and `pick_local_music` pick a random song.
- `cut_music` cuts three ten-second clips with the `ffmpeg` program, which must be on your `PATH`.

### `zeroplugins.guessgame`

- `parse_song` reads `title - singer - other.ext` file names into a `SongInfo`.
- `GuessGame` judges answers, hints and wait timeouts. Each call returns an `Outcome`, which says:
  - what to reply;
  - which clip to play;
  - whether the round is over.

### `zeroplugins.hearthstone`

- `search_cards` returns the ids and image URLs of up to five cards.
- `deck_image` returns a deck picture as a `base64://` reference.
- `match_deck_code` finds a deck code in a message.
- The helpers `extract_hash`, `search_url` and `deck_url` build the requests.

### `zeroplugins.fortune`

- `kind_index` and `kind_for` map background kinds to stored values.
- `layout`, `rows_num` and `offset` place the slip text in vertical columns.
- `cache_name` names cached pictures.
- `pick_background` decodes a picture from a zip.
- `draw` renders the card. It needs a TrueType font file.

## Example

```python
from zeroplugins.emojimix import match_emojis, mix_urls

pair = match_emojis([], "😀🥰")
if pair:
    print(mix_urls(*pair))
```

Some functions reach the network: `find_mix`, `search_repository`, `query_epidemic`, `search_cards` and `deck_image`. Each takes an optional fetching callable. You can pass your own HTTP client, or a stub in tests. When you pass none, they use `requests`.

## What it does not do

- It is not a bot. It has no connection to a chat service, no command routing, no rate limits and no permission checks. It also sends no messages or pictures.
- `musiclib` only records online playlist ids in the settings. It never downloads songs. If a playlist folder is empty, `music_lottery` raises `MusicLibraryError`.
- It ships no data files. You must supply:
  - the picture tables for `heisi`;
  - the card zip for `genshin`;
  - the joke database for `funny`;
  - the backgrounds, slip texts and font for `fortune`.