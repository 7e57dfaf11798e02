# kissmpris

kissmpris is a small library that tells you what a media player is doing. It
talks to the session bus using the D-Bus wire protocol itself and needs no
native bindings or third-party packages. It lists the MPRIS players that are
running, reads their playback state and track metadata, and picks one to
report on.

## Installation

```
pip install kissmpris
```

## Command line

```
kissmpris-demo
```

The command looks for a player whose identity or bus name is exactly
`Spotify` and that is currently playing. It prints the full status report:
player name, play status, track title, artist, album, album artist, art URL,
track number, length, volume, loop status, shuffle, position, bitrate and
comment. If no player matches, the fields are empty or zero. The command has
no options apart from `--help`.

## Library use

```python
from kissmpris.model import Options, PlayerStatus
from kissmpris.status import get_mpris_player_status
from kissmpris.wire import connect_session
from kissmpris.demo import format_info

options = Options(player_names=["Spotify"], status=PlayerStatus.MUST_BE_PLAYING)
with connect_session() as bus:
    props = get_mpris_player_status(options, bus)

print(format_info(props, "%track_name - %album_name - %artist_name"))
```

If you call `get_mpris_player_status(options)` without a bus, it opens a
private session-bus connection and closes it when done. If that connection
fails, it writes the error to stderr and returns an empty `Properties`.

### Choosing a player

A player name in `Options.player_names` matches a player when it equals the
player's `Identity` property or its bus name. `PlayerStatus` decides which
players count:

- `MUST_BE_PLAYING`: a named player, and only while it is playing.
- `ANY_PLAYING`: any player that is playing, and any named player whatever its status.
- `ANY`: any player that is playing, paused or stopped, and any named player.

`select_player(players, options)` applies these rules to a list of `Player`
objects. When more than one player matches, the last one wins. When none
matches, you get an empty `Properties`.

### Data model

`kissmpris.model` defines `Properties`, which holds the volume, position,
`can_*` flags, shuffle, player name, loop status, playback status and
`metadata`. It also defines `Metadata`, which holds length, track number,
bitrate, title, artist, album, album artist, comment, track id, URL, art URL
and more. `Metadata.unknown()` returns metadata whose descriptive fields are
set to `"unknown"`. Lengths and positions are in microseconds. Text fields are
cut to 1023 characters.

### Format placeholders

`format_info(props, fmt)` replaces these placeholders:

`%player_name`, `%play_status`, `%shuffle`, `%volume`, `%loop_status`,
`%position`, `%track_name`, `%artist_name`, `%album_artist`, `%album_name`,
`%track_length`, `%track_number`, `%bitrate`, `%comment`, `%art_url`.

`%full` expands to the full multi-line report. The literal sequences `\n` and
`\t` become a newline and a tab. Position and length are shown in seconds with
two decimals, for example `12.50s`. Shuffle is shown as `true` or `false`.

### Lower-level pieces

- `kissmpris.wire`: `marshal` and `unmarshal` for D-Bus wire data, and
  `session_bus_address` to read `DBUS_SESSION_BUS_ADDRESS`. It also provides
  `connect_session` and a blocking `Connection`, which has `call` and `close`
  and works as a context manager. Method calls time out after 100 ms by
  default. Error replies, timeouts and transport failures raise `DBusError`.
- `kissmpris.bus`: `load_players` lists up to 20 bus names under
  `org.mpris.MediaPlayer2`. `load_properties`, `get_player_identity` and
  `load_metadata` read a player's properties.
- `kissmpris.variant`: the `Variant` type, and `extract_string`,
  `extract_int32`, `extract_int64`, `extract_double` and `extract_boolean`.
  Each of these raises `VariantError` when given something that is not a variant.
- `kissmpris.textreplace`: `str_replace`, a search-and-replace whose result is
  capped at 1023 characters.

## What it does not do

- It only reads player state. It does not send play, pause, next or other
  control commands to players.
- It connects only to a session bus reachable over a Unix socket (a `path=`
  or `abstract=` address), and it authenticates with the EXTERNAL mechanism.
- It does not watch for changes. Each query is a single snapshot.

## Running the tests

```
pip install -e ".[test]"
pytest
```