"""Print the status of the current MPRIS player using a text template."""

from __future__ import annotations

import argparse
from typing import Sequence

from .model import Options, PlayerStatus, Properties
from .status import get_mpris_player_status
from .textreplace import str_replace

INFO_PLAYER_NAME = "%player_name"
INFO_TRACK_NAME = "%track_name"
INFO_TRACK_NUMBER = "%track_number"
INFO_TRACK_LENGTH = "%track_length"
INFO_ARTIST_NAME = "%artist_name"
INFO_ALBUM_NAME = "%album_name"
INFO_ALBUM_ARTIST = "%album_artist"
INFO_ART_URL = "%art_url"
INFO_BITRATE = "%bitrate"
INFO_COMMENT = "%comment"
INFO_PLAYBACK_STATUS = "%play_status"
INFO_SHUFFLE_MODE = "%shuffle"
INFO_VOLUME = "%volume"
INFO_LOOP_STATUS = "%loop_status"
INFO_POSITION = "%position"
INFO_FULL = "%full"

INFO_DEFAULT_STATUS = f"{INFO_TRACK_NAME} - {INFO_ALBUM_NAME} - {INFO_ARTIST_NAME}"
INFO_FULL_STATUS = (
    f"Player name:\t{INFO_PLAYER_NAME}\n"
    f"Play status:\t{INFO_PLAYBACK_STATUS}\n"
    f"Track:\t\t{INFO_TRACK_NAME}\n"
    f"Artist:\t\t{INFO_ARTIST_NAME}\n"
    f"Album:\t\t{INFO_ALBUM_NAME}\n"
    f"Album Artist:\t{INFO_ALBUM_ARTIST}\n"
    f"Art URL:\t{INFO_ART_URL}\n"
    f"Track:\t\t{INFO_TRACK_NUMBER}\n"
    f"Length:\t\t{INFO_TRACK_LENGTH}\n"
    f"Volume:\t\t{INFO_VOLUME}\n"
    f"Loop status:\t{INFO_LOOP_STATUS}\n"
    f"Shuffle:\t{INFO_SHUFFLE_MODE}\n"
    f"Position:\t{INFO_POSITION}\n"
    f"Bitrate:\t{INFO_BITRATE}\n"
    f"Comment:\t{INFO_COMMENT}"
)

TRUE_LABEL = "true"
FALSE_LABEL = "false"


def _seconds(microseconds: int, width: int) -> str:
    return f"{microseconds / 1000000.0:.2f}s"[:width]


def format_info(props: Properties, fmt: str) -> str:
    """Fill the placeholders of ``fmt`` with the values in ``props``.

    Literal ``\\n`` and ``\\t`` sequences become newline and tab, and
    ``%full`` expands to the full status template.
    """
    meta = props.metadata
    replacements = [
        ("\\n", "\n"),
        ("\\t", "\t"),
        (INFO_FULL, INFO_FULL_STATUS),
        (INFO_PLAYER_NAME, props.player_name),
        (INFO_SHUFFLE_MODE, TRUE_LABEL if props.shuffle else FALSE_LABEL),
        (INFO_PLAYBACK_STATUS, props.playback_status),
        (INFO_VOLUME, f"{props.volume:.2f}"[:4]),
        (INFO_LOOP_STATUS, props.loop_status),
        (INFO_POSITION, _seconds(props.position, 10)),
        (INFO_TRACK_NAME, meta.title),
        (INFO_ARTIST_NAME, meta.artist),
        (INFO_ALBUM_ARTIST, meta.album_artist),
        (INFO_ALBUM_NAME, meta.album),
        (INFO_TRACK_LENGTH, _seconds(meta.length, 14)),
        (INFO_TRACK_NUMBER, str(meta.track_number)[:5]),
        (INFO_BITRATE, str(meta.bitrate)[:5]),
        (INFO_COMMENT, meta.comment),
        (INFO_ART_URL, meta.art_url),
    ]
    output = fmt
    for search, replace in replacements:
        output = str_replace(output, search, replace)
    return output


def main(argv: Sequence[str] | None = None) -> int:
    """Print the full status of a playing Spotify player."""
    parser = argparse.ArgumentParser(description="Show the status of the playing Spotify player.")
    parser.parse_args(argv)
    options = Options(player_names=["Spotify"], status=PlayerStatus.MUST_BE_PLAYING)
    props = get_mpris_player_status(options)
    print(format_info(props, INFO_FULL_STATUS))
    return 0