"""Data model for MPRIS player properties and query options."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

MAX_OUTPUT_LENGTH = 1024
"""Size of a text field, terminator included; stored strings hold one less."""

UNKNOWN = "unknown"


@dataclass
class Metadata:
    """Track metadata reported by an MPRIS player."""

    length: int = 0
    track_number: int = 0
    bitrate: int = 0
    disc_number: int = 0
    album_artist: str = ""
    composer: str = ""
    genre: str = ""
    artist: str = ""
    comment: str = ""
    track_id: str = ""
    album: str = ""
    content_created: str = ""
    title: str = ""
    url: str = ""
    art_url: str = ""

    @classmethod
    def unknown(cls) -> Metadata:
        """Return metadata with the descriptive fields set to ``"unknown"``."""
        return cls(
            album_artist=UNKNOWN,
            composer=UNKNOWN,
            genre=UNKNOWN,
            artist=UNKNOWN,
            album=UNKNOWN,
            title=UNKNOWN,
        )


@dataclass
class Properties:
    """Player properties, as exposed by the MPRIS player interface."""

    volume: float = 0.0
    position: int = 0
    can_control: bool = False
    can_go_next: bool = False
    can_go_previous: bool = False
    can_play: bool = False
    can_pause: bool = False
    can_seek: bool = False
    shuffle: bool = False
    player_name: str = ""
    loop_status: str = ""
    playback_status: str = ""
    metadata: Metadata = field(default_factory=Metadata)


class PlayerStatus(enum.Enum):
    """Which players qualify when looking for the current one."""

    MUST_BE_PLAYING = 0
    ANY_PLAYING = 1
    ANY = 2


@dataclass
class Options:
    """Selection options: preferred player names and the status filter."""

    player_names: list[str] = field(default_factory=list)
    status: PlayerStatus = PlayerStatus.MUST_BE_PLAYING

    @property
    def player_count(self) -> int:
        """Number of player names to match."""
        return len(self.player_names)