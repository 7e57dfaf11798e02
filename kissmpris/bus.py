"""Reading MPRIS players and their properties from a message bus."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from .model import Metadata, Properties
from .variant import (
    Variant,
    VariantError,
    extract_boolean,
    extract_double,
    extract_int32,
    extract_int64,
    extract_string,
)
from .wire import DEFAULT_TIMEOUT, DBusError

MPRIS_PLAYER_NAMESPACE = "org.mpris.MediaPlayer2"
MPRIS_PLAYER_PATH = "/org/mpris/MediaPlayer2"
MPRIS_PLAYER_INTERFACE = "org.mpris.MediaPlayer2.Player"
MPRIS_ARG_PLAYER_IDENTITY = "Identity"

DBUS_DESTINATION = "org.freedesktop.DBus"
DBUS_PATH = "/"
DBUS_INTERFACE = "org.freedesktop.DBus"
DBUS_PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"

MAX_PLAYERS = 20

_UINT16 = 0xFFFF
_UINT64 = (1 << 64) - 1


@dataclass
class Player:
    """A player found on the bus under the MPRIS namespace."""

    namespace: str
    properties: Properties = field(default_factory=Properties)
    name: str | None = None
    active: bool = False


def _entries(value: Any) -> Iterable[tuple[Any, Any]]:
    if isinstance(value, Mapping):
        return value.items()
    return value


def load_metadata(value: Any) -> Metadata:
    """Build track metadata from a variant holding an ``a{sv}`` dictionary.

    Raises :class:`VariantError` when ``value`` is not a variant; a variant
    that holds no array gives empty metadata.
    """
    if not isinstance(value, Variant):
        raise VariantError("This message iterator must be have variant type")
    track = Metadata()
    if not value.signature.startswith("a"):
        return track
    for key, item in _entries(value.value):
        if not isinstance(key, str):
            continue
        try:
            if key.startswith("bitrate"):
                track.bitrate = extract_int32(item) & _UINT16
            if key.startswith("mpris:artUrl"):
                track.art_url = extract_string(item)
            if key.startswith("mpris:length"):
                track.length = extract_int64(item) & _UINT64
            if key.startswith("mpris:trackid"):
                track.track_id = extract_string(item)
            if key.startswith("xesam:albumArtist"):
                track.album_artist = extract_string(item)
            elif key.startswith("xesam:album"):
                track.album = extract_string(item)
            if key.startswith("xesam:artist"):
                track.artist = extract_string(item)
            if key.startswith("xesam:comment"):
                track.comment = extract_string(item)
            if key.startswith("xesam:title"):
                track.title = extract_string(item)
            if key.startswith("xesam:trackNumber"):
                track.track_number = extract_int32(item) & _UINT16
            if key.startswith("xesam:url"):
                track.url = extract_string(item)
        except VariantError as exc:
            print(f"err: {key}, {exc}", file=sys.stderr)
    return track


def get_player_identity(bus: Any, destination: str) -> str:
    """Return the player's Identity, or an empty string when it is unavailable."""
    if bus is None or not destination or not destination.startswith(MPRIS_PLAYER_NAMESPACE):
        return ""
    try:
        reply = bus.call(
            destination,
            MPRIS_PLAYER_PATH,
            DBUS_PROPERTIES_INTERFACE,
            "Get",
            "ss",
            [MPRIS_PLAYER_NAMESPACE, MPRIS_ARG_PLAYER_IDENTITY],
            DEFAULT_TIMEOUT,
        )
    except DBusError:
        return ""
    if not reply:
        return ""
    try:
        return extract_string(reply[0])
    except VariantError:
        return ""


def load_properties(bus: Any, destination: str) -> Properties:
    """Read all player-interface properties of ``destination``, with its identity."""
    props = Properties()
    if bus is None or not destination:
        return props
    try:
        reply = bus.call(
            destination,
            MPRIS_PLAYER_PATH,
            DBUS_PROPERTIES_INTERFACE,
            "GetAll",
            "s",
            [MPRIS_PLAYER_INTERFACE],
            DEFAULT_TIMEOUT,
        )
    except DBusError:
        return props
    if reply and isinstance(reply[0], (Mapping, list)):
        for key, item in _entries(reply[0]):
            if not isinstance(key, str):
                continue
            try:
                if key.startswith("CanControl"):
                    props.can_control = extract_boolean(item)
                if key.startswith("CanGoNext"):
                    props.can_go_next = extract_boolean(item)
                if key.startswith("CanGoPrevious"):
                    props.can_go_previous = extract_boolean(item)
                if key.startswith("CanPause"):
                    props.can_pause = extract_boolean(item)
                if key.startswith("CanPlay"):
                    props.can_play = extract_boolean(item)
                if key.startswith("CanSeek"):
                    props.can_seek = extract_boolean(item)
                if key.startswith("LoopStatus"):
                    props.loop_status = extract_string(item)
                if key.startswith("Metadata"):
                    try:
                        props.metadata = load_metadata(item)
                    except VariantError:
                        pass
                if key.startswith("PlaybackStatus"):
                    props.playback_status = extract_string(item)
                if key.startswith("Position"):
                    props.position = extract_int64(item) & _UINT64
                if key.startswith("Shuffle"):
                    props.shuffle = extract_boolean(item)
                if key.startswith("Volume"):
                    props.volume = extract_double(item)
            except VariantError as exc:
                print(f"error: {exc}", file=sys.stderr)
    props.player_name = get_player_identity(bus, destination)
    return props


def load_players(bus: Any) -> list[Player]:
    """List up to ``MAX_PLAYERS`` bus names under the MPRIS namespace."""
    if bus is None:
        return []
    try:
        reply = bus.call(
            DBUS_DESTINATION, DBUS_PATH, DBUS_INTERFACE, "ListNames", "", [], DEFAULT_TIMEOUT
        )
    except DBusError:
        return []
    if not reply or not isinstance(reply[0], list):
        return []
    players: list[Player] = []
    for name in reply[0]:
        if len(players) >= MAX_PLAYERS:
            break
        if isinstance(name, str) and name.startswith(MPRIS_PLAYER_NAMESPACE):
            players.append(Player(namespace=name))
    return players