"""Choosing the MPRIS player whose status to report."""

from __future__ import annotations

import sys
from typing import Any, Iterable

from .bus import Player, load_players, load_properties
from .model import Options, PlayerStatus, Properties
from .wire import DBusError, connect_session

PLAYING = "Playing"
PAUSED = "Paused"
STOPPED = "Stopped"


def _matches_name(player: Player, name: str) -> bool:
    return player.properties.player_name == name or player.namespace == name


def _qualifies(player: Player, options: Options) -> bool:
    status = player.properties.playback_status
    skip = True
    playing = False

    if status == PLAYING:
        if options.status in (PlayerStatus.ANY_PLAYING, PlayerStatus.ANY):
            skip = False
        else:
            playing = True

    if options.status is PlayerStatus.ANY and status in (PAUSED, STOPPED):
        skip = False

    for name in options.player_names:
        if name is None or not _matches_name(player, name):
            continue
        if options.status is PlayerStatus.MUST_BE_PLAYING and not playing:
            continue
        skip = False

    return not skip


def select_player(players: Iterable[Player], options: Options) -> Properties:
    """Return the properties of the last player that the options accept.

    When no player qualifies, empty properties are returned.
    """
    selected = Properties()
    for player in players:
        if _qualifies(player, options):
            selected = player.properties
    return selected


def _query(bus: Any, options: Options) -> Properties:
    players = load_players(bus)
    for player in players:
        player.properties = load_properties(bus, player.namespace)
    return select_player(players, options)


def get_mpris_player_status(options: Options, bus: Any = None) -> Properties:
    """Look up the players on the bus and return the selected one's properties.

    Without ``bus`` a private session-bus connection is opened and closed
    again; if it cannot be opened, the error is reported on stderr and empty
    properties are returned.
    """
    if bus is not None:
        return _query(bus, options)
    try:
        conn = connect_session()
    except DBusError as exc:
        print(f"DBus connection error({exc.message or exc.name})", file=sys.stderr)
        return Properties()
    with conn:
        return _query(conn, options)