from __future__ import annotations

import pytest

from kissmpris.bus import Player
from kissmpris.model import Options, PlayerStatus, Properties
from kissmpris.status import get_mpris_player_status, select_player
from kissmpris.variant import Variant

NS = "org.mpris.MediaPlayer2."


class FakeBus:
    """Answers the method calls made while looking up players."""

    def __init__(self, players):
        self.players = players
        self.calls = []

    def call(self, destination, path, interface, method, signature="", args=(), timeout=100):
        self.calls.append(method)
        if method == "ListNames":
            return [["org.freedesktop.DBus", "org.freedesktop.Notifications", *self.players]]
        status, identity, title = self.players[destination]
        if method == "GetAll":
            return [
                {
                    "PlaybackStatus": Variant("s", status),
                    "Shuffle": Variant("b", True),
                    "Volume": Variant("d", 0.25),
                    "Metadata": Variant("a{sv}", {"xesam:title": Variant("s", title)}),
                }
            ]
        if method == "Get":
            return [Variant("s", identity)]
        raise AssertionError(method)


def make_player(namespace, status, identity=""):
    return Player(
        namespace=namespace,
        properties=Properties(playback_status=status, player_name=identity),
    )


def test_must_be_playing_selects_named_playing_player():
    bus = FakeBus({NS + "spotify": ("Playing", "Spotify", "Song")})
    props = get_mpris_player_status(Options(["Spotify"]), bus)
    assert props.player_name == "Spotify"
    assert props.metadata.title == "Song"
    assert props.shuffle is True
    assert props.volume == 0.25


def test_must_be_playing_rejects_paused_named_player():
    bus = FakeBus({NS + "spotify": ("Paused", "Spotify", "Song")})
    assert get_mpris_player_status(Options(["Spotify"]), bus) == Properties()


def test_must_be_playing_rejects_unnamed_playing_player():
    bus = FakeBus({NS + "vlc": ("Playing", "VLC", "Clip")})
    assert get_mpris_player_status(Options(["Spotify"]), bus) == Properties()


def test_any_playing_selects_unnamed_playing_player():
    bus = FakeBus({NS + "vlc": ("Playing", "VLC", "Clip")})
    props = get_mpris_player_status(Options([], PlayerStatus.ANY_PLAYING), bus)
    assert props.player_name == "VLC"


def test_any_playing_rejects_unnamed_paused_player():
    bus = FakeBus({NS + "vlc": ("Paused", "VLC", "Clip")})
    assert get_mpris_player_status(Options([], PlayerStatus.ANY_PLAYING), bus) == Properties()


def test_any_selects_last_qualifying_player():
    bus = FakeBus(
        {
            NS + "a": ("Paused", "A", "one"),
            NS + "b": ("Stopped", "B", "two"),
        }
    )
    props = get_mpris_player_status(Options([], PlayerStatus.ANY), bus)
    assert props.player_name == "B"
    assert props.metadata.title == "two"


def test_bus_calls_made_per_player():
    bus = FakeBus({NS + "a": ("Paused", "A", "one")})
    get_mpris_player_status(Options([], PlayerStatus.ANY), bus)
    assert bus.calls == ["ListNames", "GetAll", "Get"]


def test_select_player_matches_namespace():
    player = make_player(NS + "vlc", "Playing", "VLC")
    props = select_player([player], Options([NS + "vlc"]))
    assert props is player.properties


def test_select_player_name_must_match_exactly():
    player = make_player(NS + "spotify", "Playing", "Spotify")
    assert select_player([player], Options(["Spot"])) == Properties()
    assert select_player([player], Options(["Spotify app"])) == Properties()


def test_any_playing_selects_named_paused_player():
    player = make_player(NS + "spotify", "Paused", "Spotify")
    props = select_player([player], Options(["Spotify"], PlayerStatus.ANY_PLAYING))
    assert props.player_name == "Spotify"


@pytest.mark.parametrize("status", ["Paused", "Stopped"])
def test_any_accepts_paused_and_stopped(status):
    player = make_player(NS + "x", status, "X")
    assert select_player([player], Options([], PlayerStatus.ANY)).playback_status == status


def test_unknown_status_is_not_selected_without_name():
    player = make_player(NS + "x", "Buffering", "X")
    assert select_player([player], Options([], PlayerStatus.ANY)) == Properties()


def test_no_players_gives_empty_properties():
    assert select_player([], Options(["Spotify"])) == Properties()


def test_missing_session_bus_reports_error(monkeypatch, capsys):
    monkeypatch.delenv("DBUS_SESSION_BUS_ADDRESS", raising=False)
    props = get_mpris_player_status(Options(["Spotify"]))
    assert props == Properties()
    assert "DBus connection error" in capsys.readouterr().err