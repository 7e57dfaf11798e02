from __future__ import annotations

from kissmpris.demo import INFO_DEFAULT_STATUS, INFO_FULL_STATUS, format_info, main
from kissmpris.model import Metadata, Properties


def sample_props(**kwargs):
    meta = Metadata(
        title="Title",
        album="Album",
        artist="Artist",
        album_artist="Band",
        comment="Note",
        art_url="file:///tmp/cover.png",
        track_number=7,
        bitrate=320,
    )
    return Properties(
        player_name="Spotify",
        playback_status="Playing",
        loop_status="None",
        metadata=meta,
        **kwargs,
    )


def test_default_status_template():
    assert format_info(sample_props(), INFO_DEFAULT_STATUS) == "Title - Album - Artist"


def test_escape_sequences_are_expanded():
    assert format_info(sample_props(), "a\\tb\\nc") == "a\tb\nc"


def test_album_artist_not_confused_with_album():
    out = format_info(sample_props(), "%album_artist|%album_name")
    assert out == "Band|Album"


def test_numbers_are_written_as_integers():
    out = format_info(sample_props(), "%track_number/%bitrate")
    assert out == "7/320"


def test_shuffle_labels():
    assert format_info(sample_props(shuffle=True), "%shuffle") == "true"
    assert format_info(sample_props(shuffle=False), "%shuffle") == "false"


def test_volume_label_two_decimals():
    assert format_info(sample_props(volume=0.5), "%volume") == "0.50"


def test_volume_label_is_cut_to_four_characters():
    assert len(format_info(sample_props(volume=123.456), "%volume")) == 4


def test_position_in_seconds():
    assert format_info(sample_props(position=1500000), "%position") == "1.50s"


def test_long_length_label_is_cut():
    props = sample_props()
    props.metadata.length = 123456789012345678
    label = format_info(props, "%track_length")
    assert len(label) == 14
    assert label.startswith("123456789012")


def test_full_expands_template():
    out = format_info(sample_props(), "%full")
    lines = out.split("\n")
    assert lines[0] == "Player name:\tSpotify"
    assert lines[1] == "Play status:\tPlaying"
    assert lines[-1] == "Comment:\tNote"
    assert "Art URL:\tfile:///tmp/cover.png" in lines
    assert len(lines) == INFO_FULL_STATUS.count("\n") + 1


def test_text_without_placeholders_is_unchanged():
    assert format_info(sample_props(), "plain text") == "plain text"


def test_main_without_session_bus_prints_empty_status(monkeypatch, capsys):
    monkeypatch.delenv("DBUS_SESSION_BUS_ADDRESS", raising=False)
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Player name:\t\n")
    assert "Shuffle:\tfalse\n" in out
    assert out.endswith("Comment:\t\n")