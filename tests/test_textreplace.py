from kissmpris.model import MAX_OUTPUT_LENGTH
from kissmpris.textreplace import str_replace


def test_replaces_placeholder():
    assert str_replace("%track_name - x", "%track_name", "Song") == "Song - x"


def test_replaces_every_occurrence():
    result = str_replace("%a %a %a", "%a", "zz")
    assert "%a" not in result
    assert result.count("zz") == 3


def test_matches_do_not_overlap():
    assert str_replace("aaaa", "aa", "b") == "bb"


def test_escape_sequences():
    assert str_replace("a\\nb", "\\n", "\n") == "a\nb"


def test_no_match_returns_source():
    assert str_replace("hello", "xyz", "q") == "hello"


def test_empty_source():
    assert str_replace("", "a", "b") == ""


def test_empty_search():
    assert str_replace("abc", "", "x") == "abc"


def test_search_longer_than_source():
    assert str_replace("ab", "abc", "x") == "ab"


def test_empty_replacement_removes():
    assert str_replace("x%commenty", "%comment", "") == "xy"


def test_result_is_bounded():
    result = str_replace("%v" * 10, "%v", "w" * 500)
    assert len(result) == MAX_OUTPUT_LENGTH - 1
    assert set(result) == {"w"}


def test_long_source_without_match_not_truncated():
    source = "q" * (MAX_OUTPUT_LENGTH * 2)
    assert str_replace(source, "%v", "x") == source