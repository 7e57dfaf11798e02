"""Bounded search-and-replace used to fill output templates."""

from __future__ import annotations

from .model import MAX_OUTPUT_LENGTH


def str_replace(source: str, search: str, replace: str) -> str:
    """Replace every non-overlapping occurrence of ``search`` in ``source``.

    The text is returned unchanged when either string is empty, when the
    search is longer than the source or when nothing matches.  Otherwise the
    result is cut to fit the output limit.
    """
    if not source or not search or len(search) > len(source):
        return source
    if search not in source:
        return source
    return source.replace(search, replace)[: MAX_OUTPUT_LENGTH - 1]