"""Delimiter-based tokenizing of command lines."""

from __future__ import annotations

import re

__all__ = ["count_tokens", "split_tokens"]


def _split(text: str, delimiters: str) -> list[str]:
    """Split on any run of delimiter characters, dropping empty tokens."""
    if not delimiters:
        return [text] if text else []
    pattern = "[" + re.escape(delimiters) + "]+"
    return [token for token in re.split(pattern, text) if token]


def _first_line(text: str) -> str:
    """Cut the text at the first newline that follows some content."""
    content_start = len(text) - len(text.lstrip("\n"))
    if content_start == len(text):
        return text
    end = text.find("\n", content_start)
    return text if end == -1 else text[:end]


def count_tokens(text: str | None, delimiters: str) -> int:
    """Count the tokens in ``text`` separated by any of ``delimiters``.

    Runs of delimiters count as one separator and leading or trailing
    delimiters produce no empty tokens. ``None`` has no tokens.
    """
    if text is None:
        return 0
    return len(_split(text, delimiters))


def split_tokens(text: str | None, delimiters: str) -> list[str]:
    """Return the tokens of the first line of ``text``.

    The text is cut at its first newline, then split on any of the
    characters in ``delimiters``; empty tokens are dropped.
    """
    if text is None:
        return []
    return _split(_first_line(text), delimiters)