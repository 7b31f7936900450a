"""Noun pluralization for report lines."""

from __future__ import annotations


def pluralize(word: str, count: int | None = None) -> str:
    """Return `word` for a count of one, its plural otherwise.

    Without a count the plural is returned. Nouns ending in "s" take "es".
    """
    if count == 1:
        return word
    if word.endswith("s"):
        return f"{word}es"
    return f"{word}s"


def count_noun(count: int, word: str) -> str:
    """Format a count with its correctly pluralized noun, e.g. `2 tests`."""
    return f"{count} {pluralize(word, count)}"
