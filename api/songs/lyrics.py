"""
Verse pagination for stored lyrics.

A verse is a block of text delimited by a blank line. The split is literal:
no trimming, no collapsing of extra blank lines.
"""

from __future__ import annotations

from dataclasses import dataclass

VERSE_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class LyricsPage:
    verses: list[str]
    total: int


def split_verses(lyrics: str) -> list[str]:
    # "".split(sep) == [""], so a song without lyrics has one empty verse.
    return (lyrics or "").split(VERSE_SEPARATOR)


def paginate_verses(lyrics: str, *, page: int, limit: int) -> LyricsPage:
    """
    Return verses [start, end) for 1-based `page`, `limit` verses per page.

    Callers normalize `page`/`limit` to >= 1 beforehand. Pages past the end
    yield no verses but still report the total.
    """
    verses = split_verses(lyrics)
    total = len(verses)

    start = (page - 1) * limit
    if start > total:
        return LyricsPage(verses=[], total=total)

    end = min(start + limit, total)
    return LyricsPage(verses=verses[start:end], total=total)
