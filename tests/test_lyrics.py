import pytest

from songs.lyrics import paginate_verses, split_verses

LYRICS = "A\n\nB\n\nC"


@pytest.mark.unit
@pytest.mark.parametrize(
    "page, expected",
    [(1, ["A"]), (2, ["B"]), (3, ["C"]), (4, [])],
)
def test_one_verse_per_page(page, expected):
    result = paginate_verses(LYRICS, page=page, limit=1)
    assert result.verses == expected
    assert result.total == 3


@pytest.mark.unit
def test_last_page_is_clamped_to_verse_count():
    result = paginate_verses(LYRICS, page=2, limit=2)
    assert result.verses == ["C"]
    assert result.total == 3


@pytest.mark.unit
def test_page_far_past_the_end_is_empty_not_an_error():
    result = paginate_verses(LYRICS, page=100, limit=5)
    assert result.verses == []
    assert result.total == 3


@pytest.mark.unit
def test_limit_larger_than_total_returns_everything():
    assert paginate_verses(LYRICS, page=1, limit=10).verses == ["A", "B", "C"]


@pytest.mark.unit
def test_verse_content_is_not_trimmed():
    text = "line one\nline two\n\n  indented\n"
    assert split_verses(text) == ["line one\nline two", "  indented\n"]


@pytest.mark.unit
def test_triple_newline_leaves_leading_newline_on_next_verse():
    assert split_verses("A\n\n\nB") == ["A", "\nB"]


@pytest.mark.unit
def test_empty_lyrics_is_one_empty_verse():
    result = paginate_verses("", page=1, limit=1)
    assert result.verses == [""]
    assert result.total == 1
