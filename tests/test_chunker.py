import pytest

from notecraft.chunking.chunker import slice_by_characters, slice_by_words, slice_text
from notecraft.ir import Slice

SAMPLE = (
    "## Morning\n"
    "We met at the station and talked about the plan. Nobody had a map... "
    "Still, everyone agreed to go north!\n\n"
    "The road was long and the weather turned bad quickly. Was it worth it? "
    "Probably yes, said the guide.\n\n"
    "## Evening\n"
    "At night we reached the village. The inn was full, so we slept in a barn "
    "next to the river and listened to the rain until morning came"
)


def _slice_all(text, budget, mode, policy):
    chunks = []
    remaining = text
    for _ in range(1000):
        if not remaining:
            break
        piece = slice_text(remaining, budget, mode=mode, policy=policy)
        assert piece.chunk
        assert piece.chunk + piece.remaining == remaining
        chunks.append(piece.chunk)
        remaining = piece.remaining
    return chunks


@pytest.mark.parametrize("policy", ["paragraph", "sentence", "heading"])
@pytest.mark.parametrize("mode,budget", [("chars", 60), ("chars", 7), ("words", 9), ("words", 1)])
def test_chunks_concatenate_to_input(policy, mode, budget):
    chunks = _slice_all(SAMPLE, budget, mode, policy)
    assert "".join(chunks) == SAMPLE
    assert len(chunks) > 1


def test_degenerate_input():
    assert slice_text("", 10) == Slice(chunk="", remaining="", boundary="none")
    assert slice_text("abc", 0) == Slice(chunk="", remaining="abc", boundary="none")
    assert slice_text("abc", -5).remaining == "abc"


def test_text_that_fits_is_one_chunk():
    piece = slice_by_characters("short text", 100)
    assert piece.chunk == "short text"
    assert piece.remaining == ""
    assert piece.boundary == "end"


def test_paragraph_preferred():
    text = "First paragraph here.\n\nSecond paragraph that is long."
    piece = slice_by_characters(text, 30)
    assert piece.chunk == "First paragraph here.\n\n"
    assert piece.boundary == "paragraph"


def test_falls_back_to_sentence():
    piece = slice_by_characters("One two. Three four five six", 15)
    assert piece.chunk == "One two."
    assert piece.boundary == "sentence"


def test_falls_back_to_word_never_mid_word():
    piece = slice_by_characters("alpha beta gamma delta", 13)
    assert piece.chunk == "alpha beta "
    assert piece.boundary == "word"


def test_single_long_word_is_cut_at_window():
    piece = slice_by_characters("abcdefghij", 4)
    assert piece.chunk == "abcd"
    assert piece.boundary == "window"


def test_heading_policy():
    text = "## A\naaa aaa.\n## B\nbbb bbb.\n## C\nccc"
    piece = slice_by_characters(text, 25, policy="heading")
    assert piece.chunk == "## A\naaa aaa."
    assert piece.remaining.startswith("\n## B")
    assert piece.boundary == "heading"


def test_word_budget():
    piece = slice_by_words("one two three four five", 2)
    assert piece.chunk == "one two "
    assert piece.remaining == "three four five"


def test_unknown_mode_or_policy():
    with pytest.raises(ValueError):
        slice_text("some long text here", 5, mode="lines")
    with pytest.raises(ValueError):
        slice_text("some long text here", 5, policy="chapter")
