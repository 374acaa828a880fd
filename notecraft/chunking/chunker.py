"""
Document Chunker

Carves the next bounded-size chunk off the front of a text, aligned to the
best boundary available inside the size window.
"""
from __future__ import annotations
from typing import Literal, Tuple

from notecraft.ir import Slice
from notecraft.chunking.boundaries import (
    find_heading_boundary,
    find_paragraph_boundary,
    find_previous_word_boundary,
    find_sentence_end,
)

BudgetMode = Literal["chars", "words"]
BoundaryPolicy = Literal["paragraph", "sentence", "heading"]

# Default budgets (characters)
DEFAULT_CHUNK_SIZE = 1000
DEFAULT_SUMMARY_CHUNK_SIZE = 5000


def _window_by_characters(text: str, max_chars: int) -> int:
    return min(max_chars, len(text))


def _window_by_words(text: str, max_words: int) -> int:
    """End offset of the window holding the first max_words words, trailing whitespace included."""
    word_count = 0
    in_word = False
    for i, ch in enumerate(text):
        if ch.isspace():
            in_word = False
            continue
        if not in_word:
            word_count += 1
            in_word = True
            if word_count > max_words:
                return i
    return len(text)


def _sentence_or_word_cut(text: str, window: int) -> Tuple[int, str]:
    """Fallback chain shared by every policy: sentence, word, raw window edge."""
    candidate = text[:window]
    end = find_sentence_end(candidate)
    if end is not None:
        return end.position + 1, "sentence"

    # Only a window edge inside a word needs moving
    if 0 < window < len(text) and not text[window - 1].isspace() and not text[window].isspace():
        cut = find_previous_word_boundary(text, window)
        if cut > 0:
            return cut, "word"
    return window, "window"


def slice_text(
    text: str,
    budget: int,
    mode: BudgetMode = "chars",
    policy: BoundaryPolicy = "paragraph",
) -> Slice:
    """
    Slice the next chunk off the front of text.

    Args:
        text: Text to slice
        budget: Maximum characters (mode="chars") or words (mode="words")
        mode: Budget unit
        policy: "paragraph" prefers the last blank line, then a sentence end;
            "sentence" goes straight to sentence ends;
            "heading" prefers the last "##" section marker, then a sentence end

    Returns:
        Slice with chunk + remaining == text
    """
    if not text or budget <= 0:
        return Slice(chunk="", remaining=text or "", boundary="none")

    if mode == "chars":
        window = _window_by_characters(text, budget)
    elif mode == "words":
        window = _window_by_words(text, budget)
    else:
        raise ValueError(f"Unknown budget mode: {mode}")

    if window <= 0:
        return Slice(chunk="", remaining=text, boundary="none")

    if window >= len(text):
        return Slice(chunk=text, remaining="", boundary="end")

    cut = None
    boundary = "none"
    if policy == "paragraph":
        cut = find_paragraph_boundary(text, window)
        boundary = "paragraph"
    elif policy == "heading":
        cut = find_heading_boundary(text, window)
        boundary = "heading"
    elif policy != "sentence":
        raise ValueError(f"Unknown boundary policy: {policy}")

    if cut is None:
        cut, boundary = _sentence_or_word_cut(text, window)

    return Slice(chunk=text[:cut], remaining=text[cut:], boundary=boundary)


def slice_by_characters(text: str, max_chars: int = DEFAULT_CHUNK_SIZE, policy: BoundaryPolicy = "paragraph") -> Slice:
    return slice_text(text, max_chars, mode="chars", policy=policy)


def slice_by_words(text: str, max_words: int = DEFAULT_CHUNK_SIZE, policy: BoundaryPolicy = "paragraph") -> Slice:
    return slice_text(text, max_words, mode="words", policy=policy)
