"""
Boundary Scanner

Pure text functions that locate paragraph, sentence, heading and word
boundaries, detect the front-matter block at the top of a note, and strip
punctuation ahead of a punctuation-restoration pass.

All offsets are 0-indexed positions into the exact string passed in.
"""
from __future__ import annotations
import re
from typing import Iterator, List, Optional, Tuple

from notecraft.ir import SentenceEnd

# A blank line: newline, optional horizontal whitespace, newline
PARAGRAPH_BREAK_RE = re.compile(r"\r?\n[ \t]*\r?\n")

# "..." must come first so a run of three dots is one terminator
SENTENCE_END_RE = re.compile(r"\.{3}|…|[.!?]")

# "## " section marker at the start of a line
SECTION_HEADING_RE = re.compile(r"(?:^|\n)##\s+")

FRONT_MATTER_DELIMITERS = ("---", "...")
FRONT_MATTER_KEYS = ("aliases:",)

PUNCTUATION_CHARS = ".!?…,;—«»\"'‘’“”"
_PUNCTUATION_RE = re.compile("[" + re.escape(PUNCTUATION_CHARS) + "]+")
_WIKILINK_RE = re.compile(r"!?\[\[[^\]]+\]\]")
_PLACEHOLDER_RE = re.compile("\ue000(\\d+)\ue001")
_HEADING_MARKER_RE = re.compile(r"^[ \t]*#{1,6}[ \t]*", re.MULTILINE)


def find_paragraph_boundary(text: str, window: Optional[int] = None) -> Optional[int]:
    """Offset just after the last blank line that lies fully inside the window."""
    candidate = text if window is None else text[:max(window, 0)]
    last = None
    for m in PARAGRAPH_BREAK_RE.finditer(candidate):
        last = m.end()
    return last


def iter_sentence_ends(text: str) -> Iterator[SentenceEnd]:
    """Yield every sentence terminator, left to right."""
    for m in SENTENCE_END_RE.finditer(text):
        yield SentenceEnd(position=m.end() - 1, marker=m.group(0))


def find_sentence_end(text: str) -> Optional[SentenceEnd]:
    """
    Find the last sentence terminator in text.

    A run of three dots counts as one terminator anchored at its last dot,
    so "wait..." ends at the final dot rather than the first.
    """
    last = None
    for end in iter_sentence_ends(text):
        last = end
    return last


def find_previous_sentence_end(text: str, before_offset: int) -> Optional[SentenceEnd]:
    """Last terminator whose anchor lies strictly before before_offset."""
    last = None
    for end in iter_sentence_ends(text):
        if end.position >= before_offset:
            break
        last = end
    return last


def find_heading_boundary(text: str, window: Optional[int] = None) -> Optional[int]:
    """
    Offset of the last "##" section marker inside the window.

    The offset points at the newline before the marker. A marker at offset 0
    is ignored: cutting there would produce an empty chunk.
    """
    candidate = text if window is None else text[:max(window, 0)]
    last = None
    for m in SECTION_HEADING_RE.finditer(candidate):
        if m.start() > 0:
            last = m.start()
    return last


def find_previous_word_boundary(text: str, position: int) -> int:
    """Start of the word containing position, or 0."""
    if position <= 0:
        return 0
    for i in range(min(position, len(text)) - 1, -1, -1):
        if text[i].isspace():
            return i + 1
    return 0


def find_front_matter_end(text: str) -> int:
    """
    Find the end of a metadata block at the top of a note.

    The first non-blank line opens the block when it is "---", "..." or
    starts with a known key such as "aliases:". The next line equal to
    "---" or "..." closes it.

    Returns:
        1-indexed line number of the closing delimiter (equivalently, the
        number of lines to skip), or 0 when there is no block. A block that
        opens but never closes counts as absent.
    """
    opened = False
    for i, raw in enumerate(text.split("\n")):
        line = raw.strip()
        if not opened:
            if not line:
                continue
            if line in FRONT_MATTER_DELIMITERS or line.startswith(FRONT_MATTER_KEYS):
                opened = True
                continue
            return 0
        if line in FRONT_MATTER_DELIMITERS:
            return i + 1
    return 0


def split_front_matter(text: str) -> Tuple[str, str, int]:
    """Split text into (front_matter, body, start_line); front_matter + body == text."""
    start_line = find_front_matter_end(text)
    if not start_line:
        return "", text, 0
    lines = text.split("\n")
    front = "\n".join(lines[:start_line])
    if start_line < len(lines):
        front += "\n"
    return front, text[len(front):], start_line


def strip_punctuation(text: str, preserve_headings: bool = True) -> str:
    """
    Remove sentence and clause punctuation while keeping word boundaries.

    Spaces and tabs collapse to a single space and spaces around newlines are
    dropped, but every newline survives. Wikilinks and embeds ([[...]] and
    ![[...]]) are protected from mutation. With preserve_headings=False the
    leading "#" markers of Markdown headings are removed as well.
    """
    links: List[str] = []

    def _protect(m: re.Match) -> str:
        links.append(m.group(0))
        return f"\ue000{len(links) - 1}\ue001"

    result = _WIKILINK_RE.sub(_protect, text)
    result = _PUNCTUATION_RE.sub(" ", result)

    if not preserve_headings:
        result = _HEADING_MARKER_RE.sub("", result)

    result = re.sub(r"[ \t]+", " ", result)
    result = re.sub(r" *\n *", "\n", result)

    result = _PLACEHOLDER_RE.sub(lambda m: links[int(m.group(1))], result)
    return result.strip(" \t")
