"""
Topic/Heading Merger

Parses a topic-splitting response ("N: Title" per line) and splices the
topics into the chunk as Markdown section headings. Headings are spliced
into the plain chunk at sentence offsets, so text the markers were added
to is never searched for markers again.

The last topic of a chunk is normally held back: its sentences may continue
into the next chunk, so its heading is committed only once the next
iteration has seen the rest of it.
"""
from __future__ import annotations
import re
from typing import Dict, List

from notecraft.ir import EnumeratedChunk, HeadingSplit, Topic

TOPIC_LINE_RE = re.compile(r"^(\d+)\s*:\s*(.+)$")


def parse_topics(response: str) -> List[Topic]:
    """
    Parse "N: Title" lines into topics sorted by sentence index.

    Lines that do not match are noise and are dropped. Never raises.
    """
    if not response:
        return []
    topics: List[Topic] = []
    for raw_line in response.split("\n"):
        line = raw_line.strip()
        if not line:
            continue
        m = TOPIC_LINE_RE.match(line)
        if not m:
            continue
        title = m.group(2).strip()
        if title:
            topics.append(Topic(n=int(m.group(1)), title=title))
    topics.sort(key=lambda t: t.n)
    return topics


def usable_topics(enumerated: EnumeratedChunk, topics: List[Topic]) -> List[Topic]:
    """Topics whose sentence exists in the chunk; for a repeated index the last title wins."""
    titles: Dict[int, str] = {}
    for topic in topics:
        titles[topic.n] = topic.title
    return [Topic(n=n, title=titles[n]) for n in sorted(titles) if n in enumerated.starts]


def format_heading(title: str) -> str:
    return f"\n## {title}\n"


def _heading_start(text: str, start: int) -> int:
    # The heading swallows the spaces/tabs in front of the sentence
    while start > 0 and text[start - 1] in " \t":
        start -= 1
    return start


def _splice_headings(text: str, end: int, enumerated: EnumeratedChunk, topics: List[Topic]) -> str:
    """text[:end] with a heading spliced in before each topic's sentence."""
    parts: List[str] = []
    cursor = 0
    for topic in topics:
        start = enumerated.starts[topic.n]
        parts.append(text[cursor:_heading_start(text, start)])
        parts.append(format_heading(topic.title))
        cursor = start
    parts.append(text[cursor:end])
    return "".join(parts)


def insert_all_headings(enumerated: EnumeratedChunk, topics: List[Topic]) -> str:
    """The plain chunk with every usable topic turned into a heading."""
    text = enumerated.text
    return _splice_headings(text, len(text), enumerated, usable_topics(enumerated, topics))


def insert_headings_except_last(enumerated: EnumeratedChunk, topics: List[Topic]) -> HeadingSplit:
    """
    Insert headings for every topic except the last one.

    Returns:
        HeadingSplit where before_last_processed is the plain text before the
        last topic's sentence with headings inserted, from_last_enumerated is
        the still-enumerated text from that topic's marker on, and
        carry_offset is the offset in the plain chunk where the committed
        prefix ends. With fewer than two usable topics the whole chunk is
        committed and carry_offset is 0.
    """
    if not enumerated.text:
        return HeadingSplit(before_last_processed="", from_last_enumerated="", carry_offset=0)

    usable = usable_topics(enumerated, topics)
    if len(usable) < 2:
        return HeadingSplit(
            before_last_processed=insert_all_headings(enumerated, usable),
            from_last_enumerated="",
            carry_offset=0,
        )

    last = usable[-1]
    cut = _heading_start(enumerated.text, enumerated.starts[last.n])
    return HeadingSplit(
        before_last_processed=_splice_headings(enumerated.text, cut, enumerated, usable[:-1]),
        from_last_enumerated=enumerated.enumerated[enumerated.positions[last.n]:],
        carry_offset=cut,
    )
