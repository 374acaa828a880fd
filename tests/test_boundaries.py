from notecraft.chunking.boundaries import (
    find_front_matter_end,
    find_heading_boundary,
    find_paragraph_boundary,
    find_previous_sentence_end,
    find_previous_word_boundary,
    find_sentence_end,
    split_front_matter,
    strip_punctuation,
)


def test_paragraph_boundary_is_after_blank_line():
    assert find_paragraph_boundary("one\n\ntwo") == 5
    assert find_paragraph_boundary("a\n\nb\n\nc", window=4) == 3
    assert find_paragraph_boundary("a\n  \nb") == 4
    assert find_paragraph_boundary("no break here") is None


def test_sentence_end_finds_last_terminator():
    end = find_sentence_end("Hello. World!")
    assert end.position == 12
    assert end.marker == "!"
    assert find_sentence_end("no terminator") is None


def test_ellipsis_is_one_terminator_anchored_at_last_dot():
    end = find_sentence_end("wait...")
    assert end.position == 6
    assert end.marker == "..."
    assert find_sentence_end("so…").marker == "…"


def test_previous_sentence_end():
    text = "A. B. C."
    assert find_previous_sentence_end(text, 7).position == 4
    assert find_previous_sentence_end(text, 1) is None


def test_heading_boundary_points_at_newline_before_marker():
    text = "intro\n## One\ntext\n## Two\nmore"
    assert find_heading_boundary(text) == 17
    assert find_heading_boundary(text, window=12) == 5


def test_heading_boundary_ignores_marker_at_offset_zero():
    assert find_heading_boundary("## Only\ntext") is None
    assert find_heading_boundary("no headings") is None


def test_previous_word_boundary():
    text = "alpha beta gamma"
    assert find_previous_word_boundary(text, 8) == 6
    assert find_previous_word_boundary(text, 3) == 0


def test_front_matter_end():
    assert find_front_matter_end("---\ntitle: x\n---\nbody") == 3
    assert find_front_matter_end("\n---\ntitle: x\n...\nbody") == 4
    assert find_front_matter_end("aliases: [a]\n---\nbody") == 2
    assert find_front_matter_end("---\ntitle: x\nbody") == 0
    assert find_front_matter_end("# Title\n---\n") == 0
    assert find_front_matter_end("") == 0


def test_split_front_matter_is_lossless():
    text = "---\na: 1\n---\nBody text"
    front, body, start_line = split_front_matter(text)
    assert front == "---\na: 1\n---\n"
    assert body == "Body text"
    assert start_line == 3
    assert front + body == text

    assert split_front_matter("Just a note.") == ("", "Just a note.", 0)


def test_strip_punctuation():
    assert strip_punctuation("Hello, world! How are you?") == "Hello world How are you"
    assert strip_punctuation("One.\nTwo.") == "One\nTwo"
    assert strip_punctuation("«Quoted» text; more") == "Quoted text more"


def test_strip_punctuation_keeps_wikilinks():
    assert strip_punctuation("See [[Note, one]]. Done.") == "See [[Note, one]] Done"
    assert strip_punctuation("Embed ![[img.png]], ok") == "Embed ![[img.png]] ok"


def test_strip_punctuation_headings():
    assert strip_punctuation("# Title\nText.") == "# Title\nText"
    assert strip_punctuation("# Title\nText.", preserve_headings=False) == "Title\nText"


def test_strip_punctuation_keeps_newline_count():
    text = "First line.\n\nSecond, line!\n"
    assert strip_punctuation(text).count("\n") == text.count("\n")
