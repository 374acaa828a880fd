from notecraft.drivers import PunctuateDriver
from notecraft.drivers.punctuate import count_alnum, source_offset_after
from notecraft.config import config_from_dict

from fakes import FakeTransformer


def every_third_word(system, text):
    """Put a period after every third word, like a model that knows the sentences."""
    words = text.split()
    return " ".join(w + ("." if i % 3 == 0 else "") for i, w in enumerate(words, start=1))


def _document(count=120):
    return " ".join(f"alpha{i} beta gamma." for i in range(count))


def test_source_offset_after():
    source = "Hello, world. How are you?"
    assert source_offset_after(source, count_alnum("Hello world.")) == 13
    assert source_offset_after(source, 0) == 0
    assert source_offset_after(source, 1000) == len(source)


def test_single_chunk_strips_then_restores_whitespace():
    fake = FakeTransformer(responses=["Hello, world."])
    result = PunctuateDriver(fake).run("\nhello world\n")
    assert result.status == "done"
    assert result.text == "\nHello, world.\n"
    assert fake.calls[0][1] == "\nhello world\n"


def test_punctuation_is_stripped_before_transform():
    fake = FakeTransformer(responses=["Hi, there."])
    PunctuateDriver(fake).run("hi, there!")
    assert fake.calls[0][1] == "hi there"


def test_long_document_commits_whole_sentences_only():
    text = _document()
    assert len(text) > 2000
    fake = FakeTransformer(every_third_word)
    result = PunctuateDriver(fake, chunk_size=1000).run(text)
    assert result.status == "done"
    assert result.text == text
    assert result.iterations >= 3
    # Every chunk after the first starts on a sentence
    for _, user_text in fake.calls[1:]:
        assert user_text.startswith("alpha")


def test_progress_is_committed_plus_remaining():
    text = _document()
    progress = []
    PunctuateDriver(FakeTransformer(every_third_word), chunk_size=1000, on_progress=progress.append).run(text)
    assert len(progress) >= 3
    assert all(snapshot == text for snapshot in progress)


def test_output_without_terminators_still_terminates():
    text = " ".join(["word"] * 1200)
    fake = FakeTransformer()
    result = PunctuateDriver(fake, chunk_size=1000).run(text)
    assert result.status == "done"
    assert result.text == text
    assert result.iterations <= 10


def test_iteration_ceiling_stops_processing():
    text = " ".join(["word"] * 1200)
    result = PunctuateDriver(FakeTransformer(), chunk_size=1000, max_iterations=2).run(text)
    assert result.status == "stalled"
    assert result.iterations == 2
    assert result.text == text
    assert "iteration limit" in result.message


def test_headings_can_be_dropped():
    fake = FakeTransformer(responses=["Title\nText."])
    PunctuateDriver(fake, preserve_headings=False).run("# Title\ntext")
    assert fake.calls[0][1] == "Title\ntext"


def test_from_config():
    config = config_from_dict({"api_key": "k", "features": {"punctuate": {"chunk_size": 300, "preserve_headings": False}}})
    driver = PunctuateDriver.from_config(FakeTransformer(), config)
    assert driver.chunk_size == 300
    assert driver.preserve_headings is False
    assert driver.temperature == 0.1


def test_failure_after_first_chunk_keeps_committed_prefix():
    text = _document()
    seen = []

    def first_chunk_only(system, user_text):
        seen.append(user_text)
        return every_third_word(system, user_text).upper() if len(seen) == 1 else ""

    result = PunctuateDriver(FakeTransformer(first_chunk_only), chunk_size=1000).run(text)
    assert result.status == "failed"
    assert result.transform_calls == 4
    k = result.text.index(" alpha")
    assert k > 0
    assert result.text == text[:k].upper() + text[k:]
