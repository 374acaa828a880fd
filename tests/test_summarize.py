from notecraft.changelog import DebugLog, SUMMARY_LOG_NAME
from notecraft.drivers import SummarizeDriver
from notecraft.drivers.summarize import format_parts, strip_summary_block
from notecraft.llm.prompts import SUMMARY_MERGE_NOTE

from fakes import FakeTransformer


def _long_note(sections=6):
    return "".join(
        f"## Section {i}\n" + " ".join(f"Point {i}.{j} is described here." for j in range(5)) + "\n"
        for i in range(1, sections + 1)
    )


def test_short_note_gets_one_summary_call():
    fake = FakeTransformer(responses=["A summary."])
    result = SummarizeDriver(fake).run("Short note.")
    assert result.status == "done"
    assert result.text == "~~~ Summary\nA summary.\n~~~\nShort note."
    assert len(fake.calls) == 1


def test_summary_goes_below_front_matter():
    front = "---\ntags: [a]\n---\n"
    result = SummarizeDriver(FakeTransformer(responses=["Sum."])).run(front + "Body.")
    assert result.text == front + "~~~ Summary\nSum.\n~~~\nBody."


def test_existing_summary_is_replaced():
    fake = FakeTransformer(responses=["New."])
    result = SummarizeDriver(fake).run("~~~ Summary\nOld.\n~~~\nShort note.")
    assert result.text == "~~~ Summary\nNew.\n~~~\nShort note."
    assert fake.calls[0][1] == "Short note."


def test_long_note_is_summarized_in_parts_then_merged(tmp_path):
    text = _long_note()
    assert len(text) > 600
    fake = FakeTransformer(lambda s, t: "Short.")
    driver = SummarizeDriver(fake, chunk_size=250, debug_log=DebugLog(str(tmp_path)))
    result = driver.run(text)

    assert result.status == "done"
    assert result.text == "~~~ Summary\nShort.\n~~~\n" + text
    assert len(fake.calls) >= 3
    # Every section is summarized on its own
    assert all(user.startswith(("## Section", "\n## Section")) for _, user in fake.calls[:-1])
    system_prompt, merged = fake.calls[-1]
    assert system_prompt.endswith(SUMMARY_MERGE_NOTE)
    assert merged.startswith("## Part 1\nShort.\n")
    assert (tmp_path / SUMMARY_LOG_NAME).exists()


def test_summaries_that_do_not_shrink_stall():
    text = _long_note()
    fake = FakeTransformer()
    result = SummarizeDriver(fake, chunk_size=250).run(text)
    assert result.status == "stalled"
    assert result.text == text


def test_format_parts_and_strip_block():
    assert format_parts(["a", "b"]) == "## Part 1\na\n\n## Part 2\nb\n"
    assert strip_summary_block("no block here") == "no block here"
