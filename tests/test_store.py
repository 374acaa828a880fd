from pathlib import Path

from notecraft.chunking.chunker import slice_by_characters
from notecraft.drivers import CosmeticDriver
from notecraft.store import FileDocumentStore, create_backup, process_document

from fakes import FakeTransformer, upper


def _long_text():
    return "\n\n".join(" ".join(f"line {p}.{i} of the note." for i in range(10)) for p in range(5)) + "\n"


def test_file_store_read_and_replace(tmp_path):
    path = tmp_path / "note.md"
    path.write_text("a\nb\nc", encoding="utf-8")
    store = FileDocumentStore(str(path))
    assert store.read() == "a\nb\nc"

    store.replace_range("X", 1, 2)
    assert path.read_text(encoding="utf-8") == "a\nX\nc"

    store.replace_range("all new")
    assert store.read() == "all new"


def test_file_store_keeps_crlf(tmp_path):
    path = tmp_path / "note.md"
    path.write_bytes(b"one\r\ntwo")
    store = FileDocumentStore(str(path))
    assert store.read() == "one\r\ntwo"
    store.replace_range("uno\r\ndos")
    assert path.read_bytes() == b"uno\r\ndos"


def test_create_backup(tmp_path):
    path = tmp_path / "note.md"
    path.write_text("original", encoding="utf-8")
    backup = create_backup(str(path), str(tmp_path / "backups"))
    assert backup is not None
    assert Path(backup).parent == tmp_path / "backups"
    assert Path(backup).read_text(encoding="utf-8") == "original"
    assert Path(backup).name.startswith("note.")
    assert Path(backup).suffix == ".md"


def test_failed_backup_is_not_fatal(tmp_path):
    assert create_backup(str(tmp_path / "missing.md")) is None


def test_process_document_writes_result(tmp_path):
    path = tmp_path / "note.md"
    path.write_text(_long_text(), encoding="utf-8")
    writes = []
    driver = CosmeticDriver(FakeTransformer(upper), chunk_size=300, on_progress=writes.append)

    outcome = process_document(FileDocumentStore(str(path)), driver, backup=True)

    assert outcome.result.status == "done"
    assert path.read_text(encoding="utf-8") == _long_text().upper()
    assert outcome.backup is not None
    assert Path(outcome.backup).read_text(encoding="utf-8") == _long_text()
    assert len(writes) == outcome.result.iterations
    assert driver.on_progress == writes.append
    assert outcome.to_dict()["status"] == "done"


def test_failure_leaves_last_progress_write(tmp_path):
    text = _long_text()
    path = tmp_path / "note.md"
    path.write_text(text, encoding="utf-8")
    first = slice_by_characters(text, 300).chunk
    fake = FakeTransformer(responses=[first.upper(), "", "", ""])

    outcome = process_document(FileDocumentStore(str(path)), CosmeticDriver(fake, chunk_size=300))

    assert outcome.result.status == "failed"
    assert path.read_text(encoding="utf-8") == first.upper() + text[len(first):]
    assert outcome.backup is None
