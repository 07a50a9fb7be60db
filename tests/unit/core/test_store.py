"""Unit tests for core/store.py"""

import pytest

from mdsite.core.models import ContentFile
from mdsite.core.store import discover_files, load_store, parse_content_file, read_content_file
from mdsite.core.utils.hashing import sha256
from mdsite.errors import MalformedMetadata, UnreadablePath


def test_discover_files_filters_and_sorts(content_dir):
    """discover_files finds .md/.markdown recursively, sorted, skipping other suffixes."""
    (content_dir / "b.md").write_text("b")
    (content_dir / "notes.txt").write_text("text")
    sub = content_dir / "sub"
    sub.mkdir()
    (sub / "a.markdown").write_text("a")
    files = discover_files(content_dir)
    assert [f.relative_to(content_dir).as_posix() for f in files] == ["b.md", "sub/a.markdown"]


def test_discover_files_skips_hidden(content_dir):
    hidden = content_dir / ".drafts"
    hidden.mkdir()
    (hidden / "x.md").write_text("x")
    (content_dir / ".secret.md").write_text("x")
    assert discover_files(content_dir) == []


def test_read_content_file_relative_path(content_dir):
    f = content_dir / "posts" / "hello.md"
    f.parent.mkdir()
    f.write_text("hi", encoding="utf-8")
    assert read_content_file(f, content_dir) == ContentFile(path="posts/hello.md", text="hi")


def test_read_content_file_bad_encoding(content_dir):
    f = content_dir / "latin.md"
    f.write_bytes(b"\xff\xfe\xfa not utf-8")
    with pytest.raises(UnreadablePath) as exc:
        read_content_file(f, content_dir)
    assert exc.value.path == "latin.md"


def test_parse_content_file_hashes_raw_text(samples):
    doc = parse_content_file(ContentFile(path="day-10.md", text=samples["toml"]))
    assert doc.path == "day-10.md"
    assert doc.hash == sha256(samples["toml"])
    assert doc.metadata.title == "Advent of Code 2025 Day 10"


def test_load_store_collects_per_file_errors(write_post, content_dir):
    """One malformed and one unreadable file do not stop the scan."""
    write_post("good.md", title="Good")
    (content_dir / "bad.md").write_text("# no front matter\n")
    (content_dir / "binary.md").write_bytes(b"\xff\xfe\xfa")
    store = load_store(content_dir)

    assert store.paths == ["good.md"]
    assert store.get("good.md").metadata.title == "Good"
    assert store.get("bad.md") is None
    assert [type(e) for e in store.errors] == [MalformedMetadata, UnreadablePath]
    assert [e.path for e in store.errors] == ["bad.md", "binary.md"]


def test_load_store_missing_root(tmp_path):
    """An inaccessible root fails the whole operation."""
    with pytest.raises(UnreadablePath, match="does not exist"):
        load_store(tmp_path / "nope")


def test_load_store_root_is_file(tmp_path):
    f = tmp_path / "file.md"
    f.write_text("x")
    with pytest.raises(UnreadablePath, match="not a directory"):
        load_store(f)


def test_load_store_parallel_matches_sequential(write_post, content_dir):
    """Worker count does not change the result or its order."""
    for i in range(12):
        write_post(f"post-{i:02d}.md", title=f"Post {i}", date=f"2025-01-{i + 1:02d}T00:00:00Z")
    (content_dir / "broken.md").write_text("+++\ntitle = \"x\"\n")
    parallel = load_store(content_dir, workers=4)
    sequential = load_store(content_dir, workers=1)
    assert parallel.docs == sequential.docs
    assert [str(e) for e in parallel.errors] == [str(e) for e in sequential.errors]


def test_load_store_empty_dir(content_dir):
    store = load_store(content_dir)
    assert store.docs == ()
    assert store.errors == ()
