from pathlib import Path

import pytest

from marksite.errors import InputNotFound
from marksite.tree import FileKind, classify, partition, walk_tree


def create_tree(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    (root / "b" / "deep").mkdir(parents=True)
    (root / "out" / "nested").mkdir(parents=True)
    (root / "index.md").write_text("# Home", encoding="utf-8")
    (root / "a.md").write_text("# A", encoding="utf-8")
    (root / "img.png").write_bytes(b"\x89PNG")
    (root / "b" / "c.scss").write_text("a { color: red; }", encoding="utf-8")
    (root / "b" / "deep" / "NOTES.MD").write_text("notes", encoding="utf-8")
    (root / "out" / "index.html").write_text("stale", encoding="utf-8")
    (root / "out" / "nested" / "x.md").write_text("stale", encoding="utf-8")
    return root


def test_classify_by_suffix():
    assert classify(Path("x/index.md")) is FileKind.DOCUMENT
    assert classify(Path("README.MD")) is FileKind.DOCUMENT
    assert classify(Path("theme.scss")) is FileKind.ASSET
    assert classify(Path("notes.markdown")) is FileKind.ASSET
    assert classify(Path("md")) is FileKind.ASSET


def test_walk_is_depth_first_sorted_and_skips_output(tmp_path):
    root = create_tree(tmp_path)
    entries = walk_tree(root, exclude=[root / "out"])
    rel = [e.path.relative_to(root.resolve()).as_posix() for e in entries]
    assert rel == ["a.md", "b/c.scss", "b/deep/NOTES.MD", "img.png", "index.md"]
    assert all(e.path.is_absolute() for e in entries)


def test_walk_without_exclusions_includes_everything(tmp_path):
    root = create_tree(tmp_path)
    rel = {e.path.relative_to(root.resolve()).as_posix() for e in walk_tree(root)}
    assert "out/index.html" in rel


def test_partition_preserves_order(tmp_path):
    root = create_tree(tmp_path)
    documents, assets = partition(walk_tree(root, exclude=[root / "out"]))
    assert [d.path.name for d in documents] == ["a.md", "NOTES.MD", "index.md"]
    assert [a.path.name for a in assets] == ["c.scss", "img.png"]
    assert all(d.is_document for d in documents)
    assert not any(a.is_document for a in assets)


def test_walk_missing_root(tmp_path):
    with pytest.raises(InputNotFound):
        walk_tree(tmp_path / "missing")
