"""Shared fixtures for notegraph tests."""

from __future__ import annotations

import random
from collections.abc import Callable
from pathlib import Path

import pytest

from notegraph.core.exceptions import DocumentReadError
from notegraph.core.models import DocumentEntry


def doc(name: str, folder: str = "") -> DocumentEntry:
    """In-memory leaf entry; the id doubles as its path."""
    path = f"{folder}/{name}" if folder else name
    return DocumentEntry(name=name, id=path)


def folder(name: str, *children: DocumentEntry, parent: str = "") -> DocumentEntry:
    path = f"{parent}/{name}" if parent else name
    return DocumentEntry(name=name, id=path, is_container=True, children=tuple(children))


class MemoryLinkReader:
    """Link reader backed by a dict of entry id -> link names."""

    def __init__(self, links: dict[str, list[str]], unreadable: set[str] | None = None):
        self.links = links
        self.unreadable = unreadable or set()
        self.calls: list[str] = []

    def __call__(self, entry: DocumentEntry) -> list[str]:
        self.calls.append(entry.id)
        if entry.id in self.unreadable:
            raise DocumentReadError(f"cannot read {entry.id}")
        return self.links.get(entry.id, [])


@pytest.fixture
def abc_tree() -> list[DocumentEntry]:
    """A links to B, B links to C."""
    return [doc("A.md"), doc("B.md"), doc("C.md")]


@pytest.fixture
def abc_reader() -> MemoryLinkReader:
    return MemoryLinkReader({"A.md": ["B"], "B.md": ["C"]})


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def make_vault(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Create a vault on disk from a mapping of relative path -> content."""

    def _make(files: dict[str, str]) -> Path:
        root = tmp_path / "vault"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def sample_vault(make_vault) -> Path:
    return make_vault(
        {
            "Index.md": "# Index\nSee [[Projects]] and [[Reading List|books]].",
            "Projects.md": "Current: [[Garden]]\nBack to [[Index]].",
            "Reading List.md": "Nothing linked yet.",
            "areas/Garden.md": "Plants. Related: [[Projects]] [[Missing Note]]",
            "areas/Health.md": "No links.",
            ".obsidian/workspace.md": "[[Index]]",
            "attachments/photo.png": "not a note",
        }
    )
