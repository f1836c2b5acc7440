"""Unit tests for the vault watcher and its debounced event handler."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from watchdog.events import (
    DirDeletedEvent,
    DirModifiedEvent,
    FileCreatedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from notegraph.core.graph_builder import GraphModelBuilder
from notegraph.core.scene import GraphScene
from notegraph.core.vault import VaultLinkReader, scan_vault
from notegraph.core.watcher import NoteFileHandler, VaultWatcher


async def _noop(changes: set[str]) -> None:
    return None


class TestNoteFileHandler:
    @pytest.mark.asyncio
    async def test_should_process(self, tmp_path: Path):
        handler = NoteFileHandler(_noop, asyncio.get_running_loop(), root=tmp_path)

        assert handler.should_process(str(tmp_path / "notes" / "a.md"))
        assert not handler.should_process(str(tmp_path / "notes" / "a.txt"))
        assert not handler.should_process(str(tmp_path / ".obsidian" / "a.md"))
        assert handler.should_process(str(tmp_path / "notes"), is_directory=True)

    @pytest.mark.asyncio
    async def test_hidden_parent_of_root_is_fine(self, tmp_path: Path):
        root = tmp_path / ".config" / "vault"
        handler = NoteFileHandler(_noop, asyncio.get_running_loop(), root=root)
        assert handler.should_process(str(root / "a.md"))

    @pytest.mark.asyncio
    async def test_burst_of_events_triggers_one_callback(self, tmp_path: Path):
        batches: list[set[str]] = []

        async def record(changes: set[str]) -> None:
            batches.append(changes)

        handler = NoteFileHandler(record, asyncio.get_running_loop(), debounce_delay=0.05)
        a = str(tmp_path / "a.md")
        b = str(tmp_path / "b.md")
        handler.on_created(FileCreatedEvent(a))
        handler.on_modified(FileModifiedEvent(a))
        handler.on_moved(FileMovedEvent(b, str(tmp_path / "c.md")))
        handler.on_modified(DirModifiedEvent(str(tmp_path)))

        await asyncio.sleep(0.3)

        assert batches == [{a, b, str(tmp_path / "c.md")}]

    @pytest.mark.asyncio
    async def test_directory_delete_counts(self, tmp_path: Path):
        batches: list[set[str]] = []

        async def record(changes: set[str]) -> None:
            batches.append(changes)

        handler = NoteFileHandler(record, asyncio.get_running_loop(), debounce_delay=0.01)
        handler.on_deleted(DirDeletedEvent(str(tmp_path / "areas")))

        await asyncio.sleep(0.2)

        assert batches == [{str(tmp_path / "areas")}]

    @pytest.mark.asyncio
    async def test_callback_errors_are_logged_not_raised(self, tmp_path: Path):
        async def boom(changes: set[str]) -> None:
            raise RuntimeError("rebuild failed")

        handler = NoteFileHandler(boom, asyncio.get_running_loop(), debounce_delay=0.01)
        handler.on_created(FileCreatedEvent(str(tmp_path / "a.md")))
        await asyncio.sleep(0.2)

        assert handler.debounce_task.done()
        assert handler.debounce_task.exception() is None


class TestVaultWatcher:
    @pytest.fixture
    def scene(self, sample_vault: Path, rng) -> GraphScene:
        scene = GraphScene(builder=GraphModelBuilder(rng=rng))
        scene.load(scan_vault(sample_vault), VaultLinkReader())
        return scene

    @pytest.mark.asyncio
    async def test_rebuild_picks_up_new_note(self, sample_vault: Path, scene):
        seen = []
        watcher = VaultWatcher(sample_vault, scene, on_rebuild=seen.append)
        (sample_vault / "Missing Note.md").write_text("[[Health]]", encoding="utf-8")

        snapshot = await watcher.rebuild()

        assert scene.snapshot is snapshot
        assert "Missing Note" in snapshot
        assert {n.id for n in snapshot.neighbors("Missing Note")} == {"Garden", "Health"}
        assert seen == [snapshot]
        assert watcher.rebuilds == 1

    @pytest.mark.asyncio
    async def test_start_stop(self, sample_vault: Path, scene):
        watcher = VaultWatcher(sample_vault, scene)

        await watcher.start()
        assert watcher.is_running
        await watcher.start()  # second start is a no-op

        await watcher.stop()
        assert not watcher.is_running
        assert watcher.observer is None

    @pytest.mark.asyncio
    async def test_file_change_triggers_rebuild(self, sample_vault: Path, scene):
        async with VaultWatcher(sample_vault, scene, debounce_delay=0.05) as watcher:
            await asyncio.sleep(0.1)
            (sample_vault / "New.md").write_text("[[Index]]", encoding="utf-8")

            for _ in range(100):
                if watcher.rebuilds:
                    break
                await asyncio.sleep(0.05)

        assert watcher.rebuilds >= 1
        assert "New" in scene.snapshot
