"""File system watcher that rebuilds the graph when notes change."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from concurrent.futures import Future
from pathlib import Path

from loguru import logger
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from ..config.defaults import DOCUMENT_EXTENSION
from .graph_builder import LinkReader
from .models import GraphSnapshot
from .scene import GraphScene
from .vault import VaultLinkReader, scan_vault


class NoteFileHandler(FileSystemEventHandler):
    """Handler for note changes.

    Every relevant event resets a single debounce timer; once the vault has
    been quiet for ``debounce_delay`` seconds the callback runs once.
    """

    def __init__(
        self,
        callback: Callable[[set[str]], Awaitable[None]],
        loop: asyncio.AbstractEventLoop,
        debounce_delay: float = 0.5,
        root: Path | None = None,
    ):
        """Initialize note handler.

        Args:
            callback: Async callback receiving the changed paths
            loop: Event loop to schedule the callback on
            debounce_delay: Delay in seconds to debounce rapid changes
            root: Watched directory; hidden-path checks start below it
        """
        super().__init__()
        self.root = root
        self.callback = callback
        self.loop = loop
        self.debounce_delay = debounce_delay
        self.pending_changes: set[str] = set()
        self.last_change_time: float = 0
        self.debounce_task: Future | None = None

    def should_process(self, file_path: str, is_directory: bool = False) -> bool:
        """Check if a path can affect the graph."""
        path = Path(file_path)
        if self.root is not None and path.is_relative_to(self.root):
            path = path.relative_to(self.root)

        if any(part.startswith(".") for part in path.parts):
            return False

        # Removing or renaming a folder changes every note beneath it
        if is_directory:
            return True

        return path.suffix == DOCUMENT_EXTENSION

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self.should_process(event.src_path):
            self._schedule_change(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory and self.should_process(event.src_path):
            self._schedule_change(event.src_path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        if self.should_process(event.src_path, event.is_directory):
            self._schedule_change(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        if self.should_process(event.src_path, event.is_directory):
            self._schedule_change(event.src_path)
        dest_path = getattr(event, "dest_path", "")
        if dest_path and self.should_process(dest_path, event.is_directory):
            self._schedule_change(dest_path)

    def _schedule_change(self, file_path: str) -> None:
        """Schedule a rebuild with debouncing."""
        self.pending_changes.add(file_path)
        self.last_change_time = time.time()

        if self.debounce_task and not self.debounce_task.done():
            self.debounce_task.cancel()

        self.debounce_task = asyncio.run_coroutine_threadsafe(
            self._debounced_process(), self.loop
        )

    async def _debounced_process(self) -> None:
        """Run the callback once the debounce window has passed."""
        await asyncio.sleep(self.debounce_delay)

        if time.time() - self.last_change_time < self.debounce_delay:
            return

        changes = self.pending_changes.copy()
        self.pending_changes.clear()
        if not changes:
            return

        try:
            await self.callback(changes)
        except Exception as e:
            logger.error(f"Error rebuilding graph after {len(changes)} changes: {e}")


class VaultWatcher:
    """Watches a vault and refreshes a scene whenever notes change."""

    def __init__(
        self,
        vault_root: Path,
        scene: GraphScene,
        link_reader: LinkReader | None = None,
        debounce_delay: float = 0.5,
        on_rebuild: Callable[[GraphSnapshot], None] | None = None,
    ):
        """Initialize vault watcher.

        Args:
            vault_root: Vault directory to watch
            scene: Scene to refresh
            link_reader: Link reader used for rebuilds
            debounce_delay: Quiet period before a rebuild
            on_rebuild: Called with the new snapshot after each rebuild
        """
        self.vault_root = vault_root
        self.scene = scene
        self.link_reader = link_reader or VaultLinkReader()
        self.debounce_delay = debounce_delay
        self.on_rebuild = on_rebuild
        self.observer: Observer | None = None
        self.handler: NoteFileHandler | None = None
        self.is_running = False
        self.rebuilds = 0

    async def start(self) -> None:
        """Start watching for note changes."""
        if self.is_running:
            logger.warning("Vault watcher is already running")
            return

        logger.info(f"Starting vault watcher for {self.vault_root}")

        loop = asyncio.get_running_loop()
        self.handler = NoteFileHandler(
            callback=self._handle_changes,
            loop=loop,
            debounce_delay=self.debounce_delay,
            root=self.vault_root,
        )

        self.observer = Observer()
        self.observer.schedule(self.handler, str(self.vault_root), recursive=True)
        self.observer.start()
        self.is_running = True

        logger.info("Vault watcher started successfully")

    async def stop(self) -> None:
        """Stop watching for note changes."""
        if not self.is_running:
            return

        logger.info("Stopping vault watcher")

        if self.observer:
            self.observer.stop()
            self.observer.join()
            self.observer = None

        if self.handler and self.handler.debounce_task:
            self.handler.debounce_task.cancel()
        self.handler = None
        self.is_running = False

        logger.info("Vault watcher stopped")

    async def rebuild(self) -> GraphSnapshot:
        """Rescan the vault and swap a freshly built graph into the scene."""
        tree = await asyncio.to_thread(scan_vault, self.vault_root)
        self.scene.cache.invalidate()
        snapshot = await self.scene.refresh(tree, self.link_reader)
        self.rebuilds += 1
        logger.info(
            f"Rebuilt graph: {len(snapshot)} nodes, {len(snapshot.edges)} edges"
        )
        if self.on_rebuild is not None:
            self.on_rebuild(snapshot)
        return snapshot

    async def _handle_changes(self, changes: set[str]) -> None:
        logger.debug(f"Processing {len(changes)} note changes")
        await self.rebuild()

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.stop()
