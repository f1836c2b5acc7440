"""Vault discovery: turn a directory of Markdown notes into a document tree."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from ..config.defaults import DOCUMENT_EXTENSION
from .exceptions import DocumentReadError, VaultNotFoundError
from .links import extract_wiki_links
from .models import DocumentEntry


def scan_vault(root: Path) -> list[DocumentEntry]:
    """Build the document tree for a vault directory.

    Hidden entries are skipped, only ``.md`` files are kept, and folders
    appear only when they contain notes somewhere beneath them.  Each level
    is sorted folders first, then case-insensitively by name.

    Args:
        root: Vault root directory

    Returns:
        Top-level entries of the tree

    Raises:
        VaultNotFoundError: If root does not exist or is not a directory
    """
    if not root.exists():
        raise VaultNotFoundError(f"Vault not found: {root}", context={"path": str(root)})
    if not root.is_dir():
        raise VaultNotFoundError(
            f"Vault path is not a directory: {root}", context={"path": str(root)}
        )

    entries = _scan_dir(root)
    logger.debug(f"Scanned vault {root}: {len(entries)} top-level entries")
    return entries


def _scan_dir(directory: Path) -> list[DocumentEntry]:
    entries: list[DocumentEntry] = []
    try:
        children = list(directory.iterdir())
    except OSError as e:
        logger.warning(f"Cannot list {directory}: {e}")
        return entries

    for path in children:
        if path.name.startswith("."):
            continue
        if path.is_dir():
            sub_entries = _scan_dir(path)
            if sub_entries:
                entries.append(
                    DocumentEntry(
                        name=path.name,
                        id=str(path),
                        is_container=True,
                        children=tuple(sub_entries),
                    )
                )
        elif path.suffix == DOCUMENT_EXTENSION:
            entries.append(DocumentEntry(name=path.name, id=str(path)))

    entries.sort(key=lambda e: (0 if e.is_container else 1, e.name.lower()))
    return entries


def document_title(name: str) -> str:
    """Normalized node title for a document display name."""
    return name.removesuffix(DOCUMENT_EXTENSION)


class VaultLinkReader:
    """Reads a document from disk and extracts its wikilinks."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def __call__(self, entry: DocumentEntry) -> list[str]:
        """Return the link names found in ``entry``.

        Raises:
            DocumentReadError: If the file cannot be read or decoded
        """
        try:
            content = Path(entry.id).read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentReadError(
                f"Cannot read {entry.id}: {e}", context={"path": entry.id}
            ) from e
        return extract_wiki_links(content)
