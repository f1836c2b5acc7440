"""notegraph - force-directed knowledge graph engine for Markdown note vaults."""

__version__ = "0.3.1"
__author__ = "notegraph contributors"

from .core.exceptions import NoteGraphError

__all__ = ["NoteGraphError", "__version__"]
