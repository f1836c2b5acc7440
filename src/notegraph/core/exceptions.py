"""Typed exception hierarchy for notegraph.

Hierarchy
---------
NoteGraphError (base)
├── VaultError             – vault discovery / document tree errors
│   └── VaultNotFoundError
├── DocumentReadError      – a single document could not be read
├── ConfigError            – settings file / validation errors
└── RenderError            – unsupported drawing operation on a surface

The engine itself never raises for bad geometry, dangling links or stale
references; those are absorbed where they occur.  The classes below only
surface at the outer edges (vault scanning, settings loading, rendering
backends) and in the CLI.
"""

from typing import Any


class NoteGraphError(Exception):
    """Base exception for notegraph."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


# ── Vault layer ─────────────────────────────────────────────────────────


class VaultError(NoteGraphError):
    """Vault discovery errors."""

    pass


class VaultNotFoundError(VaultError):
    """Vault root does not exist or is not a directory."""

    pass


class DocumentReadError(NoteGraphError):
    """A document could not be read.

    Raised by link readers; ``GraphModelBuilder.build()`` logs and skips the
    affected document instead of aborting the build.
    """

    pass


# ── Configuration layer ─────────────────────────────────────────────────


class ConfigError(NoteGraphError):
    """Configuration / validation errors."""

    pass


# ── Rendering layer ─────────────────────────────────────────────────────


class RenderError(NoteGraphError):
    """Drawing operation not supported by a surface."""

    pass
