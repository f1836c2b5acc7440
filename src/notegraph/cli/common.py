"""Helpers shared by CLI commands."""

import random
from pathlib import Path

from pydantic import ValidationError

from ..config.settings import GraphSettings
from ..core.exceptions import ConfigError, VaultError
from ..core.graph_builder import GraphModelBuilder
from ..core.models import GraphNode, GraphSnapshot
from ..core.scene import GraphScene
from ..core.vault import VaultLinkReader, document_title, scan_vault


def load_settings(
    config: Path | None,
    include_hierarchy: bool | None = None,
    boundary: str | None = None,
) -> GraphSettings:
    """Load settings from ``config`` and apply command-line overrides."""
    settings = GraphSettings.load(config) if config else GraphSettings()
    if include_hierarchy is not None:
        settings.include_hierarchy = include_hierarchy
    if boundary is not None:
        try:
            settings.boundary = boundary
        except ValidationError as e:
            raise ConfigError(
                f"Unknown boundary '{boundary}' (expected circular or rectangular)",
                context={"boundary": boundary},
            ) from e
    return settings


def build_scene(
    vault: Path,
    settings: GraphSettings,
    width: float,
    height: float,
    seed: int | None = None,
) -> GraphScene:
    """Scan ``vault`` and return a scene with its graph loaded."""
    rng = random.Random(seed) if seed is not None else None
    builder = GraphModelBuilder(include_hierarchy=settings.include_hierarchy, rng=rng)
    scene = GraphScene(settings, width=width, height=height, builder=builder)
    scene.load(scan_vault(vault), VaultLinkReader())
    return scene


def find_note(snapshot: GraphSnapshot, name: str) -> GraphNode:
    """Look up a note by title (case-insensitive, ``.md`` optional).

    Raises:
        VaultError: If no note has that title
    """
    wanted = document_title(name.strip()).lower()
    for node in snapshot.nodes:
        if not node.is_folder and node.id.lower() == wanted:
            return node
    raise VaultError(f"No note named '{name}' in vault", context={"note": name})
