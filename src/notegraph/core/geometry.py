"""Node sizing shared by rendering and hit-testing."""

import math

from ..config.defaults import (
    FOLDER_BASE_RADIUS,
    FOLDER_LOG_SCALE,
    FOLDER_MAX_RADIUS,
    FOLDER_MIN_RADIUS,
    NODE_BASE_RADIUS,
    NODE_LOG_SCALE,
    NODE_MAX_RADIUS,
    NODE_MIN_RADIUS,
)
from .models import GraphNode


def node_radius(node: GraphNode, size_multiplier: float = 1.0) -> float:
    """Visual radius of a node in world pixels.

    Logarithmic in the connection count so hubs do not swamp the canvas:
    ``min(max(4, 5 + log(connections + 1) * 4) * size, 25)`` for documents,
    a larger capped variant for folders.
    """
    if node.is_folder:
        base = max(
            FOLDER_MIN_RADIUS,
            FOLDER_BASE_RADIUS
            + math.log(max(node.connections, 1) + 1) * FOLDER_LOG_SCALE,
        )
        return min(base * size_multiplier, FOLDER_MAX_RADIUS)

    base = max(
        NODE_MIN_RADIUS,
        NODE_BASE_RADIUS + math.log(node.connections + 1) * NODE_LOG_SCALE,
    )
    return min(base * size_multiplier, NODE_MAX_RADIUS)


def contains_point(
    node: GraphNode, x: float, y: float, size_multiplier: float, slop: float
) -> bool:
    """True if world point (x, y) lies inside the node's hit circle."""
    return math.hypot(node.x - x, node.y - y) < node_radius(node, size_multiplier) + slop
