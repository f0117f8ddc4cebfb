"""
Coordinate resolution and containment search for nested diagram nodes.

Nodes store positions relative to their parent, so anything that compares
a node against a canvas point (hit-testing, drop targeting) first walks
the ancestor chain to get the node's absolute position.

All functions here are pure: they read a snapshot of the node list and
never modify it.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from pydantic import BaseModel

from .models import DiagramNode, Point


logger = logging.getLogger(__name__)

# Deeper chains than this can only come from corrupted state.
MAX_DEPTH = 64


class Rect(BaseModel):
    """An axis-aligned rectangle in absolute canvas coordinates."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, point: Point) -> bool:
        """Point-in-rectangle test with inclusive bounds on every edge."""
        return (
            self.x <= point.x <= self.right
            and self.y <= point.y <= self.bottom
        )


def _index(all_nodes: Iterable[DiagramNode]) -> dict[str, DiagramNode]:
    # First occurrence wins, matching a linear find() over the list
    index: dict[str, DiagramNode] = {}
    for node in all_nodes:
        index.setdefault(node.id, node)
    return index


def resolve_absolute(node: DiagramNode, all_nodes: Iterable[DiagramNode]) -> Point:
    """Compute a node's absolute canvas position.

    Walks ``parent_id`` references up to a root, summing relative offsets.
    A parent id that is missing from ``all_nodes`` ends the walk as if the
    node had no parent.  A cycle or a chain longer than ``MAX_DEPTH`` also
    ends the walk, with a warning, returning the offsets summed so far.
    """
    index = _index(all_nodes)
    x, y = node.x, node.y
    visited = {node.id}
    current = node

    depth = 0
    while current.parent_id:
        parent = index.get(current.parent_id)
        if parent is None:
            logger.debug(f"Parent '{current.parent_id}' of '{current.id}' not found; treating as unparented")
            break
        if parent.id in visited or depth >= MAX_DEPTH:
            logger.warning(f"Parent chain of '{node.id}' is cyclic or too deep; stopping at '{current.id}'")
            break
        visited.add(parent.id)
        x += parent.x
        y += parent.y
        current = parent
        depth += 1

    return Point(x=x, y=y)


def absolute_rect(node: DiagramNode, all_nodes: Iterable[DiagramNode]) -> Rect:
    """Return the node's bounding rectangle in absolute canvas coordinates."""
    origin = resolve_absolute(node, all_nodes)
    return Rect(x=origin.x, y=origin.y, width=node.width, height=node.height)


def find_container(
    point: Point,
    required_type: str,
    all_nodes: Iterable[DiagramNode],
) -> Optional[DiagramNode]:
    """Find the first node of ``required_type`` whose rectangle contains ``point``.

    Candidates are tested in the iteration order of ``all_nodes`` (creation
    order for a ``Diagram``); the first hit wins even if a later candidate
    overlaps it visually.
    """
    nodes = list(all_nodes)
    candidates = [node for node in nodes if node.type == required_type]
    logger.debug(f"Looking for a '{required_type}' container at ({point.x}, {point.y}); "
                 f"{len(candidates)} candidates")

    for candidate in candidates:
        rect = absolute_rect(candidate, nodes)
        if rect.contains(point):
            logger.debug(f"Point ({point.x}, {point.y}) inside '{candidate.id}' at ({rect.x}, {rect.y})")
            return candidate

    return None
