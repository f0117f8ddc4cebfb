"""
Placement of a dropped node into the diagram.

A drop is resolved in one attempt:

  1. Look up the kind's fixed size and required parent kind in the catalog.
  2. Top-level kinds are placed at the drop point, unparented.
  3. Nested kinds need a container of the required parent kind under the
     drop point.  The position is converted to container-relative
     coordinates and clamped so the node sits at least ``margin`` away
     from every container edge.

Finding a container under the drop point is necessary but not sufficient:
a container too small to hold the node with the margin on both sides
rejects it regardless of where it was dropped.

Rejections are ordinary results, not exceptions.  ``place_node`` never
modifies ``all_nodes``; committing the returned node is up to the caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, model_validator

from .catalog import DEFAULT_CATALOG, KindCatalog
from .geometry import find_container, resolve_absolute
from .models import DiagramNode, Point


logger = logging.getLogger(__name__)


class RejectReason(str, Enum):
    NO_KIND_SELECTED = "no_kind_selected"
    UNKNOWN_KIND = "unknown_kind"
    NO_CONTAINER = "no_container"
    CONTAINER_TOO_SMALL = "container_too_small"


class PlacementResult(BaseModel):
    """Outcome of a single drop.

    Exactly one of ``node`` and ``reason`` is set.  ``parent`` is the
    chosen container, when one was found (it is also reported for a
    ``container_too_small`` rejection).
    """
    node: Optional[DiagramNode] = None
    parent: Optional[DiagramNode] = None
    reason: Optional[RejectReason] = None

    @model_validator(mode="after")
    def _check_outcome(self) -> PlacementResult:
        if (self.node is None) == (self.reason is None):
            raise ValueError("A placement result needs exactly one of node and reason")
        return self

    @property
    def accepted(self) -> bool:
        return self.node is not None

    @classmethod
    def rejected(cls, reason: RejectReason, parent: Optional[DiagramNode] = None) -> PlacementResult:
        return cls(reason=reason, parent=parent)


class IdGenerator:
    """Sequential node id source (``dndnode_0``, ``dndnode_1``, ...).

    The caller owns the generator and passes it to ``place_node`` so that
    placement itself keeps no hidden state.
    """

    def __init__(self, prefix: str = "dndnode_", start: int = 0):
        self.prefix = prefix
        self.counter = start

    def next_id(self) -> str:
        node_id = f"{self.prefix}{self.counter}"
        self.counter += 1
        return node_id


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def drop_target(
    kind: Optional[str],
    point: Point,
    all_nodes: Iterable[DiagramNode],
    catalog: Optional[KindCatalog] = None,
) -> Optional[DiagramNode]:
    """Return the container a drop of ``kind`` at ``point`` would land in.

    None for top-level or unknown kinds, or when no container is under the
    point.  Used to highlight a valid target while dragging.
    """
    catalog = catalog or DEFAULT_CATALOG
    spec = catalog.find_kind(kind)
    if spec is None or spec.parent is None:
        return None
    return find_container(point, spec.parent, all_nodes)


def place_node(
    kind: Optional[str],
    drop_point: Point,
    all_nodes: Iterable[DiagramNode],
    ids: IdGenerator,
    catalog: Optional[KindCatalog] = None,
) -> PlacementResult:
    """Resolve a drop of ``kind`` at the absolute canvas point ``drop_point``.

    Args:
        kind:       The dragged kind, or None if nothing is being dragged.
        drop_point: Drop location, already converted to canvas coordinates.
        all_nodes:  Snapshot of the placed nodes.
        ids:        Source of the new node's id; only drawn on acceptance.
        catalog:    Kind configuration (defaults to ``DEFAULT_CATALOG``).

    Returns:
        A PlacementResult holding the new node or the rejection reason.
    """
    catalog = catalog or DEFAULT_CATALOG
    if not kind:
        return PlacementResult.rejected(RejectReason.NO_KIND_SELECTED)

    spec = catalog.find_kind(kind)
    if spec is None:
        logger.debug(f"Dropped unknown kind '{kind}'")
        return PlacementResult.rejected(RejectReason.UNKNOWN_KIND)

    nodes = list(all_nodes)
    logger.debug(f"[{kind}] Drop position: ({drop_point.x}, {drop_point.y})")

    if spec.parent is None:
        node = DiagramNode(
            id=ids.next_id(),
            type=kind,
            x=drop_point.x,
            y=drop_point.y,
            width=spec.width,
            height=spec.height,
        )
        logger.debug(f"Adding top-level {kind} '{node.id}' at ({node.x}, {node.y})")
        return PlacementResult(node=node)

    container = find_container(drop_point, spec.parent, nodes)
    if container is None:
        logger.debug(f"No {spec.parent} found to place the {kind} in")
        return PlacementResult.rejected(RejectReason.NO_CONTAINER)

    margin = catalog.margin
    max_x = container.width - spec.width - margin
    max_y = container.height - spec.height - margin
    if max_x < margin or max_y < margin:
        logger.debug(f"Container '{container.id}' is too small to hold a {kind}")
        return PlacementResult.rejected(RejectReason.CONTAINER_TOO_SMALL, parent=container)

    origin = resolve_absolute(container, nodes)
    node = DiagramNode(
        id=ids.next_id(),
        type=kind,
        x=clamp(drop_point.x - origin.x, margin, max_x),
        y=clamp(drop_point.y - origin.y, margin, max_y),
        width=spec.width,
        height=spec.height,
        parent_id=container.id,
    )
    logger.debug(f"Adding {kind} '{node.id}' inside {container.type} '{container.id}' "
                 f"at relative ({node.x}, {node.y})")
    return PlacementResult(node=node, parent=container)
