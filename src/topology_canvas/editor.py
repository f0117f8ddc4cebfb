"""
Drag-and-drop editing session for a topology diagram.

``DiagramEditor`` is the glue between host input events and the pure
placement/topology functions.  It owns the ``Diagram`` store, the id
generator and the palette's current drag selection:

    palette drag start  -> start_drag(kind)
    pointer over canvas -> drag_over(x, y)      (target highlighting)
    drop on canvas      -> drop(x, y)           -> new node or None
    connection start    -> is_valid_connection(source, target)
    connection complete -> connect(source, target) -> new edge or None

Screen coordinates are converted with the host-supplied
``screen_to_canvas`` callable; pan/zoom live entirely in the host.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .catalog import KindCatalog, get_catalog
from .geometry import resolve_absolute
from .models import Diagram, DiagramEdge, DiagramNode, Point
from .placement import IdGenerator, PlacementResult, drop_target, place_node
from .topology import can_connect, connect


logger = logging.getLogger(__name__)

ScreenToCanvas = Callable[[float, float], Point]


def _identity(x: float, y: float) -> Point:
    return Point(x=x, y=y)


def _next_counter(diagram: Diagram, prefix: str) -> int:
    """First id counter not already used by a node in ``diagram``."""
    counter = 0
    for node in diagram.nodes:
        suffix = node.id[len(prefix):] if node.id.startswith(prefix) else ""
        if suffix.isdigit():
            counter = max(counter, int(suffix) + 1)
    return counter


class DiagramEditor:
    """Stateful editor driving the placement and topology rules."""

    def __init__(
        self,
        catalog: Optional[KindCatalog] = None,
        screen_to_canvas: Optional[ScreenToCanvas] = None,
        diagram: Optional[Diagram] = None,
    ):
        self.catalog = catalog or get_catalog()
        self.screen_to_canvas = screen_to_canvas or _identity
        self.diagram = diagram or Diagram()
        prefix = self.catalog.id_prefix
        self.ids = IdGenerator(prefix=prefix, start=_next_counter(self.diagram, prefix))
        self.dragged_kind: Optional[str] = None
        self.last_result: Optional[PlacementResult] = None

    # --- Palette ---

    def start_drag(self, kind: str) -> None:
        """Select the kind being dragged from the palette.

        Raises:
            ValueError: If the kind is not in the catalog
        """
        self.catalog.get_kind(kind)
        self.dragged_kind = kind

    def cancel_drag(self) -> None:
        self.dragged_kind = None

    # --- Drop ---

    def drag_over(self, screen_x: float, screen_y: float) -> Optional[DiagramNode]:
        """Return the container the current drag would drop into, if any."""
        point = self.screen_to_canvas(screen_x, screen_y)
        return drop_target(self.dragged_kind, point, self.diagram.nodes, self.catalog)

    def drop(self, screen_x: float, screen_y: float) -> Optional[DiagramNode]:
        """Place the dragged kind at a screen position.

        Returns the committed node, or None when the drop was rejected
        (details in ``last_result``).  The drag selection is kept so the
        same kind can be dropped repeatedly.
        """
        point = self.screen_to_canvas(screen_x, screen_y)
        result = place_node(self.dragged_kind, point, self.diagram.nodes, self.ids, self.catalog)
        self.last_result = result
        if not result.accepted:
            logger.info(f"Drop of {self.dragged_kind} at ({point.x}, {point.y}) rejected: {result.reason.value}")
            return None

        self.diagram.add_node(result.node)
        logger.info(f"Placed {result.node.type} '{result.node.id}'"
                    + (f" in '{result.node.parent_id}'" if result.node.parent_id else ""))
        return result.node

    # --- Connections ---

    def is_valid_connection(self, source_id: str, target_id: str) -> bool:
        return can_connect(source_id, target_id, self.diagram.nodes, self.catalog)

    def connect(self, source_id: str, target_id: str) -> Optional[DiagramEdge]:
        """Commit a completed connection if the topology rules allow it."""
        edge = connect(source_id, target_id, self.diagram.nodes, self.diagram.edges, self.catalog)
        if edge is not None:
            self.diagram.add_edge(edge)
            logger.info(f"Linked '{source_id}' -> '{target_id}'")
        return edge

    # --- Queries ---

    def absolute_position(self, node_id: str) -> Optional[Point]:
        node = self.diagram.get_node(node_id)
        if node is None:
            return None
        return resolve_absolute(node, self.diagram.nodes)
