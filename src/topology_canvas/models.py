"""
Data models for topology-canvas — the diagram ontology.

A topology diagram is a tree of nested cloud-infrastructure containers:

    Canvas
    └── Subscription      — top-level container, positioned in canvas space
        └── Resource Group    — nested inside exactly one subscription
            └── VNet              — a network; cannot contain anything

Every node stores its ``x``/``y`` **relative to its parent** when
``parent_id`` is set, and as an absolute canvas coordinate otherwise.
Code that needs canvas coordinates must go through
``geometry.resolve_absolute`` rather than reading ``x``/``y`` directly.

Edges link two node ids.  Only ``network-link`` edges are produced by the
editor, and only between vnets that share a resource group (see
``topology.can_connect``).
"""

from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Kind names
# ---------------------------------------------------------------------------

SUBSCRIPTION = "subscription"
RESOURCE_GROUP = "resourceGroup"
VNET = "vnet"

EDGE_DEFAULT = "default"
EDGE_NETWORK_LINK = "network-link"


# ---------------------------------------------------------------------------
# Geometry primitives
# ---------------------------------------------------------------------------

class Point(BaseModel):
    """A 2D coordinate in canvas units."""
    model_config = ConfigDict(allow_inf_nan=False)

    x: float = 0.0
    y: float = 0.0


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------

class DiagramNode(BaseModel):
    """A placed diagram element.

    Position
    --------
    ``x`` and ``y`` are relative to the parent's absolute position when
    ``parent_id`` is set.  Top-level nodes (subscriptions) never have a
    parent, so their coordinates are absolute.

    Size
    ----
    ``width`` and ``height`` are fixed per kind by the ``KindCatalog`` at
    creation time.  Nodes are not resized after placement.

    Labeling
    --------
    ``get_label()`` returns ``label`` if set, otherwise ``"<type> node"``,
    which is what the palette shows for a freshly dropped node.
    """
    model_config = ConfigDict(allow_inf_nan=False)

    id: str
    type: str
    x: float = 0.0
    y: float = 0.0
    width: float = 150.0
    height: float = 40.0
    parent_id: Optional[str] = None
    label: Optional[str] = None

    @property
    def position(self) -> Point:
        """The stored (possibly parent-relative) position."""
        return Point(x=self.x, y=self.y)

    def get_label(self) -> str:
        return self.label if self.label else f"{self.type} node"


# ---------------------------------------------------------------------------
# Edge
# ---------------------------------------------------------------------------

class DiagramEdge(BaseModel):
    """A link between two nodes, identified by their ids."""
    id: str
    source: str
    target: str
    type: str = EDGE_DEFAULT


# ---------------------------------------------------------------------------
# Diagram (the host-side store)
# ---------------------------------------------------------------------------

class Diagram(BaseModel):
    """The node and edge collections owned by the editor.

    The core functions only ever read ``nodes``/``edges`` as a snapshot;
    committing new elements goes through ``add_node`` and ``add_edge`` so
    the id lookup map stays in sync.  Node order is creation order, which
    is also the tie-break order for overlapping containers.
    """
    nodes: list[DiagramNode] = Field(default_factory=list)
    edges: list[DiagramEdge] = Field(default_factory=list)

    _node_map: dict[str, DiagramNode] = {}

    def model_post_init(self, __context):
        """Build lookup maps after initialization."""
        self._node_map = {node.id: node for node in self.nodes}

    def get_node(self, node_id: str) -> Optional[DiagramNode]:
        """Look up a node by id."""
        return self._node_map.get(node_id)

    def add_node(self, node: DiagramNode) -> None:
        if node.id in self._node_map:
            raise ValueError(f"Duplicate node id '{node.id}'")
        self.nodes.append(node)
        self._node_map[node.id] = node

    def add_edge(self, edge: DiagramEdge) -> None:
        self.edges.append(edge)

    def children_of(self, node_id: str) -> list[DiagramNode]:
        """Return the direct children of a node, in creation order."""
        return [node for node in self.nodes if node.parent_id == node_id]
