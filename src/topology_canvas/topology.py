"""Connection rules for the topology diagram.

A network link may only join two linkable nodes (vnets) that sit in the
same resource group.  ``can_connect`` is the predicate the host evaluates
both when a connection drag starts and when it completes; ``connect``
builds the edge for a completed connection, or returns None so the
attempt is silently discarded.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .catalog import DEFAULT_CATALOG, KindCatalog
from .models import EDGE_NETWORK_LINK, DiagramEdge, DiagramNode


logger = logging.getLogger(__name__)


def _find(node_id: str, all_nodes: Iterable[DiagramNode]) -> Optional[DiagramNode]:
    for node in all_nodes:
        if node.id == node_id:
            return node
    return None


def can_connect(
    source_id: str,
    target_id: str,
    all_nodes: Iterable[DiagramNode],
    catalog: Optional[KindCatalog] = None,
) -> bool:
    """Whether a network link between the two nodes is allowed.

    True only if both ids resolve to linkable nodes with the same,
    non-empty ``parent_id``.  A missing endpoint fails closed.
    """
    catalog = catalog or DEFAULT_CATALOG
    nodes = list(all_nodes)
    source = _find(source_id, nodes)
    target = _find(target_id, nodes)
    if source is None or target is None:
        return False

    if not (catalog.is_linkable(source.type) and catalog.is_linkable(target.type)):
        return False

    return bool(source.parent_id) and source.parent_id == target.parent_id


def edge_id(source_id: str, target_id: str) -> str:
    return f"edge__{source_id}-{target_id}"


def _unique_id(base: str, taken: set[str]) -> str:
    # Ids containing "-" can produce the same base for different endpoints
    candidate = base
    suffix = 1
    while candidate in taken:
        candidate = f"{base}_{suffix}"
        suffix += 1
    return candidate


def connect(
    source_id: str,
    target_id: str,
    all_nodes: Iterable[DiagramNode],
    edges: Iterable[DiagramEdge],
    catalog: Optional[KindCatalog] = None,
) -> Optional[DiagramEdge]:
    """Build the edge for a completed connection.

    Returns None if the connection fails ``can_connect`` or an edge between
    the same source and target already exists.
    """
    if not can_connect(source_id, target_id, all_nodes, catalog):
        logger.debug(f"Discarding connection {source_id} -> {target_id}: not allowed")
        return None

    taken: set[str] = set()
    for edge in edges:
        if edge.source == source_id and edge.target == target_id:
            logger.debug(f"Discarding connection {source_id} -> {target_id}: already exists")
            return None
        taken.add(edge.id)

    return DiagramEdge(
        id=_unique_id(edge_id(source_id, target_id), taken),
        source=source_id,
        target=target_id,
        type=EDGE_NETWORK_LINK,
    )
