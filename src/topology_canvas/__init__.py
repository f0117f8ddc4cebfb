"""topology-canvas — containment and topology rules for cloud diagram editing."""

__version__ = "0.1.0"

from .catalog import DEFAULT_CATALOG, KindCatalog, KindSpec, get_catalog
from .editor import DiagramEditor
from .geometry import find_container, resolve_absolute
from .models import Diagram, DiagramEdge, DiagramNode, Point
from .placement import IdGenerator, PlacementResult, RejectReason, place_node
from .topology import can_connect, connect

__all__ = [
    "__version__",
    "DEFAULT_CATALOG",
    "KindCatalog",
    "KindSpec",
    "get_catalog",
    "DiagramEditor",
    "find_container",
    "resolve_absolute",
    "Diagram",
    "DiagramEdge",
    "DiagramNode",
    "Point",
    "IdGenerator",
    "PlacementResult",
    "RejectReason",
    "place_node",
    "can_connect",
    "connect",
]
