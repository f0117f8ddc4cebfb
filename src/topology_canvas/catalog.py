"""Kind catalog for topology-canvas — the domain configuration tables.

Each node kind has exactly one fixed size, at most one required parent
kind, and a flag saying whether it may be an endpoint of a network link.
Adding a new kind is a data change here, not a control-flow change in
the placement or topology code.

A catalog can also be loaded from YAML:

    margin: 10
    kinds:
      - type: subscription
        width: 300
        height: 300
      - type: resourceGroup
        width: 200
        height: 200
        parent: subscription
      - type: vnet
        width: 150
        height: 40
        parent: resourceGroup
        linkable: true
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from .models import RESOURCE_GROUP, SUBSCRIPTION, VNET


CATALOG_ENV_VAR = "TOPOLOGY_CANVAS_CATALOG"
DEFAULT_MARGIN = 10.0


class KindSpec(BaseModel):
    """Configuration for one node kind.

    Attributes:
        type:     The kind name carried by ``DiagramNode.type``.
        label:    Palette display name.
        width:    Fixed width assigned at creation.
        height:   Fixed height assigned at creation.
        parent:   Kind a node of this type must be dropped into, or None
                  for top-level kinds.
        linkable: Whether network-link edges may start or end here.
    """
    type: str
    label: Optional[str] = None
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    parent: Optional[str] = None
    linkable: bool = False

    def get_label(self) -> str:
        return self.label if self.label else self.type


class KindCatalog(BaseModel):
    """The closed set of kinds a diagram may contain, plus the nesting margin."""
    margin: float = Field(default=DEFAULT_MARGIN, ge=0)
    id_prefix: str = "dndnode_"
    kinds: list[KindSpec] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_hierarchy(self) -> KindCatalog:
        names = [kind.type for kind in self.kinds]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate kind names in catalog: {names}")

        by_name = {kind.type: kind for kind in self.kinds}
        for kind in self.kinds:
            if kind.parent is not None and kind.parent not in by_name:
                raise ValueError(
                    f"Kind '{kind.type}' requires unknown parent kind '{kind.parent}'"
                )

        # Parent chains must terminate at a top-level kind
        for kind in self.kinds:
            seen = {kind.type}
            current = kind.parent
            while current is not None:
                if current in seen:
                    raise ValueError(f"Cyclic parent chain through kind '{kind.type}'")
                seen.add(current)
                current = by_name[current].parent
        return self

    def kind_names(self) -> list[str]:
        return [kind.type for kind in self.kinds]

    def find_kind(self, name: Optional[str]) -> Optional[KindSpec]:
        """Return the spec for ``name``, or None if it is not in the catalog."""
        for kind in self.kinds:
            if kind.type == name:
                return kind
        return None

    def get_kind(self, name: str) -> KindSpec:
        """Get a kind spec by name.

        Raises:
            ValueError: If the kind is not in the catalog
        """
        kind = self.find_kind(name)
        if kind is None:
            valid = ", ".join(self.kind_names())
            raise ValueError(f"Unknown node kind '{name}'. Valid kinds: {valid}")
        return kind

    def size_of(self, name: str) -> tuple[float, float]:
        kind = self.get_kind(name)
        return kind.width, kind.height

    def required_parent(self, name: str) -> Optional[str]:
        return self.get_kind(name).parent

    def is_linkable(self, name: str) -> bool:
        kind = self.find_kind(name)
        return kind is not None and kind.linkable


DEFAULT_CATALOG = KindCatalog(
    margin=DEFAULT_MARGIN,
    kinds=[
        KindSpec(type=SUBSCRIPTION, label="Subscription Node", width=300, height=300),
        KindSpec(type=RESOURCE_GROUP, label="Resource Group Node", width=200, height=200,
                 parent=SUBSCRIPTION),
        KindSpec(type=VNET, label="VNet Node", width=150, height=40,
                 parent=RESOURCE_GROUP, linkable=True),
    ],
)


def parse_catalog_yaml(yaml_str: str) -> KindCatalog:
    """Parse a YAML string into a KindCatalog."""
    data = yaml.safe_load(yaml_str)
    if not data:
        raise ValueError("Empty YAML input")
    if not isinstance(data, dict):
        raise ValueError("Catalog YAML must be a mapping")
    return KindCatalog(**data)


def load_catalog(path: str) -> KindCatalog:
    """Parse a YAML file into a KindCatalog."""
    content = Path(path).read_text()
    return parse_catalog_yaml(content)


def get_catalog() -> KindCatalog:
    """Return the catalog named by $TOPOLOGY_CANVAS_CATALOG, else the default."""
    path = os.environ.get(CATALOG_ENV_VAR)
    if path:
        return load_catalog(path)
    return DEFAULT_CATALOG
