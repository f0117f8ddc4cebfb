"""Pytest configuration and fixtures."""

import pytest

from topology_canvas.catalog import CATALOG_ENV_VAR, DEFAULT_CATALOG
from topology_canvas.models import RESOURCE_GROUP, SUBSCRIPTION, VNET, DiagramNode


@pytest.fixture(autouse=True)
def _no_catalog_override(monkeypatch):
    """Keep tests on the built-in catalog regardless of the environment."""
    monkeypatch.delenv(CATALOG_ENV_VAR, raising=False)


@pytest.fixture
def catalog():
    return DEFAULT_CATALOG


@pytest.fixture
def nested_nodes() -> list:
    """A subscription at (100, 100) holding one resource group with two vnets.

    Absolute positions:
        sub_1  (100, 100)  300x300
        rg_1   (120, 130)  200x200
        vnet_a (130, 140)  150x40
        vnet_b (130, 200)  150x40
    """
    return [
        DiagramNode(id="sub_1", type=SUBSCRIPTION, x=100, y=100, width=300, height=300),
        DiagramNode(id="rg_1", type=RESOURCE_GROUP, x=20, y=30, width=200, height=200,
                    parent_id="sub_1"),
        DiagramNode(id="vnet_a", type=VNET, x=10, y=10, width=150, height=40, parent_id="rg_1"),
        DiagramNode(id="vnet_b", type=VNET, x=10, y=70, width=150, height=40, parent_id="rg_1"),
    ]
