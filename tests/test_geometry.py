"""Tests for absolute coordinate resolution and container search."""

import logging

import pytest

from topology_canvas.geometry import (
    MAX_DEPTH,
    Rect,
    absolute_rect,
    find_container,
    resolve_absolute,
)
from topology_canvas.models import RESOURCE_GROUP, SUBSCRIPTION, VNET, DiagramNode, Point


class TestResolveAbsolute:
    """Tests for resolve_absolute."""

    def test_unparented_node_keeps_its_position(self):
        node = DiagramNode(id="a", type=SUBSCRIPTION, x=42, y=-7)
        assert resolve_absolute(node, [node]) == Point(x=42, y=-7)

    def test_unparented_node_ignores_snapshot(self):
        node = DiagramNode(id="a", type=SUBSCRIPTION, x=3, y=4)
        assert resolve_absolute(node, []) == Point(x=3, y=4)

    def test_child_offset_is_added_to_parent(self):
        parent = DiagramNode(id="p", type=SUBSCRIPTION, x=100, y=100)
        child = DiagramNode(id="c", type=RESOURCE_GROUP, x=5, y=5, parent_id="p")
        assert resolve_absolute(child, [parent, child]) == Point(x=105, y=105)

    def test_three_level_chain_sums_all_offsets(self, nested_nodes):
        vnet_b = nested_nodes[3]
        assert resolve_absolute(vnet_b, nested_nodes) == Point(x=130, y=200)

    def test_missing_parent_treated_as_unparented(self):
        orphan = DiagramNode(id="o", type=VNET, x=12, y=34, parent_id="gone")
        assert resolve_absolute(orphan, [orphan]) == Point(x=12, y=34)

    def test_missing_grandparent_stops_at_parent(self):
        parent = DiagramNode(id="p", type=RESOURCE_GROUP, x=10, y=20, parent_id="gone")
        child = DiagramNode(id="c", type=VNET, x=1, y=2, parent_id="p")
        assert resolve_absolute(child, [parent, child]) == Point(x=11, y=22)

    def test_cycle_terminates(self, caplog):
        a = DiagramNode(id="a", type=RESOURCE_GROUP, x=1, y=1, parent_id="b")
        b = DiagramNode(id="b", type=RESOURCE_GROUP, x=10, y=10, parent_id="a")

        with caplog.at_level(logging.WARNING, logger="topology_canvas.geometry"):
            result = resolve_absolute(a, [a, b])

        assert result == Point(x=11, y=11)
        assert "cyclic" in caplog.text

    def test_self_parent_terminates(self):
        node = DiagramNode(id="a", type=RESOURCE_GROUP, x=5, y=6, parent_id="a")
        assert resolve_absolute(node, [node]) == Point(x=5, y=6)

    def test_depth_cap(self):
        nodes = [DiagramNode(id="n0", type=SUBSCRIPTION, x=1, y=1)]
        for i in range(1, MAX_DEPTH + 10):
            nodes.append(DiagramNode(id=f"n{i}", type=RESOURCE_GROUP, x=1, y=1, parent_id=f"n{i - 1}"))

        result = resolve_absolute(nodes[-1], nodes)

        # The node itself plus MAX_DEPTH ancestors
        assert result == Point(x=MAX_DEPTH + 1, y=MAX_DEPTH + 1)

    def test_resolution_is_repeatable(self, nested_nodes):
        vnet_a = nested_nodes[2]
        first = resolve_absolute(vnet_a, nested_nodes)
        second = resolve_absolute(vnet_a, nested_nodes)
        assert first == second == Point(x=130, y=140)

    def test_accepts_any_iterable(self, nested_nodes):
        rg = nested_nodes[1]
        assert resolve_absolute(rg, iter(nested_nodes)) == Point(x=120, y=130)


class TestRect:
    """Tests for the inclusive point-in-rectangle test."""

    @pytest.mark.parametrize("point", [
        Point(x=100, y=100),
        Point(x=400, y=400),
        Point(x=100, y=400),
        Point(x=250, y=250),
    ])
    def test_points_on_or_inside_edges(self, point):
        rect = Rect(x=100, y=100, width=300, height=300)
        assert rect.contains(point)

    @pytest.mark.parametrize("point", [
        Point(x=99, y=100),
        Point(x=100, y=99),
        Point(x=401, y=400),
        Point(x=400, y=401),
    ])
    def test_points_one_unit_outside(self, point):
        rect = Rect(x=100, y=100, width=300, height=300)
        assert not rect.contains(point)

    def test_absolute_rect_of_nested_node(self, nested_nodes):
        rect = absolute_rect(nested_nodes[1], nested_nodes)
        assert (rect.x, rect.y, rect.right, rect.bottom) == (120, 130, 320, 330)


class TestFindContainer:
    """Tests for find_container."""

    def test_finds_nested_container_by_absolute_bounds(self, nested_nodes):
        found = find_container(Point(x=120, y=130), RESOURCE_GROUP, nested_nodes)
        assert found is not None
        assert found.id == "rg_1"

    def test_relative_coordinates_do_not_match(self, nested_nodes):
        # rg_1's stored (relative) rectangle is (20, 30)-(220, 230)
        assert find_container(Point(x=25, y=35), RESOURCE_GROUP, nested_nodes) is None

    def test_filters_by_kind(self, nested_nodes):
        found = find_container(Point(x=110, y=110), SUBSCRIPTION, nested_nodes)
        assert found.id == "sub_1"
        assert find_container(Point(x=110, y=110), RESOURCE_GROUP, nested_nodes) is None

    def test_no_candidates(self):
        assert find_container(Point(x=0, y=0), SUBSCRIPTION, []) is None

    def test_first_overlapping_candidate_wins(self):
        first = DiagramNode(id="first", type=SUBSCRIPTION, x=0, y=0, width=300, height=300)
        second = DiagramNode(id="second", type=SUBSCRIPTION, x=100, y=100, width=300, height=300)

        assert find_container(Point(x=200, y=200), SUBSCRIPTION, [first, second]).id == "first"
        assert find_container(Point(x=200, y=200), SUBSCRIPTION, [second, first]).id == "second"

    def test_later_candidate_when_first_misses(self):
        first = DiagramNode(id="first", type=SUBSCRIPTION, x=0, y=0, width=300, height=300)
        second = DiagramNode(id="second", type=SUBSCRIPTION, x=500, y=0, width=300, height=300)

        assert find_container(Point(x=600, y=50), SUBSCRIPTION, [first, second]).id == "second"
