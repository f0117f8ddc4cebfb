"""topology-canvas server — MCP tools for building cloud topology diagrams."""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .catalog import get_catalog
from .editor import DiagramEditor
from .models import Point
from .placement import drop_target


logger = logging.getLogger(__name__)

# --- Constants ---
LOG_LEVEL = os.environ.get("TOPOLOGY_CANVAS_LOG_LEVEL", "INFO")

server = Server("topology-canvas")

_editor: Optional[DiagramEditor] = None


def get_editor() -> DiagramEditor:
    """Return the session editor, creating it on first use."""
    global _editor
    if _editor is None:
        _editor = DiagramEditor(get_catalog())
    return _editor


def reset_editor() -> DiagramEditor:
    global _editor
    _editor = DiagramEditor(get_catalog())
    return _editor


def _json(payload: dict) -> list[TextContent]:
    return [TextContent(type="text", text=json.dumps(payload))]


# --- Tool definitions ---

_POINT_PROPERTIES = {
    "x": {"type": "number", "description": "Canvas x coordinate (absolute)"},
    "y": {"type": "number", "description": "Canvas y coordinate (absolute)"},
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    kinds = get_editor().catalog.kind_names()
    return [
        Tool(
            name="list_kinds",
            description=(
                "List the node kinds that can be placed, with their fixed sizes, "
                "the container kind each must be dropped into, and whether they "
                "can be linked."
            ),
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="place_node",
            description=(
                "Drop a node of the given kind at a canvas point. Nested kinds "
                "are placed inside the first container of the required kind "
                "under the point, clamped to stay inside it with a margin. "
                "Returns the new node, or the reason the drop was rejected."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": kinds, "description": "Node kind to drop"},
                    **_POINT_PROPERTIES,
                },
                "required": ["type", "x", "y"],
            },
        ),
        Tool(
            name="find_container",
            description=(
                "Report which existing node a drop of the given kind at the "
                "canvas point would be nested in, without placing anything."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": kinds, "description": "Node kind being dragged"},
                    **_POINT_PROPERTIES,
                },
                "required": ["type", "x", "y"],
            },
        ),
        Tool(
            name="connect_nodes",
            description=(
                "Create a network link between two nodes. Only vnets in the "
                "same resource group can be linked; anything else is discarded."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "source": {"type": "string", "description": "Source node id"},
                    "target": {"type": "string", "description": "Target node id"},
                },
                "required": ["source", "target"],
            },
        ),
        Tool(
            name="get_diagram",
            description="Return every node (with absolute position) and edge in the diagram.",
            inputSchema={"type": "object", "properties": {}},
        ),
        Tool(
            name="reset_diagram",
            description="Discard the current diagram and start an empty one.",
            inputSchema={"type": "object", "properties": {}},
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    if name == "list_kinds":
        return await _list_kinds(arguments)
    elif name == "place_node":
        return await _place_node(arguments)
    elif name == "find_container":
        return await _find_container(arguments)
    elif name == "connect_nodes":
        return await _connect_nodes(arguments)
    elif name == "get_diagram":
        return await _get_diagram(arguments)
    elif name == "reset_diagram":
        return await _reset_diagram(arguments)
    else:
        logger.warning(f"Unknown tool requested: {name}")
        return [TextContent(type="text", text=f"Unknown tool: {name}")]


async def _list_kinds(args: dict) -> list[TextContent]:
    catalog = get_editor().catalog
    return _json({
        "margin": catalog.margin,
        "kinds": [
            {
                "type": kind.type,
                "label": kind.get_label(),
                "width": kind.width,
                "height": kind.height,
                "parent": kind.parent,
                "linkable": kind.linkable,
            }
            for kind in catalog.kinds
        ],
    })


async def _place_node(args: dict) -> list[TextContent]:
    """Drop a node at a canvas point."""
    editor = get_editor()

    try:
        editor.start_drag(args["type"])
        node = editor.drop(float(args["x"]), float(args["y"]))
    except (KeyError, TypeError, ValueError) as e:
        return [TextContent(type="text", text=f"Invalid arguments: {e}")]
    finally:
        editor.cancel_drag()

    if node is None:
        result = editor.last_result
        return _json({
            "status": "rejected",
            "reason": result.reason.value,
            "container": result.parent.id if result.parent else None,
        })

    return _json({
        "status": "success",
        "node": node.model_dump(),
        "absolute": editor.absolute_position(node.id).model_dump(),
    })


async def _find_container(args: dict) -> list[TextContent]:
    """Report the drop target for a kind at a canvas point."""
    editor = get_editor()

    try:
        kind = editor.catalog.get_kind(args["type"])
        point = Point(x=float(args["x"]), y=float(args["y"]))
    except (KeyError, TypeError, ValueError) as e:
        return [TextContent(type="text", text=f"Invalid arguments: {e}")]

    container = drop_target(kind.type, point, editor.diagram.nodes, editor.catalog)
    return _json({
        "type": kind.type,
        "required_parent": kind.parent,
        "container": container.id if container else None,
    })


async def _connect_nodes(args: dict) -> list[TextContent]:
    """Link two nodes if the topology rules allow it."""
    editor = get_editor()

    try:
        source, target = args["source"], args["target"]
    except KeyError as e:
        return [TextContent(type="text", text=f"Invalid arguments: missing {e}")]

    edge = editor.connect(source, target)
    if edge is None:
        return _json({"status": "rejected", "source": source, "target": target})
    return _json({"status": "success", "edge": edge.model_dump()})


async def _get_diagram(args: dict) -> list[TextContent]:
    """Dump nodes with absolute positions, plus edges."""
    editor = get_editor()
    diagram = editor.diagram

    nodes = []
    for node in diagram.nodes:
        data = node.model_dump()
        data["label"] = node.get_label()
        data["absolute"] = editor.absolute_position(node.id).model_dump()
        data["children"] = [child.id for child in diagram.children_of(node.id)]
        nodes.append(data)

    return _json({
        "nodes": nodes,
        "edges": [edge.model_dump() for edge in diagram.edges],
    })


async def _reset_diagram(args: dict) -> list[TextContent]:
    reset_editor()
    return _json({"status": "success"})


def main():
    """Entry point for the MCP server."""
    import asyncio
    logging.basicConfig(
        level=LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    asyncio.run(_run())


async def _run():
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    main()
