#!/usr/bin/env python3
"""Scrollvis MCP Server: drive a visualization session from an agent."""

import json
import logging
import sys
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from scrollvis.config import Config, load_config
from scrollvis.engine import ScrollVis
from scrollvis.loader import load_store

mcp = FastMCP("scrollvis")
logger = logging.getLogger(__name__)

# Redirect all logging to stderr so stdout stays clean for MCP stdio transport
logging.basicConfig(
    stream=sys.stderr,
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

_engine: ScrollVis | None = None
_config: Config | None = None

_TOOL_ERRORS = (ValueError, IndexError, FileNotFoundError)


def _get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def _get_engine() -> ScrollVis:
    if _engine is None:
        raise ValueError("No datasets loaded. Call load_datasets first.")
    return _engine


@mcp.tool()
def load_datasets(graph_path: str, hierarchy_path: str) -> str:
    """Load the graph and hierarchy JSON files and start a fresh visualization session."""
    global _engine
    try:
        store = load_store(Path(graph_path), Path(hierarchy_path), _get_config())
        _engine = ScrollVis(store, _get_config())
        return json.dumps({
            "items": len(store),
            "relationships": len(store.relationships),
            "hierarchy_nodes": len(store.pre_order()),
            "categories": store.categories(),
            "dropped": store.report.total_dropped,
        })
    except _TOOL_ERRORS as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def activate_section(index: int) -> str:
    """Scroll to a section (0 title, 1 graph, 2 tree, 3 horizontal list, 4 vertical list)."""
    try:
        ran = _get_engine().activate(index)
        return json.dumps({"activated": ran, "section": index})
    except _TOOL_ERRORS as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def update_section(index: int, progress: float) -> str:
    """Report scroll progress (0-1) within a section."""
    try:
        _get_engine().update(index, progress)
        return json.dumps({"section": index, "progress": progress})
    except _TOOL_ERRORS as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def hover_item(item_id: str, x: float = 0.0, y: float = 0.0) -> str:
    """Hover an item at pointer position (x, y). Returns the resulting highlight states."""
    try:
        engine = _get_engine()
        handled = engine.hover_item(item_id, (x, y))
        engine.animator.settle()
        states = {h.item_id: h.highlight.value for h in engine.handles.items.values()}
        return json.dumps({"handled": handled, "highlight": states,
                           "tooltip": engine.handles.tooltip.text if handled else None})
    except _TOOL_ERRORS as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def clear_hover() -> str:
    """Move the pointer off any item or legend entry."""
    try:
        engine = _get_engine()
        engine.unhover_item()
        engine.unhover_category()
        engine.animator.settle()
        return json.dumps({"hover_mode": engine.interaction.mode.value})
    except _TOOL_ERRORS as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def hover_category(category: str) -> str:
    """Hover a legend category (graph section only)."""
    try:
        engine = _get_engine()
        handled = engine.hover_category(category)
        return json.dumps({"handled": handled, "emphasized": engine.handles.legend.emphasized()})
    except _TOOL_ERRORS as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def advance_time(milliseconds: float, frame_ms: float = 16.0) -> str:
    """Run the render loop for the given time in frames of frame_ms."""
    try:
        engine = _get_engine()
        if frame_ms <= 0:
            raise ValueError("frame_ms must be positive")
        remaining = milliseconds
        frames = 0
        while remaining > 0:
            step = min(frame_ms, remaining)
            engine.frame(step)
            remaining -= step
            frames += 1
        return json.dumps({"frames": frames, "time_ms": engine.animator.now})
    except _TOOL_ERRORS as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def get_state() -> str:
    """Current section, simulation status, handle states, tooltip and legend."""
    try:
        return json.dumps(_get_engine().snapshot())
    except _TOOL_ERRORS as e:
        return json.dumps({"error": str(e)})


@mcp.tool()
def render_snapshot(output_path: str) -> str:
    """Save the current frame as a PNG."""
    from scrollvis.output.snapshot import render_frame

    try:
        path = render_frame(_get_engine(), Path(output_path))
        return json.dumps({"path": str(path)})
    except _TOOL_ERRORS as e:
        return json.dumps({"error": str(e)})


if __name__ == "__main__":
    mcp.run()
