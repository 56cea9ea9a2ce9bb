"""Tests for scrollvis MCP server tool registration and basic returns."""

import json

import pytest

import scrollvis.mcp_server as mcp_mod
from scrollvis.mcp_server import mcp

from conftest import DATA_DIR

EXPECTED_TOOLS = {
    "load_datasets",
    "activate_section",
    "update_section",
    "hover_item",
    "clear_hover",
    "hover_category",
    "advance_time",
    "get_state",
    "render_snapshot",
}


@pytest.fixture()
def loaded(monkeypatch):
    """Fresh server state with the sample datasets loaded."""
    monkeypatch.setattr(mcp_mod, "_engine", None)
    result = json.loads(mcp_mod.load_datasets(
        str(DATA_DIR / "sample_graph.json"), str(DATA_DIR / "sample_tree.json"),
    ))
    return result


class TestMCPToolRegistration:
    def test_all_tools_registered(self):
        registered = set(mcp._tool_manager._tools.keys())
        assert EXPECTED_TOOLS.issubset(registered), (
            f"Missing tools: {EXPECTED_TOOLS - registered}"
        )


class TestMCPToolReturns:
    def test_requires_loaded_datasets(self, monkeypatch):
        monkeypatch.setattr(mcp_mod, "_engine", None)
        data = json.loads(mcp_mod.get_state())
        assert "load_datasets" in data["error"]

    def test_load_datasets(self, loaded):
        assert loaded["items"] == 6
        assert loaded["hierarchy_nodes"] == 6
        assert loaded["categories"] == ["collaboration", "featured", "remix"]

    def test_load_missing_file_returns_error(self, monkeypatch, tmp_path):
        monkeypatch.setattr(mcp_mod, "_engine", None)
        data = json.loads(mcp_mod.load_datasets(str(tmp_path / "g.json"), str(tmp_path / "t.json")))
        assert "error" in data

    def test_activate_and_state(self, loaded):
        data = json.loads(mcp_mod.activate_section(2))
        assert data["activated"] == [0, 1, 2]
        state = json.loads(mcp_mod.get_state())
        assert state["section"] == "tree"
        assert state["hover_mode"] == "tree"

    def test_out_of_range_section_returns_error(self, loaded):
        data = json.loads(mcp_mod.activate_section(9))
        assert "out of range" in data["error"]

    def test_hover_in_graph(self, loaded):
        mcp_mod.activate_section(1)
        data = json.loads(mcp_mod.hover_item("a3", 10, 10))
        assert data["handled"] is True
        assert data["tooltip"] == "Parade"
        assert data["highlight"]["a3"] == "focused"
        assert data["highlight"]["a1"] == "adjacent"
        assert data["highlight"]["a2"] == "dimmed"

        cleared = json.loads(mcp_mod.clear_hover())
        assert cleared["hover_mode"] == "graph"

    def test_hover_unknown_item_returns_error(self, loaded):
        mcp_mod.activate_section(1)
        data = json.loads(mcp_mod.hover_item("zz"))
        assert "Item not found" in data["error"]

    def test_hover_category(self, loaded):
        mcp_mod.activate_section(1)
        data = json.loads(mcp_mod.hover_category("remix"))
        assert data == {"handled": True, "emphasized": ["remix"]}

    def test_advance_time(self, loaded):
        mcp_mod.activate_section(3)
        data = json.loads(mcp_mod.advance_time(100, 16))
        assert data["frames"] == 7
        assert data["time_ms"] == pytest.approx(100)

    def test_advance_time_rejects_bad_frame(self, loaded):
        data = json.loads(mcp_mod.advance_time(100, 0))
        assert "error" in data

    def test_render_snapshot(self, loaded, tmp_path):
        mcp_mod.activate_section(4)
        data = json.loads(mcp_mod.render_snapshot(str(tmp_path / "frame.png")))
        assert (tmp_path / "frame.png").exists()
        assert data["path"].endswith("frame.png")
