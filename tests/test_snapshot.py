"""Tests for PNG frame rendering."""

from PIL import Image

from scrollvis.output.snapshot import render_frame, render_image, render_sections


class TestRenderImage:
    def test_frame_size_includes_margins(self, engine):
        img = render_image(engine)
        assert img.size == (830, 640)
        assert img.mode == "RGB"

    def test_items_drawn_in_graph(self, engine):
        blank = render_image(engine)
        engine.activate(1)
        engine.settle()
        drawn = render_image(engine)
        assert blank.tobytes() != drawn.tobytes()

    def test_mid_transition_frame(self, engine):
        engine.activate(2)
        engine.frame(250)
        assert render_image(engine).size == (830, 640)

    def test_hover_state_renders(self, engine):
        engine.activate(3)
        engine.settle()
        engine.hover_item("B", (300, 300))
        engine.settle()
        render_image(engine)


class TestRenderFiles:
    def test_render_frame_writes_png(self, engine, tmp_path):
        path = render_frame(engine, tmp_path / "nested" / "frame.png")
        assert path.exists()
        with Image.open(path) as img:
            assert img.format == "PNG"

    def test_render_sections(self, engine, tmp_path):
        paths = render_sections(engine, tmp_path)
        assert [p.name for p in paths] == [
            "00_title.png", "01_graph.png", "02_tree.png",
            "03_horizontal_list.png", "04_vertical_list.png",
        ]
        assert engine.last_index == 4
