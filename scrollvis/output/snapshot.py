"""Raster snapshot of the engine's visual state.

Draws every handle as it currently stands (mid-transition values included) onto a
PNG the size of the drawing area plus margins:
- relationship edges and tree links, in layer order
- item handles as discs (image references are not fetched), greyed when dimmed
- name labels, title card, category legend and tooltip
"""

import logging
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from scrollvis.engine import ScrollVis
from scrollvis.layouts.scales import hex_to_rgb

logger = logging.getLogger(__name__)

# --- Fonts ---

_FONT_BOLD = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
_FONT_REGULAR = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"


def _font(size: int, bold: bool = False) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    path = _FONT_BOLD if bold else _FONT_REGULAR
    if Path(path).exists():
        return ImageFont.truetype(path, size)
    return ImageFont.load_default()


# --- Colors ---

BG = (13, 17, 23)
TEXT = (230, 237, 243)
TEXT_DIM = (110, 118, 129)
GREY = (120, 120, 120)
TOOLTIP_BG = (22, 27, 34)

PALETTE = [
    (88, 166, 255),    # blue
    (63, 185, 80),     # green
    (210, 153, 34),    # gold
    (201, 97, 152),    # pink
    (174, 124, 255),   # purple
    (255, 123, 114),   # coral
    (121, 192, 255),   # light blue
    (87, 171, 90),     # dark green
    (219, 171, 9),     # amber
    (255, 166, 87),    # orange
    (163, 113, 247),   # violet
    (255, 203, 107),   # yellow
]


def _rgba(rgb: tuple[int, int, int], opacity: float) -> tuple[int, int, int, int]:
    return (*rgb, int(round(255 * max(0.0, min(1.0, opacity)))))


def _text_centered(draw: ImageDraw.ImageDraw, xy: tuple[float, float], text: str, font, fill) -> None:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    draw.text((xy[0] - (right - left) / 2, xy[1] - (bottom - top)), text, font=font, fill=fill)


def render_image(engine: ScrollVis) -> Image.Image:
    """Draw the current frame."""
    canvas = engine.config.canvas
    ox, oy = canvas.margin.left, canvas.margin.top
    img = Image.new("RGB", canvas.outer_size, BG)
    draw = ImageDraw.Draw(img, "RGBA")
    h = engine.handles

    layers = sorted(
        [(h.edge_layer.z, "edges"), (h.tree_link_layer.z, "tree_links"), (h.node_layer.z, "nodes")]
    )
    for _, layer in layers:
        if layer == "edges":
            for edge in h.edges:
                if edge.opacity <= 0:
                    continue
                draw.line(
                    [(ox + edge.x1, oy + edge.y1), (ox + edge.x2, oy + edge.y2)],
                    fill=_rgba(hex_to_rgb(edge.color), edge.opacity),
                    width=max(1, int(round(edge.stroke_width))),
                )
        elif layer == "tree_links":
            dy = oy + canvas.tree_offset_y
            for link in h.tree_links:
                if link.opacity <= 0:
                    continue
                draw.line(
                    [(ox + x, dy + y) for x, y in link.path()],
                    fill=_rgba(hex_to_rgb(link.color), link.opacity),
                    width=1,
                )
        else:
            _draw_items(engine, draw, ox, oy + h.node_layer.offset_y)

    title_font = _font(36, bold=True)
    subtitle_font = _font(20)
    for name, text in h.texts.items():
        if text.opacity <= 0:
            continue
        font = title_font if name == "title" else subtitle_font
        _text_centered(draw, (ox + text.x, oy + text.y), text.text, font, _rgba(TEXT, text.opacity))

    if h.legend.opacity > 0:
        font = _font(11)
        bold = _font(11, bold=True)
        for i, entry in enumerate(h.legend.entries):
            cx = ox + h.legend.x
            cy = oy + h.legend.y + i * 16
            draw.ellipse([cx - 4, cy - 4, cx + 4, cy + 4], fill=_rgba(hex_to_rgb(entry.color), h.legend.opacity))
            color = TEXT if entry.emphasized else TEXT_DIM
            draw.text((cx + 10, cy - 7), entry.category, font=bold if entry.emphasized else font,
                      fill=_rgba(color, h.legend.opacity))

    if h.tooltip.opacity > 0 and h.tooltip.text:
        font = _font(12)
        x, y = h.tooltip.x, h.tooltip.y
        left, top, right, bottom = draw.textbbox((x + 6, y + 4), h.tooltip.text, font=font)
        draw.rectangle([left - 6, top - 4, right + 6, bottom + 4], fill=_rgba(TOOLTIP_BG, h.tooltip.opacity))
        draw.text((x + 6, y + 4), h.tooltip.text, font=font, fill=_rgba(TEXT, h.tooltip.opacity))

    return img


def _draw_items(engine: ScrollVis, draw: ImageDraw.ImageDraw, ox: float, oy: float) -> None:
    label_dx, label_dy = engine.config.canvas.label_offset
    font = _font(11)
    bold = _font(12, bold=True)
    handles = sorted(engine.handles.items.values(), key=lambda hd: hd.z)
    for handle in handles:
        if handle.opacity <= 0:
            continue
        item = engine.store.lookup(handle.item_id)
        rgb = GREY if handle.greyed else PALETTE[item.index % len(PALETTE)]
        r = handle.size / 2
        cx, cy = ox + handle.x, oy + handle.y
        draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=_rgba(rgb, handle.opacity),
                     outline=_rgba(TEXT, handle.opacity * 0.5))
        if handle.label and handle.label_opacity > 0:
            draw.text(
                (cx + label_dx, cy + label_dy - 10), handle.label,
                font=bold if handle.label_emphasized else font,
                fill=_rgba(TEXT if handle.label_emphasized else TEXT_DIM, handle.label_opacity),
            )


def render_frame(engine: ScrollVis, output_path: Path) -> Path:
    """Save the current frame as PNG."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    render_image(engine).save(output_path)
    logger.info("Frame saved to %s (section=%s)", output_path, engine.active_section)
    return output_path


def render_sections(engine: ScrollVis, output_dir: Path) -> list[Path]:
    """Step through every section, settle it and save one PNG per section."""
    paths: list[Path] = []
    for index in range(len(engine.machine)):
        engine.activate(index)
        engine.settle()
        name = engine.machine.sections[index].name
        paths.append(render_frame(engine, Path(output_dir) / f"{index:02d}_{name}.png"))
    return paths
