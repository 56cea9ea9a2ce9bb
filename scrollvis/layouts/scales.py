"""Ordinal color scale for relationship categories."""

# category20 palette, pairs of dark/light shades
CATEGORY20 = [
    "#1f77b4", "#aec7e8", "#ff7f0e", "#ffbb78", "#2ca02c",
    "#98df8a", "#d62728", "#ff9896", "#9467bd", "#c5b0d5",
    "#8c564b", "#c49c94", "#e377c2", "#f7b6d2", "#7f7f7f",
    "#c7c7c7", "#bcbd22", "#dbdb8d", "#17becf", "#9edae5",
]

NEUTRAL = "#999999"


class OrdinalColorScale:
    """Maps categories to palette colors in domain order.

    Unknown categories are appended to the domain on first use, so a category
    keeps its color for the lifetime of the scale. The palette wraps.
    """

    def __init__(self, domain: list[str] | None = None, palette: list[str] | None = None) -> None:
        self.palette = list(palette or CATEGORY20)
        self._index: dict[str, int] = {}
        for value in domain or []:
            self._index.setdefault(value, len(self._index))

    @property
    def domain(self) -> list[str]:
        return list(self._index)

    def __call__(self, category: str | None) -> str:
        if category is None:
            return NEUTRAL
        i = self._index.setdefault(category, len(self._index))
        return self.palette[i % len(self.palette)]


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    color = color.lstrip("#")
    return int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)
