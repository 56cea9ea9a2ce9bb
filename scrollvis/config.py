"""Configuration loading for the scroll visualization engine."""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field


class MarginConfig(BaseModel):
    top: int = 0
    left: int = 20
    bottom: int = 40
    right: int = 10


class CanvasConfig(BaseModel):
    width: int = 800
    height: int = 600
    margin: MarginConfig = Field(default_factory=MarginConfig)
    legend_offset: tuple[int, int] = (-100, 20)  # relative to (width, 0)
    tree_padding: int = 100  # tree layout size is (width - pad, height - pad)
    tree_offset_y: int = 50
    vertical_list_x: int = 60
    label_offset: tuple[int, int] = (50, 5)

    @property
    def outer_size(self) -> tuple[int, int]:
        return (
            self.width + self.margin.left + self.margin.right,
            self.height + self.margin.top + self.margin.bottom,
        )


class CategoryRegion(BaseModel):
    """Items carrying any of ``tags`` are pulled toward (x, y).

    Coordinates are fractions of the canvas width and height.
    """
    tags: list[str] = Field(default_factory=list)
    x: float = 1.0
    y: float = 0.5


class ForceConfig(BaseModel):
    alpha_min: float = 0.001
    alpha_target: float = 0.0
    velocity_decay: float = 0.4
    reheat_alpha: float = 0.3
    charge_strength: float = -30.0
    charge_distance_min: float = 1.0
    link_distance: float = 30.0
    link_iterations: int = 1
    collide_radius: float = 30.0
    collide_strength: float = 1.0
    center_strength: float = 1.0
    category_x_strength: float = 0.02
    category_y_strength: float = 0.1
    initial_radius: float = 10.0
    regions: list[CategoryRegion] = Field(default_factory=lambda: [
        CategoryRegion(tags=["hip hop", "rap"], x=0.75, y=0.5),
        CategoryRegion(tags=["house"], x=0.25, y=0.25),
    ])
    default_region: CategoryRegion = Field(default_factory=CategoryRegion)

    @property
    def alpha_decay(self) -> float:
        # Cools from 1 to alpha_min in ~300 ticks
        return 1 - self.alpha_min ** (1 / 300)


class DurationConfig(BaseModel):
    """Transition durations in milliseconds."""
    instant: int = 0
    hover: int = 200
    move: int = 500
    fade: int = 600
    list_move: int = 1000


class SizeConfig(BaseModel):
    """Square image sizes (width == height) for item handles."""
    default: int = 50
    adjacent: int = 66
    focused: int = 80
    list_default: int = 24
    tooltip_opacity: float = 0.7


class Config(BaseModel):
    title: str = "Building playlists"
    subtitle: str = "A MST (Minimum spanning tree) approach"
    strict: bool = True
    integrity_policy: Literal["drop", "raise"] = "drop"
    seed: int = 0
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    force: ForceConfig = Field(default_factory=ForceConfig)
    durations: DurationConfig = Field(default_factory=DurationConfig)
    sizes: SizeConfig = Field(default_factory=SizeConfig)


def _project_root() -> Path:
    """Return the scrollvis project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
