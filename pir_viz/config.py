"""Configuration for the PIR coverage plotter."""
import os
from dataclasses import dataclass, field
from typing import List, Tuple

DEFAULT_WINDOW_WIDTH = 1280
DEFAULT_WINDOW_HEIGHT = 800
DEFAULT_FPS = 60

DEFAULT_COLOR_FILE = os.path.join(os.path.expanduser("~"), ".pir_viz", "colors.json")

# Trigger levels 0-5, coolest to hottest
DEFAULT_COLORS: List[str] = [
    '#4A8FE7', '#5CC5EF', '#FFCC02', '#FF8C00', '#FF3B30', '#CC0000',
]


@dataclass
class ChartConfig:
    """Layout and interaction settings for the polar chart window."""

    # Window
    window_width: int = DEFAULT_WINDOW_WIDTH
    window_height: int = DEFAULT_WINDOW_HEIGHT
    fps: int = DEFAULT_FPS
    side_panel_width: int = 380

    # Chart paddings (px) reserving room for edge labels
    pad_top: int = 20
    pad_bottom: int = 24
    pad_left: int = 20
    pad_right: int = 48

    # Minimum drawable chart size, below which rendering is skipped
    min_canvas_size: int = 10

    # Markers and hover
    marker_radius: float = 5.5
    hit_radius_px: float = 12.0
    tooltip_offset: Tuple[int, int] = (14, -12)

    # Trailing-edge debounce for resize redraws
    resize_debounce_ms: int = 80

    # Export
    export_scale: int = 2
    export_dir: str = field(default_factory=os.getcwd)
    color_file: str = DEFAULT_COLOR_FILE
