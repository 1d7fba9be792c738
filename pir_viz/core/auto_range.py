"""Grid bounds and chart layout derived from the current record set."""
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from .polar import ProjectionParams, deg_to_rad
from .records import CanonicalRecord

MIN_MAX_DISTANCE = 1.0
MIN_MAX_ANGLE = 45.0
MAX_ANGLE_LIMIT = 90.0
ANGLE_MARGIN = 10.0
ANGLE_STEP = 5


@dataclass(frozen=True)
class GridSpec:
    max_distance: float
    distance_step: float
    max_angle: float
    angle_step: int = ANGLE_STEP

    @property
    def max_angle_rad(self) -> float:
        return deg_to_rad(self.max_angle)


def distance_step_for(max_distance: float) -> float:
    """Ring spacing chosen from the raw (unpadded) maximum distance."""
    if max_distance <= 3:
        return 0.5
    elif max_distance <= 8:
        return 0.5
    elif max_distance <= 15:
        return 1.0
    return 2.0


def compute_range(records: Sequence[CanonicalRecord]) -> GridSpec:
    """Auto-range the polar grid so every record fits with one step of margin."""
    max_dist = MIN_MAX_DISTANCE
    max_angle = MIN_MAX_ANGLE
    for rec in records:
        if rec.distance > max_dist:
            max_dist = rec.distance
        if abs(rec.angle) > max_angle:
            max_angle = abs(rec.angle)

    max_angle = min(math.ceil(max_angle / ANGLE_STEP) * ANGLE_STEP + ANGLE_MARGIN,
                    MAX_ANGLE_LIMIT)

    step = distance_step_for(max_dist)
    max_dist = math.ceil(max_dist / step) * step + step

    return GridSpec(max_distance=max_dist, distance_step=step, max_angle=max_angle)


def compute_projection(grid: GridSpec, width: float, height: float,
                       pad_top: float = 20, pad_bottom: float = 24,
                       pad_left: float = 20, pad_right: float = 48
                       ) -> Optional[ProjectionParams]:
    """Fit the grid into a width x height chart without distorting aspect.

    The sensor sits horizontally centred just above the bottom padding.
    Returns None when the available area is empty.
    """
    avail_w = width - pad_left - pad_right
    avail_h = height - pad_top - pad_bottom
    if avail_w <= 0 or avail_h <= 0:
        return None

    scale_y = avail_h / grid.max_distance
    half_w = grid.max_distance * math.sin(grid.max_angle_rad)
    scale_x = avail_w / (2 * half_w)
    scale = min(scale_x, scale_y)

    return ProjectionParams(origin_x=width / 2, origin_y=height - pad_bottom,
                            scale=scale, width=width, height=height)
