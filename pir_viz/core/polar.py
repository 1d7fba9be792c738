"""Polar <-> Cartesian conversions for sensor-space and screen-space points.

Angle 0 points straight ahead of the sensor (screen up); positive angles sweep
to the right. Distances are in metres.
"""
import math
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ProjectionParams:
    """Mapping from sensor space to chart pixels for one rendered frame."""
    origin_x: float
    origin_y: float
    scale: float  # pixels per metre
    width: float
    height: float


def deg_to_rad(degrees: float) -> float:
    """Convert degrees to radians."""
    return degrees * math.pi / 180.0


def rad_to_deg(radians: float) -> float:
    """Convert radians to degrees."""
    return radians * 180.0 / math.pi


def project(distance: float, angle_deg: float) -> Tuple[float, float]:
    """Convert polar (distance, angle) to cartesian (x=right, y=forward)."""
    angle_rad = deg_to_rad(angle_deg)
    x = distance * math.sin(angle_rad)
    y = distance * math.cos(angle_rad)
    return x, y


def unproject(x: float, y: float) -> Tuple[float, float]:
    """Convert cartesian back to (distance, signed angle in degrees)."""
    distance = math.sqrt(x * x + y * y)
    angle_deg = rad_to_deg(math.atan2(x, y))
    return distance, angle_deg


def round_point(x: float, y: float, ndigits: int = 2) -> Tuple[float, float]:
    """Round a plotted point so drawn markers and hover hits agree."""
    return round(x, ndigits), round(y, ndigits)


def to_screen(distance: float, angle_deg: float,
              params: ProjectionParams) -> Tuple[float, float]:
    x, y = project(distance, angle_deg)
    sx = params.origin_x + x * params.scale
    sy = params.origin_y - y * params.scale  # screen y grows downward
    return sx, sy


def marker_position(distance: float, angle_deg: float,
                    params: ProjectionParams) -> Tuple[float, float]:
    """Screen position of a plotted record, from its rounded cartesian point."""
    x, y = round_point(*project(distance, angle_deg))
    return params.origin_x + x * params.scale, params.origin_y - y * params.scale


def from_screen(sx: float, sy: float,
                params: ProjectionParams) -> Tuple[float, float]:
    """Convert a chart pixel back to (distance, angle)."""
    x = (sx - params.origin_x) / params.scale
    y = (params.origin_y - sy) / params.scale
    return unproject(x, y)
