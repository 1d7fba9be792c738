"""Hand-drawn polar chart of PIR readings with hover inspection."""
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pygame

from ..colors import ColorTable
from ..config import ChartConfig
from ..core.auto_range import GridSpec, compute_projection, compute_range
from ..core.polar import ProjectionParams, deg_to_rad, from_screen, marker_position
from ..core.records import CanonicalRecord, RecordStore, clamp_trigger

COLORS = {
    'arc': (208, 208, 208),
    'ray_center': (187, 187, 187),
    'ray_major': (208, 208, 208),
    'ray_minor': (232, 232, 232),
    'label': (153, 153, 153),
    'label_zero': (136, 136, 136),
    'device': (52, 152, 219),
    'marker_outline': (255, 255, 255),
    'placeholder': (170, 170, 170),
    'tooltip_bg': (40, 40, 40),
    'tooltip_text': (255, 255, 255),
}

DEVICE_GLYPH_SIZE = 6


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def format_distance_label(distance: float) -> str:
    if distance % 1 == 0:
        return f"{int(distance)}m"
    return f"{distance:.1f}m"


def format_tooltip(record: CanonicalRecord) -> str:
    return (f"Distance {format_number(record.distance)}m  "
            f"Angle {format_number(record.angle)}°  "
            f"Trigger {record.trigger}/5")


def find_nearest(pointer_x: float, pointer_y: float,
                 records: Sequence[CanonicalRecord],
                 params: Optional[ProjectionParams],
                 max_radius: float = 12.0) -> Optional[int]:
    """Index of the record closest to the pointer, if within max_radius px.

    Uses the projection cached from the last render rather than recomputing
    the layout.
    """
    if params is None or not records:
        return None
    distance = np.array([r.distance for r in records], dtype=float)
    angle = np.radians(np.array([r.angle for r in records], dtype=float))
    # Same rounded points draw_points plots
    x = np.round(distance * np.sin(angle), 2)
    y = np.round(distance * np.cos(angle), 2)
    sx = params.origin_x + x * params.scale
    sy = params.origin_y - y * params.scale
    gap = np.hypot(sx - pointer_x, sy - pointer_y)
    gap[~np.isfinite(gap)] = np.inf
    nearest = int(np.argmin(gap))
    if gap[nearest] < max_radius:
        return nearest
    return None


class PolarChart:
    """Renders the polar grid and record markers onto an off-screen surface.

    The surface is only redrawn when the record store, colors or size change;
    between redraws the cached projection serves hover hit testing.
    """

    def __init__(self, config: ChartConfig, colors: ColorTable,
                 size: Tuple[int, int] = (600, 500)):
        self.config = config
        self.colors = colors
        self.size = size
        self.surface: Optional[pygame.Surface] = None
        self.grid: Optional[GridSpec] = None
        self.projection: Optional[ProjectionParams] = None
        self.hover_index: Optional[int] = None
        self._rendered_revision = -1
        self._dirty = True
        self._font: Optional[pygame.font.Font] = None
        self._small_font: Optional[pygame.font.Font] = None

    def _get_font(self, size: int = 14) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.Font(None, 16)
            self._small_font = pygame.font.Font(None, 14)
        if size <= 14:
            return self._small_font
        return self._font

    def resize(self, width: int, height: int) -> None:
        self.size = (max(0, int(width)), max(0, int(height)))
        self._dirty = True

    def invalidate(self) -> None:
        self._dirty = True

    def needs_render(self, store: RecordStore) -> bool:
        return self._dirty or store.revision != self._rendered_revision

    @property
    def is_degenerate(self) -> bool:
        w, h = self.size
        return w < self.config.min_canvas_size or h < self.config.min_canvas_size

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, store: RecordStore) -> Optional[pygame.Surface]:
        self._rendered_revision = store.revision
        self._dirty = False
        self.hover_index = None

        if self.is_degenerate:
            self.surface = None
            self.projection = None
            store.projection = None
            return None

        w, h = self.size
        if self.surface is None or self.surface.get_size() != (w, h):
            self.surface = pygame.Surface((w, h), pygame.SRCALPHA)
        self.surface.fill((0, 0, 0, 0))

        valid = store.valid_records()
        if not valid:
            self.grid = None
            self.projection = None
            store.projection = None
            self._draw_placeholder()
            return self.surface

        cfg = self.config
        self.grid = compute_range(valid)
        self.projection = compute_projection(
            self.grid, w, h, cfg.pad_top, cfg.pad_bottom, cfg.pad_left, cfg.pad_right)
        store.projection = self.projection
        if self.projection is None:
            return self.surface

        self.draw_grid(self.grid, self.projection)
        self.draw_points(valid, self.projection)
        return self.surface

    def _draw_placeholder(self) -> None:
        font = self._get_font(16)
        text = font.render("Drop a CSV or Excel file, or add rows", True,
                           COLORS['placeholder'])
        rect = text.get_rect(center=(self.size[0] // 2, self.size[1] // 2))
        self.surface.blit(text, rect)

    def _arc_label(self, text: str, color, pos: Tuple[float, float],
                   anchor: str = 'midleft') -> None:
        label = self._get_font(14).render(text, True, color)
        rect = label.get_rect(**{anchor: (int(pos[0]), int(pos[1]))})
        self.surface.blit(label, rect)

    def draw_grid(self, grid: GridSpec, params: ProjectionParams) -> None:
        ox, oy, scale = params.origin_x, params.origin_y, params.scale
        max_rad = grid.max_angle_rad

        # Distance arcs
        d = grid.distance_step
        while d <= grid.max_distance + 1e-9:
            r = d * scale
            rect = pygame.Rect(int(ox - r), int(oy - r), int(2 * r), int(2 * r))
            pygame.draw.arc(self.surface, COLORS['arc'], rect,
                            math.pi / 2 - max_rad, math.pi / 2 + max_rad, 1)
            lx = ox + r * math.sin(max_rad) + 4
            ly = oy - r * math.cos(max_rad)
            self._arc_label(format_distance_label(d), COLORS['label'], (lx, ly))
            d = round(d + grid.distance_step, 2)

        # Angle rays every 5 degrees
        outer = grid.max_distance * scale
        a = -int(grid.max_angle)
        while a <= grid.max_angle:
            a_rad = deg_to_rad(a)
            end = (ox + outer * math.sin(a_rad), oy - outer * math.cos(a_rad))
            if a == 0:
                color, width = COLORS['ray_center'], 2
            elif a % 10 == 0:
                color, width = COLORS['ray_major'], 1
            else:
                color, width = COLORS['ray_minor'], 1
            pygame.draw.line(self.surface, color, (ox, oy), end, width)

            if a != 0 and a % 10 == 0:
                label_r = outer + 2
                pos = (ox + label_r * math.sin(a_rad), oy - label_r * math.cos(a_rad))
                self._arc_label(f"{a}°", COLORS['label'], pos, 'midbottom')
            a += grid.angle_step

        self._arc_label("0°", COLORS['label_zero'], (ox, oy - outer - 4), 'midbottom')
        self._draw_device(ox, oy)

    def _draw_device(self, ox: float, oy: float) -> None:
        s = DEVICE_GLYPH_SIZE
        pts = [(ox, oy - s), (ox + s, oy + s * 0.6), (ox - s, oy + s * 0.6)]
        pygame.draw.polygon(self.surface, COLORS['device'], pts)

    def draw_points(self, records: Sequence[CanonicalRecord],
                    params: ProjectionParams) -> None:
        radius = self.config.marker_radius
        for rec in records:
            sx, sy = marker_position(rec.distance, rec.angle, params)
            center = (int(round(sx)), int(round(sy)))
            pygame.draw.circle(self.surface, self.colors.rgb(clamp_trigger(rec.trigger)),
                               center, int(round(radius)))
            pygame.draw.circle(self.surface, COLORS['marker_outline'],
                               center, int(round(radius)), 1)

    # ------------------------------------------------------------------
    # Hover
    # ------------------------------------------------------------------

    def hover(self, local_x: float, local_y: float,
              records: List[CanonicalRecord]) -> Optional[int]:
        self.hover_index = find_nearest(local_x, local_y, records, self.projection,
                                        self.config.hit_radius_px)
        return self.hover_index

    def clear_hover(self) -> None:
        self.hover_index = None

    def draw_tooltip(self, target: pygame.Surface, record: CanonicalRecord,
                     pointer: Tuple[int, int],
                     bounds: Optional[pygame.Rect] = None) -> pygame.Rect:
        """Draw the tooltip box near the pointer, kept inside `bounds`."""
        font = self._get_font(16)
        text = font.render(format_tooltip(record), True, COLORS['tooltip_text'])
        dx, dy = self.config.tooltip_offset
        box = pygame.Rect(pointer[0] + dx, pointer[1] + dy,
                          text.get_width() + 22, text.get_height() + 8)
        if bounds is not None:
            box.clamp_ip(bounds)
        pygame.draw.rect(target, COLORS['tooltip_bg'], box, border_radius=4)
        swatch = pygame.Rect(box.right - 10, box.y + 3, 6, box.height - 6)
        target.blit(text, (box.x + 6, box.y + 4))
        pygame.draw.rect(target, self.colors.rgb(record.trigger), swatch)
        return box

    def draw_cursor_info(self, target: pygame.Surface, local: Tuple[float, float],
                         pos: Tuple[int, int]) -> None:
        """Readout of the sensor-space position under the pointer."""
        if self.projection is None:
            return
        distance, angle = from_screen(local[0], local[1], self.projection)
        text = self._get_font(14).render(
            f"Cursor: {distance:.2f} m  {angle:.1f}°", True, COLORS['label'])
        target.blit(text, pos)
