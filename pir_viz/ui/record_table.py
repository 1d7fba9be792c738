"""Editable, scrollable table of the loaded records."""
from typing import Optional, Tuple

import pygame

from ..colors import ColorTable
from ..core.records import MAX_TRIGGER, RecordStore
from ..visualization.polar_chart import format_number
from .widgets import COLORS, Widget

ROW_HEIGHT = 24
HEADER_HEIGHT = 26

# (field, title, width) - widths are fractions of the table width
COLUMNS = [
    ('index', '#', 0.12),
    ('distance', 'Distance (m)', 0.30),
    ('angle', 'Angle (°)', 0.28),
    ('trigger', 'Trigger', 0.20),
    ('delete', '', 0.10),
]

EDITABLE_CHARS = set('0123456789.-+eE')


class RecordTable(Widget):
    """Rows of distance / angle / trigger cells.

    Click a distance or angle cell to type a new value (Enter or clicking
    elsewhere commits, Escape cancels). Left/right click on a trigger cell
    raises/lowers it, wrapping within 0-5. The x column deletes the row.
    """

    def __init__(self, x: int, y: int, width: int, height: int,
                 store: RecordStore, colors: ColorTable):
        super().__init__(x, y, width, height)
        self.store = store
        self.colors = colors
        self.font = pygame.font.Font(None, 20)
        self.header_font = pygame.font.Font(None, 18)
        self.scroll_row = 0
        self.editing: Optional[Tuple[int, str]] = None
        self.edit_text = ""
        self.cursor_timer = 0

    @property
    def visible_rows(self) -> int:
        return max(1, (self.rect.height - HEADER_HEIGHT) // ROW_HEIGHT)

    def _column_bounds(self):
        x = self.rect.x
        for field_name, title, frac in COLUMNS:
            w = int(self.rect.width * frac)
            yield field_name, title, x, w
            x += w

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Tuple[int, str]]:
        """Map a screen position to (record index, field) or None."""
        if not self.rect.collidepoint(pos):
            return None
        row_y = pos[1] - self.rect.y - HEADER_HEIGHT
        if row_y < 0:
            return None
        index = self.scroll_row + row_y // ROW_HEIGHT
        if index >= len(self.store):
            return None
        for field_name, _, x, w in self._column_bounds():
            if x <= pos[0] < x + w:
                return index, field_name
        return None

    def _clamp_scroll(self) -> None:
        max_scroll = max(0, len(self.store) - self.visible_rows)
        self.scroll_row = max(0, min(max_scroll, self.scroll_row))

    def scroll_to_end(self) -> None:
        self.scroll_row = max(0, len(self.store) - self.visible_rows)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def begin_edit(self, index: int, field_name: str) -> None:
        self.commit_edit()
        self.editing = (index, field_name)
        self.edit_text = format_number(getattr(self.store[index], field_name))

    def commit_edit(self) -> None:
        if self.editing is None:
            return
        index, field_name = self.editing
        self.editing = None
        self.store.update_field(index, field_name, self.edit_text.strip())

    def cancel_edit(self) -> None:
        self.editing = None

    def _step_trigger(self, index: int, delta: int) -> None:
        level = (self.store[index].trigger + delta) % (MAX_TRIGGER + 1)
        self.store.update_field(index, 'trigger', level)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.visible or not self.enabled:
            return False

        if event.type == pygame.MOUSEWHEEL:
            if self.rect.collidepoint(pygame.mouse.get_pos()):
                self.scroll_row -= event.y
                self._clamp_scroll()
                return True
            return False

        if event.type == pygame.MOUSEBUTTONDOWN and event.button in (1, 3):
            cell = self.cell_at(event.pos)
            if cell is None:
                if self.editing is not None:
                    self.commit_edit()
                    return self.rect.collidepoint(event.pos)
                return False
            index, field_name = cell
            if field_name in ('distance', 'angle') and event.button == 1:
                self.begin_edit(index, field_name)
            elif field_name == 'trigger':
                self.commit_edit()
                self._step_trigger(index, 1 if event.button == 1 else -1)
            elif field_name == 'delete' and event.button == 1:
                self.cancel_edit()
                self.store.delete_record(index)
                self._clamp_scroll()
            return True

        if self.editing is not None and event.type == pygame.KEYDOWN:
            if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                self.commit_edit()
            elif event.key == pygame.K_ESCAPE:
                self.cancel_edit()
            elif event.key == pygame.K_BACKSPACE:
                self.edit_text = self.edit_text[:-1]
            elif event.key == pygame.K_TAB:
                index, field_name = self.editing
                self.commit_edit()
                if field_name == 'distance':
                    self.begin_edit(index, 'angle')
            elif event.unicode and event.unicode in EDITABLE_CHARS:
                self.edit_text += event.unicode
            return True

        return False

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def draw(self, surface: pygame.Surface) -> None:
        if not self.visible:
            return
        pygame.draw.rect(surface, COLORS['panel'], self.rect)
        pygame.draw.rect(surface, COLORS['border'], self.rect, 1)

        for field_name, title, x, w in self._column_bounds():
            if title:
                text = self.header_font.render(title, True, COLORS['text_dim'])
                surface.blit(text, (x + 6, self.rect.y + 6))
        pygame.draw.line(surface, COLORS['border'],
                         (self.rect.x, self.rect.y + HEADER_HEIGHT - 1),
                         (self.rect.right - 1, self.rect.y + HEADER_HEIGHT - 1))

        if not len(self.store):
            text = self.font.render("No data", True, COLORS['text_dim'])
            surface.blit(text, text.get_rect(
                center=(self.rect.centerx, self.rect.y + HEADER_HEIGHT + ROW_HEIGHT)))
            return

        self._clamp_scroll()
        end = min(len(self.store), self.scroll_row + self.visible_rows)
        for row, index in enumerate(range(self.scroll_row, end)):
            y = self.rect.y + HEADER_HEIGHT + row * ROW_HEIGHT
            self._draw_row(surface, index, y)

        if len(self.store) > self.visible_rows:
            self._draw_scrollbar(surface)

    def _draw_row(self, surface: pygame.Surface, index: int, y: int) -> None:
        rec = self.store[index]
        for field_name, _, x, w in self._column_bounds():
            cell = pygame.Rect(x, y, w, ROW_HEIGHT)
            color = COLORS['text']
            if field_name == 'index':
                value, color = str(index + 1), COLORS['text_dim']
            elif field_name == 'trigger':
                value, color = f"{rec.trigger}/5", self.colors.rgb(rec.trigger)
            elif field_name == 'delete':
                value, color = "x", COLORS['error']
            elif self.editing == (index, field_name):
                value = self.edit_text
                pygame.draw.rect(surface, COLORS['highlight'], cell.inflate(-4, -4), 1)
            else:
                value = format_number(getattr(rec, field_name))
            text = self.font.render(value, True, color)
            surface.blit(text, (x + 6, y + (ROW_HEIGHT - text.get_height()) // 2))

            if self.editing == (index, field_name):
                self.cursor_timer = (self.cursor_timer + 1) % 60
                if self.cursor_timer < 30:
                    cx = x + 6 + text.get_width() + 2
                    pygame.draw.line(surface, COLORS['highlight'],
                                     (cx, y + 5), (cx, y + ROW_HEIGHT - 5))

    def _draw_scrollbar(self, surface: pygame.Surface) -> None:
        track_h = self.rect.height - HEADER_HEIGHT
        total = len(self.store)
        thumb_h = max(20, int(track_h * self.visible_rows / total))
        max_scroll = total - self.visible_rows
        thumb_y = self.rect.y + HEADER_HEIGHT + int((track_h - thumb_h) * self.scroll_row / max_scroll)
        thumb = pygame.Rect(self.rect.right - 7, thumb_y, 5, thumb_h)
        pygame.draw.rect(surface, COLORS['border'], thumb, border_radius=2)
