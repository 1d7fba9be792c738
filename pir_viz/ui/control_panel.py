"""Side panel: file loading, row actions, color legend, export and record table."""
import logging
import os
import pygame
from typing import List, Optional

from .widgets import Panel, Button, Label, ColorSwatch, COLORS
from .record_table import RecordTable
from ..colors import ColorTable
from ..config import ChartConfig
from ..core.records import CanonicalRecord, RecordStore
from ..data_export import export_excel, export_png
from ..data_import import ImportJob, file_extension, SUPPORTED_EXTENSIONS
from ..errors import PirDataError, UnsupportedFormatError
from ..visualization.polar_chart import PolarChart

logger = logging.getLogger(__name__)

# Posted from the import worker thread back to the UI loop
IMPORT_DONE = pygame.USEREVENT + 1


class ControlPanel:
    """Left-hand panel owning all user actions on the record store."""

    def __init__(self, x: int, y: int, width: int, height: int,
                 store: RecordStore, colors: ColorTable, chart: PolarChart,
                 config: ChartConfig):
        self.rect = pygame.Rect(x, y, width, height)
        self.store = store
        self.colors = colors
        self.chart = chart
        self.config = config
        self._create_panels()

    def _create_panels(self) -> None:
        x, y = self.rect.x, self.rect.y
        panel_width = self.rect.width
        btn_w3 = (panel_width - 40) // 3

        # Data panel
        self.data_panel = Panel(x, y, panel_width, 100, "DATA")
        self.load_button = Button(
            10, 35, btn_w3, 28, "LOAD FILE", callback=self._on_load_file)
        self.add_button = Button(
            20 + btn_w3, 35, btn_w3, 28, "ADD ROW", callback=self._on_add_row)
        self.clear_button = Button(
            30 + btn_w3 * 2, 35, btn_w3, 28, "CLEAR", callback=self._on_clear)
        self.status_label = Label(12, 72, "Drop a CSV / Excel file onto the window", 18,
                                  COLORS['text_dim'])
        self.data_panel.add_widget(self.load_button)
        self.data_panel.add_widget(self.add_button)
        self.data_panel.add_widget(self.clear_button)
        self.data_panel.add_widget(self.status_label)
        y += 110

        # Legend panel
        self.legend_panel = Panel(x, y, panel_width, 70, "TRIGGERS (click to recolor)")
        self.swatches: List[ColorSwatch] = []
        swatch_w = (panel_width - 20) // 7
        for level in range(6):
            swatch = ColorSwatch(10 + level * swatch_w, 38, level,
                                 self.colors.rgb, callback=self._on_pick_color)
            self.legend_panel.add_widget(swatch)
            self.swatches.append(swatch)
        self.reset_colors_button = Button(
            10 + 6 * swatch_w, 33, swatch_w, 26, "RESET", callback=self._on_reset_colors)
        self.legend_panel.add_widget(self.reset_colors_button)
        y += 80

        # Export panel
        self.export_panel = Panel(x, y, panel_width, 70, "EXPORT")
        btn_w2 = (panel_width - 30) // 2
        self.png_button = Button(
            10, 35, btn_w2, 28, "PNG", callback=self._on_export_png)
        self.excel_button = Button(
            20 + btn_w2, 35, btn_w2, 28, "EXCEL", callback=self._on_export_excel)
        self.export_panel.add_widget(self.png_button)
        self.export_panel.add_widget(self.excel_button)
        y += 80

        self.panels = [self.data_panel, self.legend_panel, self.export_panel]

        self.count_label = Label(x + 4, y, "", 18, COLORS['text_dim'])
        y += 20
        self.table = RecordTable(x, y, panel_width, self.rect.bottom - y,
                                 self.store, self.colors)

    def relayout(self, x: int, y: int, width: int, height: int) -> None:
        """Move to a new rect, keeping status text and table edit/scroll state."""
        status_text, status_color = self.status_label.text, self.status_label.color
        table = self.table
        self.rect = pygame.Rect(x, y, width, height)
        self._create_panels()
        self.status_label.set_text(status_text, status_color)
        table.rect = self.table.rect
        self.table = table
        self.table._clamp_scroll()

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def set_status(self, text: str, error: bool = False) -> None:
        color = COLORS['error'] if error else COLORS['text_dim']
        if len(text) > 48:
            text = text[:45] + "..."
        self.status_label.set_text(text, color)

    def notify_error(self, message: str) -> None:
        """Show a recoverable error to the user without touching the records."""
        self.set_status(message.splitlines()[0], error=True)
        from . import dialogs
        dialogs.show_warning("PIR Plotter", message)

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def start_import(self, filepath: str) -> Optional[ImportJob]:
        """Decode `filepath` in the background; the newest import wins."""
        filename = os.path.basename(filepath)
        if file_extension(filepath) not in SUPPORTED_EXTENSIONS:
            self.notify_error(str(UnsupportedFormatError(filename)))
            return None
        generation = self.store.begin_import()
        self.set_status(f"Loading {filename}...")
        logger.info("Importing %s (generation %d)", filepath, generation)

        def post_result(gen: int, records: Optional[List[CanonicalRecord]],
                        error: Optional[str]) -> None:
            pygame.event.post(pygame.event.Event(
                IMPORT_DONE, generation=gen, records=records, error=error,
                filename=filename))

        job = ImportJob(filepath, generation, post_result)
        job.start()
        return job

    def handle_import_done(self, event: pygame.event.Event) -> bool:
        if event.generation != self.store.generation:
            logger.info("Ignoring result of superseded import %d", event.generation)
            return False
        if event.error:
            self.notify_error(event.error)
            return False
        self.store.accept_import(event.generation, event.records)
        self.table.cancel_edit()
        self.table.scroll_row = 0
        self.set_status(f"Loaded {event.filename}")
        return True

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def _on_load_file(self) -> None:
        from . import dialogs
        filepath = dialogs.ask_open_file()
        if filepath:
            self.start_import(filepath)

    def _on_add_row(self) -> None:
        self.table.commit_edit()
        index = self.store.add_record()
        self.table.scroll_to_end()
        self.table.begin_edit(index, 'distance')

    def _on_clear(self) -> None:
        self.table.cancel_edit()
        self.store.clear()
        self.table.scroll_row = 0
        self.set_status("Cleared")

    def _on_pick_color(self, level: int) -> None:
        from . import dialogs
        color = dialogs.ask_color(self.colors.hex(level), level)
        if color:
            self.colors.set_color(level, color)
            self.chart.invalidate()

    def _on_reset_colors(self) -> None:
        self.colors.reset()
        self.chart.invalidate()

    def _on_export_png(self) -> None:
        if self.chart.surface is None:
            self.set_status("Chart area too small to export", error=True)
            return
        try:
            path = export_png(self.chart.surface, bool(self.store.records),
                              self.config.export_dir, self.config.export_scale)
        except PirDataError as e:
            self.notify_error(str(e))
            return
        except (OSError, pygame.error) as e:
            logger.exception("PNG export failed")
            self.notify_error(f"Export failed: {e}")
            return
        self.set_status(f"Saved {os.path.basename(path)}")

    def _on_export_excel(self) -> None:
        self.table.commit_edit()
        try:
            path = export_excel(self.store.records, self.config.export_dir)
        except PirDataError as e:
            self.notify_error(str(e))
            return
        except (OSError, ImportError, ValueError) as e:
            logger.exception("Excel export failed")
            self.notify_error(f"Export failed: {e}")
            return
        self.set_status(f"Saved {os.path.basename(path)}")

    # ------------------------------------------------------------------
    # Event loop hooks
    # ------------------------------------------------------------------

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == IMPORT_DONE:
            self.handle_import_done(event)
            return True
        if self.table.handle_event(event):
            return True
        for panel in reversed(self.panels):
            if panel.handle_event(event):
                return True
        return False

    def update(self) -> None:
        n = len(self.store)
        self.count_label.set_text(f"{n} record{'s' if n != 1 else ''}" if n else "")

    def draw(self, surface: pygame.Surface) -> None:
        self.update()
        for panel in self.panels:
            panel.draw(surface)
        self.count_label.draw(surface)
        self.table.draw(surface)
