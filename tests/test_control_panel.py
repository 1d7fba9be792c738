import pygame
import pytest

from pir_viz.core.records import CanonicalRecord
from pir_viz.ui.control_panel import IMPORT_DONE, ControlPanel
from pir_viz.ui.record_table import HEADER_HEIGHT, ROW_HEIGHT, RecordTable
from pir_viz.visualization.polar_chart import PolarChart


@pytest.fixture
def panel(config, colors, store):
    chart = PolarChart(config, colors, (600, 500))
    panel = ControlPanel(20, 20, 380, 760, store, colors, chart, config)
    panel.errors = []
    panel.notify_error = panel.errors.append
    return panel


def done_event(generation, records=None, error=None):
    return pygame.event.Event(IMPORT_DONE, generation=generation, records=records,
                              error=error, filename="pir.csv")


class TestImportCompletion:
    def test_current_generation_replaces_records(self, panel, store):
        gen = store.begin_import()
        assert panel.handle_import_done(done_event(gen, [CanonicalRecord(1, 2, 3)]))
        assert store.records == [CanonicalRecord(1, 2, 3)]
        assert panel.status_label.text == "Loaded pir.csv"

    def test_stale_generation_is_ignored(self, panel, store):
        old = store.begin_import()
        store.begin_import()
        before = list(store.records)
        assert not panel.handle_import_done(done_event(old, [CanonicalRecord(9, 9, 9)]))
        assert store.records == before

    def test_error_keeps_previous_records(self, panel, store):
        before = list(store.records)
        gen = store.begin_import()
        assert not panel.handle_import_done(done_event(gen, error="No valid data."))
        assert store.records == before
        assert panel.errors == ["No valid data."]

    def test_unsupported_extension_is_rejected_up_front(self, panel, store):
        gen = store.generation
        assert panel.start_import("/tmp/readings.json") is None
        assert store.generation == gen
        assert "Unsupported file format" in panel.errors[0]

    def test_start_import_posts_result(self, panel, store, tmp_path):
        path = tmp_path / "pir.csv"
        path.write_text("distance,angle,count\n2,15,3\n", encoding="utf-8")
        pygame.event.clear()
        job = panel.start_import(str(path))
        job.join(timeout=5)
        events = pygame.event.get(IMPORT_DONE)
        assert len(events) == 1
        assert panel.handle_event(events[0])
        assert store.records == [CanonicalRecord(2, 15, 3)]


class TestActions:
    def test_add_row_starts_editing_distance(self, panel, store):
        panel._on_add_row()
        assert len(store) == 4
        assert store[3] == CanonicalRecord(3, 0, 5)
        assert panel.table.editing == (3, 'distance')

    def test_clear(self, panel, store):
        panel._on_clear()
        assert len(store) == 0

    def test_export_excel_refuses_when_empty(self, panel, store):
        store.clear()
        panel._on_export_excel()
        assert panel.errors == ["No data to export."]

    def test_relayout_keeps_edit_and_status(self, panel, store):
        panel.set_status("Loaded pir.csv")
        panel.table.begin_edit(1, 'distance')
        panel.table.edit_text = "7.5"
        table = panel.table

        panel.relayout(20, 20, 300, 600)

        assert panel.table is table
        assert panel.table.rect.width == 300
        assert panel.table.rect.bottom == 620
        assert panel.table.editing == (1, 'distance')
        assert panel.status_label.text == "Loaded pir.csv"
        panel.table.commit_edit()
        assert store[1].distance == 7.5

    def test_relayout_clamps_scroll(self, panel, store):
        for _ in range(40):
            store.add_record()
        panel.table.scroll_to_end()
        panel.relayout(20, 20, 380, 2000)
        assert panel.table.scroll_row == 0

    def test_reset_colors_invalidates_chart(self, panel, store, colors):
        panel.chart.render(store)
        colors.colors[0] = '#000000'
        panel._on_reset_colors()
        assert colors.hex(0) == '#4A8FE7'
        assert panel.chart.needs_render(store)


class TestRecordTable:
    @pytest.fixture
    def table(self, store, colors):
        return RecordTable(0, 0, 300, 200, store, colors)

    def click(self, table, index, column_x, button=1):
        y = HEADER_HEIGHT + index * ROW_HEIGHT + ROW_HEIGHT // 2
        event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, pos=(column_x, y), button=button)
        return table.handle_event(event)

    def key(self, table, key, unicode=""):
        event = pygame.event.Event(pygame.KEYDOWN, key=key, unicode=unicode, mod=0)
        return table.handle_event(event)

    def test_cell_lookup(self, table):
        assert table.cell_at((50, HEADER_HEIGHT + 1)) == (0, 'distance')
        assert table.cell_at((50, 5)) is None
        assert table.cell_at((50, HEADER_HEIGHT + 3 * ROW_HEIGHT + 1)) is None

    def test_edit_distance(self, table, store):
        assert self.click(table, 1, 50)
        assert table.edit_text == "5.5"
        self.key(table, pygame.K_BACKSPACE)
        self.key(table, pygame.K_BACKSPACE)
        self.key(table, pygame.K_7, "7")
        self.key(table, pygame.K_a, "a")
        self.key(table, pygame.K_RETURN)
        assert store[1].distance == 57
        assert table.editing is None

    def test_escape_cancels_edit(self, table, store):
        self.click(table, 0, 140)
        self.key(table, pygame.K_1, "1")
        self.key(table, pygame.K_ESCAPE)
        assert store[0].angle == 10.0

    def test_trigger_cycles(self, table, store):
        self.click(table, 0, 220)
        assert store[0].trigger == 0
        self.click(table, 0, 220, button=3)
        assert store[0].trigger == 5
        self.click(table, 1, 220)
        assert store[1].trigger == 3

    def test_delete_row(self, table, store):
        self.click(table, 0, 290)
        assert len(store) == 2
        assert store[0].distance == 5.5
