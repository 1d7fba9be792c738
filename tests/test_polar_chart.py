import pytest

from pir_viz.core.polar import ProjectionParams, marker_position, to_screen
from pir_viz.core.records import CanonicalRecord, RecordStore
from pir_viz.visualization.polar_chart import (
    PolarChart, find_nearest, format_distance_label, format_tooltip,
)

PARAMS = ProjectionParams(origin_x=300, origin_y=476, scale=25.0, width=600, height=500)


class TestFindNearest:
    def test_no_records(self):
        assert find_nearest(10, 10, [], PARAMS) is None

    def test_no_projection(self, store):
        assert find_nearest(10, 10, store.records, None) is None

    def test_pointer_on_point(self, store):
        for i, rec in enumerate(store.records):
            sx, sy = to_screen(rec.distance, rec.angle, PARAMS)
            assert find_nearest(sx, sy, store.records, PARAMS) == i

    def test_radius_is_strict(self):
        records = [CanonicalRecord(4, 0)]
        sx, sy = to_screen(4, 0, PARAMS)
        assert find_nearest(sx + 11.9, sy, records, PARAMS) == 0
        assert find_nearest(sx + 12.0, sy, records, PARAMS) is None
        assert find_nearest(sx, sy + 5, records, PARAMS, max_radius=5) is None

    def test_picks_closest_of_neighbours(self):
        records = [CanonicalRecord(4, 0), CanonicalRecord(4.2, 0)]
        sx, sy = to_screen(4.15, 0, PARAMS)
        assert find_nearest(sx, sy, records, PARAMS) == 1

    def test_ignores_non_finite_records(self):
        records = [CanonicalRecord(float("nan"), 0), CanonicalRecord(2, 0)]
        sx, sy = to_screen(2, 0, PARAMS)
        assert find_nearest(sx, sy, records, PARAMS) == 1

    def test_hits_against_rounded_marker_position(self):
        # y = 1.004 is plotted at 1.0, 0.1 px below the raw projection
        records = [CanonicalRecord(1.004, 0)]
        sx, sy = marker_position(1.004, 0, PARAMS)
        assert sy == 451.0
        assert find_nearest(sx, sy + 11.95, records, PARAMS) == 0
        assert find_nearest(sx, sy - 11.95, records, PARAMS) == 0


@pytest.mark.parametrize("distance,label", [(3, "3m"), (2.5, "2.5m"), (13.0, "13m")])
def test_distance_labels(distance, label):
    assert format_distance_label(distance) == label


def test_tooltip_text():
    text = format_tooltip(CanonicalRecord(3.0, -12.5, 4))
    assert text == "Distance 3m  Angle -12.5°  Trigger 4/5"


class TestPolarChart:
    def test_render_publishes_projection(self, config, colors, store):
        chart = PolarChart(config, colors, (600, 500))
        surface = chart.render(store)
        assert surface.get_size() == (600, 500)
        assert chart.projection is not None
        assert store.projection is chart.projection
        assert chart.grid.max_distance == 6.0
        assert chart.projection.scale > 0
        assert not chart.needs_render(store)

    def test_marker_drawn_in_trigger_color(self, config, colors):
        store = RecordStore([CanonicalRecord(3.0, 10.0, 2)])
        chart = PolarChart(config, colors, (600, 500))
        surface = chart.render(store)
        sx, sy = marker_position(3.0, 10.0, chart.projection)
        pixel = surface.get_at((int(round(sx)), int(round(sy))))
        assert tuple(pixel)[:3] == colors.rgb(2)
        assert pixel.a == 255

    def test_empty_store_has_no_projection(self, config, colors):
        store = RecordStore()
        chart = PolarChart(config, colors, (600, 500))
        assert chart.render(store) is not None
        assert chart.projection is None
        assert store.projection is None
        assert chart.hover(300, 300, store.records) is None

    def test_degenerate_canvas_skips_rendering(self, config, colors, store):
        chart = PolarChart(config, colors, (600, 500))
        chart.render(store)
        chart.resize(5, 500)
        assert chart.needs_render(store)
        assert chart.render(store) is None
        assert chart.projection is None
        assert store.projection is None

    def test_mutation_requires_rerender(self, config, colors, store):
        chart = PolarChart(config, colors, (600, 500))
        chart.render(store)
        store.add_record(14.0, 30.0, 1)
        assert chart.needs_render(store)
        chart.render(store)
        assert chart.grid.distance_step == 1
        assert chart.grid.max_distance == 15

    def test_hover_uses_cached_projection(self, config, colors, store):
        chart = PolarChart(config, colors, (600, 500))
        chart.render(store)
        sx, sy = to_screen(5.5, -20.0, chart.projection)
        assert chart.hover(sx + 2, sy - 2, store.records) == 1
        assert chart.hover_index == 1
        chart.clear_hover()
        assert chart.hover_index is None

    def test_tooltip_stays_inside_bounds(self, config, colors):
        import pygame
        target = pygame.Surface((400, 300))
        bounds = pygame.Rect(0, 0, 400, 300)
        chart = PolarChart(config, colors, (400, 300))
        box = chart.draw_tooltip(target, CanonicalRecord(3, 10, 5), (395, 5), bounds)
        assert bounds.contains(box)
