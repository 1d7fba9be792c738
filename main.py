#!/usr/bin/env python3
"""PIR Sensor Coverage Plotter - Interactive GUI.

Usage:
    python main.py [data.csv|data.xlsx] [--width 1280] [--height 800]
"""
import argparse
import logging
import sys

import pygame

from pir_viz.colors import ColorTable
from pir_viz.config import ChartConfig, DEFAULT_COLOR_FILE
from pir_viz.core.records import RecordStore
from pir_viz.logging_config import setup_logging
from pir_viz.ui.control_panel import ControlPanel
from pir_viz.visualization.polar_chart import PolarChart

logger = logging.getLogger("pir_viz.main")

MIN_WINDOW_SIZE = 100
MARGIN = 20
BG_COLOR = (245, 246, 248)
CHART_BG_COLOR = (255, 255, 255)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Plot PIR sensor trigger readings on a polar coverage chart.")
    parser.add_argument('file', nargs='?', default=None,
                        help='CSV or Excel file to load at startup')
    parser.add_argument('--width', type=int, default=ChartConfig.window_width,
                        help='Initial window width (default: %(default)s)')
    parser.add_argument('--height', type=int, default=ChartConfig.window_height,
                        help='Initial window height (default: %(default)s)')
    parser.add_argument('--colors', type=str, default=DEFAULT_COLOR_FILE,
                        help='Trigger color preference file')
    parser.add_argument('--export-dir', type=str, default=None,
                        help='Directory for PNG / Excel exports (default: cwd)')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    parser.add_argument('--log-file', type=str, default=None)
    return parser.parse_args(argv)


def calc_layout(win_w: int, win_h: int, config: ChartConfig):
    """Side panel on the left, chart filling the rest."""
    panel_w = min(config.side_panel_width, max(200, win_w // 3))
    panel_rect = pygame.Rect(MARGIN, MARGIN, panel_w, win_h - 2 * MARGIN)
    chart_x = panel_rect.right + MARGIN
    chart_rect = pygame.Rect(chart_x, MARGIN,
                             max(0, win_w - chart_x - MARGIN), max(0, win_h - 2 * MARGIN))
    return panel_rect, chart_rect


def main(argv=None):
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    config = ChartConfig(window_width=args.width, window_height=args.height,
                         color_file=args.colors)
    if args.export_dir:
        config.export_dir = args.export_dir

    pygame.init()
    pygame.display.set_caption("PIR Sensor Coverage Plotter")
    screen = pygame.display.set_mode((config.window_width, config.window_height),
                                     pygame.RESIZABLE)
    clock = pygame.time.Clock()

    # Session state
    store = RecordStore()
    colors = ColorTable.load(config.color_file)

    panel_rect, chart_rect = calc_layout(config.window_width, config.window_height, config)
    chart = PolarChart(config, colors, chart_rect.size)

    control_panel = ControlPanel(panel_rect.x, panel_rect.y, panel_rect.width,
                                 panel_rect.height, store, colors, chart, config)
    if args.file:
        control_panel.start_import(args.file)

    resize_due_at: int = 0
    pending_size = None
    pointer = None

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE \
                    and control_panel.table.editing is None:
                running = False

            elif event.type == pygame.VIDEORESIZE:
                if event.w < MIN_WINDOW_SIZE or event.h < MIN_WINDOW_SIZE:
                    continue
                screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                pending_size = (event.w, event.h)
                resize_due_at = pygame.time.get_ticks() + config.resize_debounce_ms

            elif event.type == pygame.DROPFILE:
                control_panel.start_import(event.file)

            elif event.type == pygame.MOUSEMOTION:
                if chart_rect.collidepoint(event.pos):
                    pointer = event.pos
                else:
                    pointer = None
                    chart.clear_hover()

            elif event.type == pygame.WINDOWLEAVE:
                pointer = None
                chart.clear_hover()

            control_panel.handle_event(event)

        # Trailing-edge debounce: relayout once resizing has settled
        if pending_size is not None and pygame.time.get_ticks() >= resize_due_at:
            panel_rect, chart_rect = calc_layout(pending_size[0], pending_size[1], config)
            chart.resize(chart_rect.width, chart_rect.height)
            control_panel.relayout(panel_rect.x, panel_rect.y,
                                   panel_rect.width, panel_rect.height)
            pending_size = None

        # Skip rendering when minimized
        if screen.get_size()[0] == 0:
            clock.tick(config.fps)
            continue

        if chart.needs_render(store):
            chart.render(store)

        screen.fill(BG_COLOR)
        pygame.draw.rect(screen, CHART_BG_COLOR, chart_rect)
        if chart.surface is not None:
            screen.blit(chart.surface, chart_rect.topleft)

        if pointer is not None:
            local = (pointer[0] - chart_rect.x, pointer[1] - chart_rect.y)
            chart.draw_cursor_info(screen, local, (chart_rect.x + 8, chart_rect.bottom - 18))
            index = chart.hover(local[0], local[1], store.records)
            if index is not None:
                chart.draw_tooltip(screen, store[index], pointer, chart_rect)

        control_panel.draw(screen)

        pygame.display.flip()
        clock.tick(config.fps)

    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
