"""Export of the record table to Excel and of the chart to PNG."""
import logging
import os
from datetime import datetime
from typing import Optional, Sequence

import pandas as pd
import pygame

from .core.records import CanonicalRecord
from .errors import EmptyInputError

logger = logging.getLogger(__name__)

EXCEL_COLUMNS = ['#', '距离(m)', '角度(°)', '触发次数(/5)']
EXCEL_COLUMN_WIDTHS = [5, 10, 10, 14]
EXCEL_SHEET = 'PIR数据'
PNG_BACKGROUND = (255, 255, 255)


def timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d_%H%M")


def records_to_frame(records: Sequence[CanonicalRecord]) -> pd.DataFrame:
    rows = [[i + 1, rec.distance, rec.angle, rec.trigger]
            for i, rec in enumerate(records)]
    return pd.DataFrame(rows, columns=EXCEL_COLUMNS)


def export_excel(records: Sequence[CanonicalRecord], output_dir: str,
                 filename: Optional[str] = None) -> str:
    """Write the records to an .xlsx workbook and return its path."""
    if not records:
        raise EmptyInputError("No data to export.")
    if filename is None:
        filename = f"PIR_data_{timestamp()}.xlsx"
    os.makedirs(output_dir, exist_ok=True)
    filepath = os.path.join(output_dir, filename)

    frame = records_to_frame(records)
    with pd.ExcelWriter(filepath, engine='openpyxl') as writer:
        frame.to_excel(writer, sheet_name=EXCEL_SHEET, index=False)
        sheet = writer.sheets[EXCEL_SHEET]
        for col, width in zip('ABCD', EXCEL_COLUMN_WIDTHS):
            sheet.column_dimensions[col].width = width

    logger.info("Exported %d records to %s", len(records), filepath)
    return filepath


def compose_png(chart: pygame.Surface, scale: int = 2) -> pygame.Surface:
    """Flatten the chart over an opaque background at `scale` x resolution."""
    width, height = chart.get_size()
    flat = pygame.Surface((width, height))
    flat.fill(PNG_BACKGROUND)
    flat.blit(chart, (0, 0))
    if scale == 1:
        return flat
    return pygame.transform.smoothscale(flat, (width * scale, height * scale))


def export_png(chart: pygame.Surface, has_records: bool, output_dir: str,
               scale: int = 2, filename: Optional[str] = None) -> str:
    if not has_records:
        raise EmptyInputError("No data to export.")
    if filename is None:
        filename = f"PIR_visualization_{timestamp()}.png"
    os.makedirs(output_dir, exist_ok=True)
    filepath = os.path.join(output_dir, filename)
    pygame.image.save(compose_png(chart, scale), filepath)
    logger.info("Exported chart image to %s", filepath)
    return filepath
