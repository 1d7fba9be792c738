"""Tabular import of PIR sensor readings from CSV and Excel files.

Column headers vary between test rigs and languages, so the distance, angle
and trigger columns are located by fuzzy header matching before the rows are
normalized into CanonicalRecord objects.
"""
import csv
import logging
import math
import os
import re
import threading
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from .core.records import CanonicalRecord, MAX_TRIGGER, MIN_TRIGGER, clamp_trigger
from .errors import (EmptyInputError, PirDataError, UnresolvableSchemaError,
                     UnsupportedFormatError)

logger = logging.getLogger(__name__)

RawRow = Dict[str, object]

# Candidate header names in priority order
DISTANCE_KEYS = ['距离', 'distance', 'dist', '距离(m)', '距离（m）', 'range']
ANGLE_KEYS = ['角度', 'angle', '角度(°)', '角度（°）', '角度(度)', 'deg']
TRIGGER_KEYS = ['触发次数', '触发', 'count', 'triggered', 'trigger', '是否触发',
                'times', 'result']

TRUTHY_TOKENS = {'是', 'yes', 'true', 'triggered', '触发', 'pass'}

SUPPORTED_EXTENSIONS = ('csv', 'xlsx', 'xls')

_FLOAT_PREFIX = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')
_INT_PREFIX = re.compile(r'^[+-]?\d+')


def match_key(headers: Sequence[str], keys: Sequence[str]) -> Optional[str]:
    """Return the header that best matches any of the candidate keys.

    Exact (trimmed, case-insensitive) matches win over substring matches;
    within each pass candidates are tried in priority order.
    """
    normalized = [h.strip().lower() for h in headers]
    for key in keys:
        k = key.lower()
        for header, norm in zip(headers, normalized):
            if norm == k:
                return header
    for key in keys:
        k = key.lower()
        for header, norm in zip(headers, normalized):
            if k in norm:
                return header
    return None


def resolve_columns(headers: Sequence[str]) -> Tuple[str, str, Optional[str]]:
    """Locate distance, angle and (optional) trigger columns."""
    distance_key = match_key(headers, DISTANCE_KEYS)
    angle_key = match_key(headers, ANGLE_KEYS)
    if not distance_key or not angle_key:
        raise UnresolvableSchemaError(headers)
    trigger_key = match_key(headers, TRIGGER_KEYS)
    return distance_key, angle_key, trigger_key


def parse_number(value) -> Optional[float]:
    """Lenient float parse: numbers pass through, strings use their numeric prefix.

    Returns None for blanks, text without a leading number, NaN and infinity.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _FLOAT_PREFIX.match(str(value).strip())
        if not match:
            return None
        number = float(match.group(0))
    if not math.isfinite(number):
        return None
    return number


def parse_trigger(value) -> int:
    """Convert a trigger cell to a level in 0-5.

    Integers (or strings starting with one) are clamped; known affirmative
    words mean a full trigger; anything else counts as not triggered.
    """
    if value is None:
        return MIN_TRIGGER
    if isinstance(value, float) and math.isnan(value):
        return MIN_TRIGGER
    text = str(value).strip().lower()
    match = _INT_PREFIX.match(text)
    if match:
        return clamp_trigger(int(match.group(0)))
    if text in TRUTHY_TOKENS:
        return MAX_TRIGGER
    return MIN_TRIGGER


def normalize_rows(raw_rows: Sequence[RawRow], distance_key: str, angle_key: str,
                   trigger_key: Optional[str] = None) -> List[CanonicalRecord]:
    """Build records from raw rows, silently dropping non-numeric ones."""
    records = []
    for row in raw_rows:
        distance = parse_number(row.get(distance_key))
        angle = parse_number(row.get(angle_key))
        if distance is None or angle is None:
            continue
        if trigger_key:
            trigger = parse_trigger(row.get(trigger_key))
        else:
            trigger = MAX_TRIGGER
        records.append(CanonicalRecord(distance=distance, angle=angle, trigger=trigger))
    return records


def records_from_rows(raw_rows: Sequence[RawRow],
                      headers: Optional[Sequence[str]] = None) -> List[CanonicalRecord]:
    """Resolve columns and normalize. Raises on empty or unusable input."""
    if not raw_rows:
        raise EmptyInputError("No valid data.")
    if headers is None:
        headers = list(raw_rows[0].keys())
    distance_key, angle_key, trigger_key = resolve_columns(headers)
    logger.debug("Columns: distance=%r angle=%r trigger=%r",
                 distance_key, angle_key, trigger_key)
    records = normalize_rows(raw_rows, distance_key, angle_key, trigger_key)
    if not records:
        raise EmptyInputError("No valid data after parsing.")
    dropped = len(raw_rows) - len(records)
    if dropped:
        logger.info("Dropped %d non-numeric row(s)", dropped)
    return records


# ----------------------------------------------------------------------
# File decoding
# ----------------------------------------------------------------------

def file_extension(filepath: str) -> str:
    return os.path.splitext(filepath)[1].lstrip('.').lower()


def _read_csv(filepath: str) -> Tuple[List[str], List[RawRow]]:
    with open(filepath, 'r', encoding='utf-8-sig', newline='') as f:
        reader = csv.DictReader(f)
        headers = [h for h in (reader.fieldnames or []) if h is not None]
        rows = []
        for row in reader:
            if all(v is None or str(v).strip() == '' for k, v in row.items() if k is not None):
                continue
            rows.append({k: v for k, v in row.items() if k is not None})
    return headers, rows


def _read_excel(filepath: str) -> Tuple[List[str], List[RawRow]]:
    frame = pd.read_excel(filepath, sheet_name=0)
    frame = frame.dropna(how='all')
    frame.columns = [str(c) for c in frame.columns]
    frame = frame.astype(object).where(frame.notna(), None)
    return list(frame.columns), frame.to_dict(orient='records')


def read_table(filepath: str) -> Tuple[List[str], List[RawRow]]:
    """Decode the first table in a CSV or spreadsheet file."""
    ext = file_extension(filepath)
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(os.path.basename(filepath))
    if ext == 'csv':
        return _read_csv(filepath)
    return _read_excel(filepath)


def load_records(filepath: str) -> List[CanonicalRecord]:
    """Read a file and return its canonical records."""
    headers, rows = read_table(filepath)
    logger.info("Read %d row(s) from %s", len(rows), os.path.basename(filepath))
    return records_from_rows(rows, headers)


class ImportJob:
    """Decode one file on a background thread and report back.

    The callback receives (generation, records, error) from the worker
    thread; exactly one of records / error is set.
    """

    def __init__(self, filepath: str, generation: int,
                 on_done: Callable[[int, Optional[List[CanonicalRecord]], Optional[str]], None]):
        self.filepath = filepath
        self.generation = generation
        self.on_done = on_done
        self._thread: Optional[threading.Thread] = None

    def run(self) -> None:
        try:
            records = load_records(self.filepath)
        except PirDataError as e:
            logger.warning("Import rejected: %s", e)
            self.on_done(self.generation, None, str(e))
        except Exception as e:
            # Decoders raise library-specific errors (BadZipFile, XLRDError, ...)
            logger.exception("Failed to read %s", self.filepath)
            self.on_done(self.generation, None, f"Failed to read file: {e}")
        else:
            self.on_done(self.generation, records, None)

    def start(self) -> None:
        self._thread = threading.Thread(target=self.run, daemon=True)
        self._thread.start()

    def join(self, timeout: Optional[float] = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)
