"""Trigger-level color table with a small JSON preference file."""
import json
import logging
import os
import re
from typing import List, Optional, Sequence, Tuple

from .config import DEFAULT_COLORS
from .core.records import clamp_trigger

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r'^#[0-9a-fA-F]{6}$')


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.lstrip('#')
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


class ColorTable:
    """Six colors indexed by trigger level 0-5."""

    def __init__(self, colors: Optional[Sequence[str]] = None,
                 path: Optional[str] = None):
        self.path = path
        self.colors: List[str] = list(colors) if colors else list(DEFAULT_COLORS)

    def __len__(self) -> int:
        return len(self.colors)

    def hex(self, level: int) -> str:
        return self.colors[clamp_trigger(level)]

    def rgb(self, level: int) -> Tuple[int, int, int]:
        return hex_to_rgb(self.hex(level))

    def set_color(self, level: int, color: str) -> None:
        if not 0 <= level < len(self.colors):
            raise IndexError(f"Trigger level out of range: {level}")
        if not _HEX_COLOR.match(color):
            raise ValueError(f"Not a #RRGGBB color: {color}")
        self.colors[level] = color.upper()
        self.save()

    def reset(self) -> None:
        self.colors = list(DEFAULT_COLORS)
        self.save()

    @classmethod
    def load(cls, path: Optional[str]) -> 'ColorTable':
        """Load saved colors, falling back to defaults if absent or malformed."""
        table = cls(path=path)
        if not path or not os.path.isfile(path):
            return table
        try:
            with open(path, 'r', encoding='utf-8') as f:
                saved = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable color file %s: %s", path, e)
            return table
        if (isinstance(saved, list) and len(saved) == len(DEFAULT_COLORS)
                and all(isinstance(c, str) and _HEX_COLOR.match(c) for c in saved)):
            table.colors = list(saved)
        else:
            logger.warning("Ignoring malformed color file %s", path)
        return table

    def save(self) -> None:
        if not self.path:
            return
        try:
            os.makedirs(os.path.dirname(self.path) or '.', exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self.colors, f)
        except OSError as e:
            logger.warning("Could not save colors to %s: %s", self.path, e)
