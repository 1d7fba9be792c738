import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame
import pytest

from pir_viz.colors import ColorTable
from pir_viz.config import ChartConfig
from pir_viz.core.records import CanonicalRecord, RecordStore


@pytest.fixture(scope="session", autouse=True)
def pygame_session():
    pygame.init()
    yield
    pygame.quit()


@pytest.fixture
def config(tmp_path):
    return ChartConfig(export_dir=str(tmp_path / "exports"),
                       color_file=str(tmp_path / "colors.json"))


@pytest.fixture
def colors():
    return ColorTable()


@pytest.fixture
def store():
    return RecordStore([
        CanonicalRecord(3.0, 10.0, 5),
        CanonicalRecord(5.5, -20.0, 2),
        CanonicalRecord(1.0, 0.0, 0),
    ])
