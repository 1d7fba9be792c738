import json

import pytest

from pir_viz.colors import ColorTable, hex_to_rgb
from pir_viz.config import DEFAULT_COLORS


def test_hex_to_rgb():
    assert hex_to_rgb('#4A8FE7') == (74, 143, 231)


def test_defaults_when_file_missing(tmp_path):
    table = ColorTable.load(str(tmp_path / "none.json"))
    assert table.colors == DEFAULT_COLORS
    assert len(table) == 6


@pytest.mark.parametrize("content", [
    '["#000000", "#111111"]',
    '{"a": 1}',
    'not json',
    '["#000000", "#111111", "#222222", "#333333", "#444444", "red"]',
])
def test_defaults_when_file_malformed(tmp_path, content):
    path = tmp_path / "colors.json"
    path.write_text(content)
    assert ColorTable.load(str(path)).colors == DEFAULT_COLORS


def test_set_color_persists(tmp_path):
    path = tmp_path / "prefs" / "colors.json"
    table = ColorTable.load(str(path))
    table.set_color(2, '#00ff00')
    assert table.hex(2) == '#00FF00'
    assert json.loads(path.read_text())[2] == '#00FF00'

    reloaded = ColorTable.load(str(path))
    assert reloaded.rgb(2) == (0, 255, 0)


def test_set_color_validates():
    table = ColorTable()
    with pytest.raises(IndexError):
        table.set_color(6, '#000000')
    with pytest.raises(ValueError):
        table.set_color(0, 'blue')


def test_lookup_clamps_level():
    table = ColorTable()
    assert table.hex(9) == DEFAULT_COLORS[5]
    assert table.hex(-1) == DEFAULT_COLORS[0]


def test_reset(tmp_path):
    table = ColorTable(path=str(tmp_path / "c.json"))
    table.set_color(0, '#123456')
    table.reset()
    assert table.colors == DEFAULT_COLORS
