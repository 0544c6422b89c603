"""
Unit tests for the adaptive coordinate grid.
"""

import pytest

from engine.bounds import Bounds
from engine.grid import format_grid_label, generate_grid, grid_spacing, line_count, show_labels


@pytest.mark.parametrize(
    "zoom, spacing",
    [
        (0, 45), (1, 45), (2, 30), (3, 15), (4, 10), (5, 5), (6, 5),
        (7, 1), (8, 0.5), (9, 0.5), (10, 0.1), (11, 0.1), (12, 0.05),
        (13, 0.05), (14, 0.01), (18, 0.01),
    ],
)
def test_spacing_tiers(zoom, spacing):
    assert grid_spacing(zoom) == spacing


def test_zoom_five_lines_snap_to_spacing():
    grid = generate_grid(Bounds.from_corners((0, 0), (12, 12)), zoom=5)

    assert grid.spacing == 5
    assert [line.value for line in grid.latitude_lines] == [0, 5, 10, 15]
    assert [line.value for line in grid.longitude_lines] == [0, 5, 10, 15]
    assert all(line.show_label for line in grid.latitude_lines + grid.longitude_lines)
    assert grid.latitude_lines[1].label == "N 5°"
    assert grid.longitude_lines[2].label == "E 10°"


def test_lines_clipped_to_valid_range():
    grid = generate_grid(Bounds(-89.0, -179.0, 89.0, 179.0), zoom=1)

    lats = [line.value for line in grid.latitude_lines]
    lngs = [line.value for line in grid.longitude_lines]
    assert lats == [-90, -45, 0, 45, 90]
    assert lngs == [-180, -135, -90, -45, 0, 45, 90, 135, 180]


def test_bounds_beyond_world_are_clipped():
    grid = generate_grid(Bounds(-120.0, -400.0, 120.0, 400.0), zoom=2)

    assert min(line.value for line in grid.latitude_lines) == -90
    assert max(line.value for line in grid.longitude_lines) == 180


def test_fine_spacing_has_no_float_drift():
    grid = generate_grid(Bounds(53.52, 8.11, 53.56, 8.14), zoom=14)

    values = [line.value for line in grid.latitude_lines]
    assert 53.55 in values
    assert values == sorted(values)
    assert all(round(v, 2) == v for v in values)


def test_line_endpoints_span_viewport():
    grid = generate_grid(Bounds(50.2, -3.7, 51.8, -1.2), zoom=7)

    lat_line = grid.latitude_lines[1]
    assert lat_line.coordinates == ((lat_line.value, -3.7), (lat_line.value, -1.2))
    lng_line = grid.longitude_lines[0]
    assert lng_line.coordinates == ((50.2, lng_line.value), (51.8, lng_line.value))


@pytest.mark.parametrize(
    "value, is_latitude, label",
    [
        (0, True, "N 0°"),
        (0, False, "E 0°"),
        (53.5, True, "N 53° 30'"),
        (-33.75, True, "S 33° 45'"),
        (-4.01, False, "W 4° 36\""),
        (12.05, False, "E 12° 3'"),
        (1.51, True, "N 1° 30' 36\""),
        (-180, False, "W 180°"),
    ],
)
def test_labels(value, is_latitude, label):
    assert format_grid_label(value, is_latitude) == label


def test_grid_is_deterministic():
    bounds = Bounds(10.3, 20.7, 14.9, 26.1)
    assert generate_grid(bounds, 8) == generate_grid(bounds, 8)


def test_label_flag_follows_tier_table(monkeypatch):
    assert show_labels(5) is True
    assert show_labels(20) is True

    monkeypatch.setattr("engine.grid.GRID_SPACING_TIERS", ((4, 10.0, False), (9, 0.5, True)))
    assert show_labels(3) is False
    assert show_labels(8) is True

    grid = generate_grid(Bounds(0.0, 0.0, 20.0, 20.0), zoom=2)
    assert grid.latitude_lines
    assert not any(line.show_label for line in grid.latitude_lines + grid.longitude_lines)


def test_line_count_bounds_generated_lines():
    for bounds, zoom in [
        (Bounds(0.0, 0.0, 12.0, 12.0), 5),
        (Bounds(50.0, -2.0, 52.0, 1.0), 8),
        (Bounds(-89.0, -179.0, 89.0, 179.0), 1),
    ]:
        grid = generate_grid(bounds, zoom)
        assert len(grid.latitude_lines) + len(grid.longitude_lines) <= line_count(bounds, zoom)

    assert line_count(Bounds(0.0, 0.0, 12.0, 12.0), 5) == 8
    assert line_count(Bounds(-85.0, -180.0, 85.0, 180.0), 22) > 50_000
