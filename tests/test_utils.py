"""
Pure helper tests: query handling, flag emoji, bounds and view fitting.
"""

import pytest

from utils import (fit_bounds, format_population, geometry_bounds, get_flag_emoji, merge_bounds,
                   normalize_query, split_queries)


class TestQueryHelpers:
    def test_normalize_trims_and_lowercases(self):
        assert normalize_query("  IrAn ") == "iran"

    def test_normalize_none_is_empty(self):
        assert normalize_query(None) == ""

    def test_split_drops_empty_segments(self):
        assert split_queries("Iran + Germany + ") == ["Iran", "Germany"]

    def test_split_only_delimiters(self):
        assert split_queries(" + + ") == []

    def test_split_keeps_display_case(self):
        assert split_queries("Nonexistentland+iran") == ["Nonexistentland", "iran"]


class TestFlagEmoji:
    def test_valid_code(self):
        assert get_flag_emoji("de") == "🇩🇪"

    @pytest.mark.parametrize("code", ["", "DEU", None, "1A"])
    def test_invalid_code_gives_white_flag(self, code):
        assert get_flag_emoji(code) == "🏳️"


class TestPopulation:
    def test_thousands_separator(self):
        assert format_population(83240525) == "83,240,525"

    def test_small_number(self):
        assert format_population(999) == "999"


class TestBounds:
    def test_polygon_bounds(self):
        geom = {"type": "Polygon", "coordinates": [[[0, 0], [2, 0], [2, 3], [0, 3], [0, 0]]]}
        assert geometry_bounds(geom) == (0, 0, 2, 3)

    def test_multipolygon_bounds(self):
        geom = {"type": "MultiPolygon", "coordinates": [
            [[[0, 0], [1, 0], [1, 1], [0, 0]]],
            [[[10, -5], [11, -5], [11, 4], [10, -5]]],
        ]}
        assert geometry_bounds(geom) == (0, -5, 11, 4)

    def test_empty_geometry_has_no_bounds(self):
        assert geometry_bounds({"type": "Polygon", "coordinates": []}) is None
        assert geometry_bounds({}) is None

    def test_merge_skips_missing(self):
        assert merge_bounds([(0, 0, 1, 1), None, (-1, 2, 0, 5)]) == (-1, 0, 1, 5)

    def test_merge_nothing(self):
        assert merge_bounds([None]) is None


class TestFitBounds:
    def test_small_area_is_capped_by_max_zoom(self):
        lat, lon, zoom = fit_bounds((10, 10, 10.01, 10.01), 1200, 600, 50, max_zoom=6)
        assert zoom == 6
        assert lon == pytest.approx(10.005)

    def test_single_point_uses_max_zoom(self):
        _, _, zoom = fit_bounds((5, 5, 5, 5), 1200, 600, 50, max_zoom=6)
        assert zoom == 6

    def test_world_extent_zooms_out(self):
        lat, lon, zoom = fit_bounds((-180, -60, 180, 60), 1200, 600, 50, max_zoom=6)
        assert 1.0 < zoom < 1.2
        assert lat == pytest.approx(0, abs=1e-9)
        assert lon == 0

    def test_min_zoom_floor(self):
        _, _, zoom = fit_bounds((-180, -85, 180, 85), 200, 200, 50, max_zoom=6, min_zoom=1)
        assert zoom == 1
