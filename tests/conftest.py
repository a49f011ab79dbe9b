"""
Root conftest.py — sys.path and shared fixtures.

The app modules live flat in web/ and import each other by bare name,
so web/ goes on sys.path. Network services are replaced with fakes.
"""

import os
import sys

import pytest

WEB_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "web")
if WEB_DIR not in sys.path:
    sys.path.insert(0, WEB_DIR)

from boundary_store import BoundaryStore  # noqa: E402
from models import CountryFacts, GeneralLocation  # noqa: E402


def square(lon, lat, size=1.0):
    return {
        "type": "Polygon",
        "coordinates": [[[lon, lat], [lon + size, lat], [lon + size, lat + size], [lon, lat + size], [lon, lat]]],
    }


@pytest.fixture
def sample_geojson():
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature",
             "properties": {"name": "Iran", "ISO3166-1-Alpha-3": "IRN", "ISO3166-1-Alpha-2": "IR"},
             "geometry": square(50, 30, 5)},
            {"type": "Feature",
             "properties": {"ADMIN": "Germany", "ISO_A3": "DEU", "ISO_A2": "DE"},
             "geometry": {"type": "MultiPolygon", "coordinates": [square(6, 47, 8)["coordinates"]]}},
            # 코드가 -99인 feature는 이름으로 코드를 보정
            {"type": "Feature",
             "properties": {"ADMIN": "France", "ISO_A3": "-99", "ISO_A2": "-99"},
             "geometry": square(0, 43, 6)},
            {"type": "Feature", "properties": {"name": "Somewhere"}, "geometry": {"type": "Point", "coordinates": [1, 2]}},
            {"type": "Feature", "properties": {"ISO_A3": "XXA"}, "geometry": square(0, 0)},
        ],
    }


@pytest.fixture
def store(sample_geojson):
    return BoundaryStore.from_geojson(sample_geojson)


@pytest.fixture
def iran_facts():
    return CountryFacts(
        common_name="Iran",
        official_name="Islamic Republic of Iran",
        capital="Tehran",
        population=83992953,
        flag_image_url="https://flagcdn.com/w320/ir.png",
        cca3="IRN",
    )


@pytest.fixture
def germany_facts():
    return CountryFacts(
        common_name="Germany",
        official_name="Federal Republic of Germany",
        capital="Berlin",
        population=83240525,
        flag_image_url="https://flagcdn.com/w320/de.png",
        cca3="DEU",
    )


class RecordingFeedback:
    """UserFeedbackPort fake that records every call."""

    def __init__(self):
        self.messages = []
        self.busy_calls = []

    def notify(self, message, is_error=False):
        self.messages.append((message, is_error))

    def set_busy(self, busy):
        self.busy_calls.append(busy)

    @property
    def errors(self):
        return [m for m, is_error in self.messages if is_error]


class FakeEnricher:
    def __init__(self, facts_by_id):
        self.facts_by_id = facts_by_id
        self.calls = []

    async def fetch_facts(self, country_id):
        self.calls.append(country_id)
        return self.facts_by_id.get(country_id)


@pytest.fixture
def feedback():
    return RecordingFeedback()


@pytest.fixture
def enricher(iran_facts, germany_facts):
    return FakeEnricher({"IRN": iran_facts, "DEU": germany_facts})


@pytest.fixture
def make_geocoder():
    """Factory fixture: async geocoder answering from a {query_lower: GeneralLocation} dict."""
    def _make(known=None):
        known = known or {}
        calls = []

        async def _geocode(query):
            calls.append(query)
            return known.get(query.lower())

        _geocode.calls = calls
        return _geocode
    return _make


@pytest.fixture
def tehran_location():
    return GeneralLocation(display_name="Tehran, Iran", geometry=square(51.2, 35.5, 0.4))
