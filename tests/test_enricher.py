"""
Enricher tests: payload parsing and absent-on-failure policy.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest
import requests

from enricher import Enricher, parse_country_facts
from models import FactsUnavailable

IRAN_PAYLOAD = {
    "name": {"common": "Iran", "official": "Islamic Republic of Iran"},
    "capital": ["Tehran"],
    "population": 83992953,
    "flags": {"png": "https://flagcdn.com/w320/ir.png", "svg": "https://flagcdn.com/ir.svg"},
    "cca3": "IRN",
}


async def no_size(url):
    return None


class TestParse:
    def test_dict_payload(self):
        facts = parse_country_facts(IRAN_PAYLOAD)
        assert facts.common_name == "Iran"
        assert facts.official_name == "Islamic Republic of Iran"
        assert facts.capital == "Tehran"
        assert facts.population == 83992953
        assert facts.flag_image_url == "https://flagcdn.com/w320/ir.png"
        assert facts.cca3 == "IRN"

    def test_list_payload_uses_first(self):
        other = dict(IRAN_PAYLOAD, name={"common": "Other"})
        assert parse_country_facts([IRAN_PAYLOAD, other]).common_name == "Iran"

    def test_svg_when_no_png(self):
        payload = dict(IRAN_PAYLOAD, flags={"svg": "https://flagcdn.com/ir.svg"})
        assert parse_country_facts(payload).flag_image_url == "https://flagcdn.com/ir.svg"

    def test_no_capital(self):
        payload = dict(IRAN_PAYLOAD, capital=[])
        assert parse_country_facts(payload).capital == "-"

    @pytest.mark.parametrize("payload", [None, [], "oops", {"capital": ["X"]}, dict(IRAN_PAYLOAD, population="many")])
    def test_malformed(self, payload):
        with pytest.raises(FactsUnavailable):
            parse_country_facts(payload)


class TestFetchFacts:
    def test_success(self):
        fetch = AsyncMock(return_value=IRAN_PAYLOAD)
        enricher = Enricher(base_url="https://rc.test/v3.1/", fetch=fetch, fetch_size=no_size)
        facts = asyncio.run(enricher.fetch_facts("IRN"))
        assert facts.capital == "Tehran"
        url, params = fetch.await_args.args
        assert url == "https://rc.test/v3.1/alpha/IRN"
        assert params == {"fields": "name,capital,population,flags,cca3"}

    @pytest.mark.parametrize("error", [requests.HTTPError("404"), requests.ConnectionError("down"), ValueError("bad json")])
    def test_failures_are_absent(self, error):
        fetch = AsyncMock(side_effect=error)
        assert asyncio.run(Enricher(fetch=fetch, fetch_size=no_size).fetch_facts("IRN")) is None

    def test_malformed_body_is_absent(self):
        fetch = AsyncMock(return_value={"status": 404, "message": "Not Found"})
        assert asyncio.run(Enricher(fetch=fetch, fetch_size=no_size).fetch_facts("IRN")) is None

    def test_every_call_refetches(self):
        fetch = AsyncMock(return_value=IRAN_PAYLOAD)
        enricher = Enricher(fetch=fetch, fetch_size=no_size)
        asyncio.run(enricher.fetch_facts("IRN"))
        asyncio.run(enricher.fetch_facts("IRN"))
        assert fetch.await_count == 2

    def test_empty_id_skips_request(self):
        fetch = AsyncMock()
        assert asyncio.run(Enricher(fetch=fetch, fetch_size=no_size).fetch_facts("")) is None
        fetch.assert_not_awaited()


class TestFlagSize:
    def test_png_size_is_attached(self):
        fetch_size = AsyncMock(return_value=(320, 320))
        enricher = Enricher(fetch=AsyncMock(return_value=IRAN_PAYLOAD), fetch_size=fetch_size)
        facts = asyncio.run(enricher.fetch_facts("IRN"))
        assert (facts.flag_width, facts.flag_height) == (320, 320)
        fetch_size.assert_awaited_once_with("https://flagcdn.com/w320/ir.png")

    def test_size_failure_keeps_facts(self):
        fetch_size = AsyncMock(side_effect=requests.ConnectionError("down"))
        enricher = Enricher(fetch=AsyncMock(return_value=IRAN_PAYLOAD), fetch_size=fetch_size)
        facts = asyncio.run(enricher.fetch_facts("IRN"))
        assert facts.capital == "Tehran"
        assert (facts.flag_width, facts.flag_height) == (0, 0)

    def test_svg_flag_skips_size_lookup(self):
        payload = dict(IRAN_PAYLOAD, flags={"svg": "https://flagcdn.com/ir.svg"})
        fetch_size = AsyncMock()
        enricher = Enricher(fetch=AsyncMock(return_value=payload), fetch_size=fetch_size)
        assert asyncio.run(enricher.fetch_facts("IRN")).flag_width == 0
        fetch_size.assert_not_awaited()
