# web/enricher.py
import dataclasses
from typing import Any, Awaitable, Callable, Optional, Tuple
from urllib.parse import quote

import requests

from config import COUNTRY_INFO_FIELDS, COUNTRY_INFO_URL
from http_client import fetch_image_size_async, fetch_json_async
from models import CountryFacts, FactsUnavailable


def parse_country_facts(payload: Any) -> CountryFacts:
    """REST Countries 응답을 CountryFacts로 변환합니다. 형식이 맞지 않으면 FactsUnavailable."""
    if isinstance(payload, list):
        # 여러 개가 오면 첫 번째 결과 사용
        payload = payload[0] if payload else None
    if not isinstance(payload, dict):
        raise FactsUnavailable("국가 정보 응답이 비어 있습니다.")

    name = payload.get("name")
    if not isinstance(name, dict) or not name.get("common"):
        raise FactsUnavailable("국가 이름이 없습니다.")

    capital = payload.get("capital") or []
    if isinstance(capital, str):
        capital = [capital]
    flags = payload.get("flags") or {}
    if not isinstance(flags, dict):
        flags = {}

    try:
        population = int(payload.get("population") or 0)
    except (TypeError, ValueError) as e:
        raise FactsUnavailable(f"인구 값이 올바르지 않습니다: {payload.get('population')!r}") from e

    return CountryFacts(
        common_name=name["common"],
        official_name=name.get("official") or name["common"],
        capital=capital[0] if capital else "-",
        population=population,
        # fill 패턴은 래스터 이미지가 필요하므로 png 우선
        flag_image_url=flags.get("png") or flags.get("svg") or "",
        cca3=payload.get("cca3") or "",
    )


class Enricher:
    """국가 코드로 수도, 인구, 국기 등의 정보를 가져옵니다. 실패하면 None (오류 아님)."""

    def __init__(self, base_url: str = COUNTRY_INFO_URL,
                 fetch: Callable[..., Awaitable[Any]] = fetch_json_async,
                 fetch_size: Callable[[str], Awaitable[Optional[Tuple[int, int]]]] = fetch_image_size_async):
        self._base_url = base_url.rstrip("/")
        self._fetch = fetch
        self._fetch_size = fetch_size

    async def fetch_facts(self, country_id: str) -> Optional[CountryFacts]:
        if not country_id:
            return None
        url = f"{self._base_url}/alpha/{quote(country_id)}"
        try:
            payload = await self._fetch(url, {"fields": COUNTRY_INFO_FIELDS})
            facts = parse_country_facts(payload)
        except (requests.RequestException, ValueError, FactsUnavailable) as e:
            print(f"[enricher] 국가 정보 없음 ({country_id}): {e}")
            return None
        return await self._with_flag_size(facts)

    async def _with_flag_size(self, facts: CountryFacts) -> CountryFacts:
        """국기 png 크기를 채웁니다. 실패해도 facts는 그대로 사용합니다."""
        if not facts.flag_image_url.lower().endswith(".png"):
            return facts
        try:
            size = await self._fetch_size(facts.flag_image_url)
        except requests.RequestException as e:
            print(f"[enricher] 국기 크기 확인 실패 ({facts.flag_image_url}): {e}")
            return facts
        if not size:
            return facts
        return dataclasses.replace(facts, flag_width=size[0], flag_height=size[1])
