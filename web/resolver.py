# web/resolver.py
from typing import Any, Awaitable, Callable, Optional

import requests

from boundary_store import BoundaryStore
from config import GEOCODER_URL
from http_client import fetch_json_async
from models import GeneralLocation, NotFoundError, Resolution
from utils import normalize_query

_POLYGON_TYPES = {"Polygon", "MultiPolygon"}

Geocoder = Callable[[str], Awaitable[Optional[GeneralLocation]]]


async def geocode(query: str, url: str = GEOCODER_URL,
                  fetch: Callable[..., Awaitable[Any]] = fetch_json_async) -> Optional[GeneralLocation]:
    """일반 지오코딩 검색. 경계 geometry가 있는 첫 번째 결과만 사용합니다."""
    params = {"q": query, "format": "jsonv2", "limit": 1, "polygon_geojson": 1}
    try:
        results = await fetch(url, params)
    except (requests.RequestException, ValueError) as e:
        print(f"[resolver] 지오코딩 요청 실패 ({query}): {e}")
        return None

    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        return None
    best = results[0]
    geometry = best.get("geojson")
    if not isinstance(geometry, dict) or geometry.get("type") not in _POLYGON_TYPES:
        return None
    return GeneralLocation(display_name=best.get("display_name") or query, geometry=geometry)


class Resolver:
    """검색어를 국가 경계(country) 또는 일반 위치(general)로 해석합니다."""

    def __init__(self, store: BoundaryStore, geocoder: Geocoder = geocode):
        self._store = store
        self._geocoder = geocoder

    async def resolve(self, query: str) -> Resolution:
        normalized = normalize_query(query)
        if not normalized:
            raise NotFoundError(query)

        # 1. 미리 불러온 경계 데이터에서 이름/코드 완전 일치
        record = self._store.find_by_name_or_id(normalized)
        if record is not None:
            return Resolution(kind="country", target=record, query=query)

        # 2. 일반 지오코딩으로 대체
        location = await self._geocoder(query.strip())
        if location is None:
            print(f"[resolver] 위치를 찾지 못함: {query}")
            raise NotFoundError(query)
        return Resolution(kind="general", target=location, query=query)
