# web/boundary_store.py
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional

import pycountry  # 국가 코드 보정을 위해 import
import requests

from config import BOUNDARIES_URL
from http_client import fetch_json
from models import BoundaryRecord, LoadError
from utils import normalize_query

# 데이터셋 버전마다 속성 이름이 달라서 후보를 순서대로 확인합니다.
_CODE_KEYS = ("ISO3166-1-Alpha-3", "ISO_A3", "iso_a3", "ADM0_A3", "id")
_CODE2_KEYS = ("ISO3166-1-Alpha-2", "ISO_A2", "iso_a2")
_NAME_KEYS = ("name", "ADMIN", "NAME", "name_long")
_POLYGON_TYPES = {"Polygon", "MultiPolygon"}


@lru_cache(maxsize=512)  # 같은 국가 이름은 한 번만 조회
def get_country_codes(country_name: str) -> tuple:
    """국가 이름으로 (alpha-3, alpha-2) 코드를 찾습니다. 못 찾으면 ("", "")."""
    if not country_name or not isinstance(country_name, str):
        return "", ""
    try:
        country_obj = pycountry.countries.lookup(country_name)
        return country_obj.alpha_3, country_obj.alpha_2
    except LookupError:
        # 라이브러리에서 국가를 찾지 못한 경우
        return "", ""


def _valid_code(value: Any, length: int) -> str:
    if isinstance(value, str) and len(value) == length and value.isalpha():
        return value.upper()
    return ""  # "-99" 같은 값은 버림


def _first(props: Dict[str, Any], keys) -> Any:
    for key in keys:
        if props.get(key) not in (None, ""):
            return props[key]
    return None


def record_from_feature(feature: Dict[str, Any]) -> Optional[BoundaryRecord]:
    """GeoJSON feature 하나를 BoundaryRecord로 변환합니다. 쓸 수 없는 feature는 None."""
    if not isinstance(feature, dict):
        return None
    geometry = feature.get("geometry") or {}
    if geometry.get("type") not in _POLYGON_TYPES:
        return None
    props = feature.get("properties") or {}
    name = _first(props, _NAME_KEYS)
    if not isinstance(name, str) or not name.strip():
        return None

    code = _valid_code(feature.get("id"), 3) or _valid_code(_first(props, _CODE_KEYS), 3)
    code2 = _valid_code(_first(props, _CODE2_KEYS), 2)
    if not code or not code2:
        found3, found2 = get_country_codes(name.strip())
        code = code or found3
        code2 = code2 or found2
    if not code:
        return None

    return BoundaryRecord(id=code, display_name=name.strip(), geometry=geometry, iso_a2=code2 or None)


class BoundaryStore:
    """국가 경계 데이터를 한 번 불러와 메모리에 들고 있는 저장소.

    검색은 표시 이름 또는 3글자 코드에 대한 대소문자 무시 완전 일치만 지원합니다.
    """

    def __init__(self, url: str = BOUNDARIES_URL, fetch: Callable[[str], Any] = fetch_json):
        self._url = url
        self._fetch = fetch
        self._records: List[BoundaryRecord] = []
        self._by_key: Dict[str, BoundaryRecord] = {}
        self._ready = False

    @classmethod
    def from_geojson(cls, payload: Dict[str, Any]) -> "BoundaryStore":
        store = cls()
        store._index(payload)
        return store

    @property
    def ready(self) -> bool:
        return self._ready

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> None:
        """경계 데이터셋을 내려받아 색인합니다. 실패하면 LoadError."""
        try:
            payload = self._fetch(self._url)
        except (requests.RequestException, ValueError) as e:
            print(f"[boundary] 경계 데이터 로드 실패: {e}")
            raise LoadError(f"경계 데이터를 불러오지 못했습니다: {e}") from e
        self._index(payload)
        print(f"[boundary] 국가 경계 {len(self._records)}개를 메모리에 로드했습니다.")

    def _index(self, payload: Any) -> None:
        if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
            raise LoadError("경계 데이터 형식이 올바르지 않습니다 (FeatureCollection 아님).")

        records, by_key = [], {}
        for feature in payload["features"]:
            record = record_from_feature(feature)
            if record is None:
                continue
            records.append(record)
            # 먼저 나온 레코드가 우선
            by_key.setdefault(normalize_query(record.display_name), record)
            by_key.setdefault(record.id.lower(), record)

        self._records, self._by_key = records, by_key
        self._ready = True

    def find_by_name_or_id(self, query: str) -> Optional[BoundaryRecord]:
        if not self._ready:
            return None
        key = normalize_query(query)
        if not key:
            return None
        return self._by_key.get(key)
