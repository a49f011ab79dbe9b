# web/utils.py
import math
from typing import Iterable, Iterator, List, Optional, Tuple

Bounds = Tuple[float, float, float, float]  # (min_lon, min_lat, max_lon, max_lat)

_MAX_MERCATOR_LAT = 85.0511
_DECK_TILE_SIZE = 512  # deck.gl 기준 zoom 0의 세계 폭(px)


def get_flag_emoji(country_code: str) -> str:
    """ISO 3166-1 alpha-2 코드를 국기 이모지로 변환합니다."""
    if not isinstance(country_code, str) or len(country_code) != 2:
        return "🏳️"  # 알 수 없는 국가

    # 유니코드 지역 인디케이터 심볼 (RIS) 기반
    # 'US' -> 'U' + 'S' -> U+1F1FA U+1F1F8 -> 🇺🇸
    base = 0x1F1E6
    first = ord(country_code[0].upper())
    second = ord(country_code[1].upper())

    if not ('A' <= chr(first) <= 'Z' and 'A' <= chr(second) <= 'Z'):
        return "🏳️"

    return chr(base + first - ord('A')) + chr(base + second - ord('A'))


def normalize_query(query: str) -> str:
    """검색어 비교용 정규화 (앞뒤 공백 제거 + 소문자)."""
    return (query or "").strip().lower()


def split_queries(text: str, delimiter: str = "+") -> List[str]:
    """다중 검색어를 구분자로 나누고 빈 조각은 버립니다. 표시용으로 대소문자는 유지합니다."""
    return [part.strip() for part in (text or "").split(delimiter) if part.strip()]


def format_population(population: int) -> str:
    """천 단위 구분 기호를 붙여 인구를 표시합니다. (예: 83240525 -> 83,240,525)"""
    return f"{int(population):,}"


def iter_coordinates(geometry: dict) -> Iterator[Tuple[float, float]]:
    """GeoJSON geometry 안의 모든 (lon, lat) 좌표를 순회합니다."""
    if not geometry:
        return
    if geometry.get("type") == "GeometryCollection":
        for child in geometry.get("geometries", []):
            yield from iter_coordinates(child)
        return

    def _walk(coords):
        if coords and isinstance(coords[0], (int, float)):
            yield float(coords[0]), float(coords[1])
            return
        for c in coords or []:
            yield from _walk(c)

    yield from _walk(geometry.get("coordinates"))


def geometry_bounds(geometry: dict) -> Optional[Bounds]:
    """geometry의 경계 상자를 구합니다. 좌표가 없으면 None."""
    coords = list(iter_coordinates(geometry))
    if not coords:
        return None
    lons = [c[0] for c in coords]
    lats = [c[1] for c in coords]
    return min(lons), min(lats), max(lons), max(lats)


def merge_bounds(bounds_list: Iterable[Optional[Bounds]]) -> Optional[Bounds]:
    """여러 경계 상자를 하나로 합칩니다."""
    valid = [b for b in bounds_list if b]
    if not valid:
        return None
    return (
        min(b[0] for b in valid),
        min(b[1] for b in valid),
        max(b[2] for b in valid),
        max(b[3] for b in valid),
    )


def _lat_to_y(lat: float) -> float:
    lat = max(-_MAX_MERCATOR_LAT, min(_MAX_MERCATOR_LAT, lat))
    return math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))


def _y_to_lat(y: float) -> float:
    return math.degrees(2 * math.atan(math.exp(y)) - math.pi / 2)


def fit_bounds(bounds: Bounds, width: int, height: int, padding: int,
               max_zoom: float, min_zoom: float = 0.0) -> Tuple[float, float, float]:
    """경계 상자가 화면에 모두 보이도록 (lat, lon, zoom)을 계산합니다. zoom은 max_zoom을 넘지 않습니다."""
    min_lon, min_lat, max_lon, max_lat = bounds
    y_min, y_max = _lat_to_y(min_lat), _lat_to_y(max_lat)
    center_lat = _y_to_lat((y_min + y_max) / 2)
    center_lon = (min_lon + max_lon) / 2

    usable_w = max(width - 2 * padding, 1)
    usable_h = max(height - 2 * padding, 1)
    lon_frac = (max_lon - min_lon) / 360.0
    y_frac = (y_max - y_min) / (2 * math.pi)

    zooms = []
    if lon_frac > 0:
        zooms.append(math.log2(usable_w / (_DECK_TILE_SIZE * lon_frac)))
    if y_frac > 0:
        zooms.append(math.log2(usable_h / (_DECK_TILE_SIZE * y_frac)))
    zoom = min(zooms) if zooms else max_zoom  # 점 하나면 최대 줌

    zoom = max(min_zoom, min(max_zoom, zoom))
    return center_lat, center_lon, zoom
