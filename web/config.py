# web/config.py
import os

from dotenv import load_dotenv

load_dotenv()

# 외부 서비스 주소
BOUNDARIES_URL = os.getenv(
    "FLAGMAP_BOUNDARIES_URL",
    "https://raw.githubusercontent.com/datasets/geo-countries/master/data/countries.geojson",
)
GEOCODER_URL = os.getenv("FLAGMAP_GEOCODER_URL", "https://nominatim.openstreetmap.org/search")
COUNTRY_INFO_URL = os.getenv("FLAGMAP_COUNTRY_INFO_URL", "https://restcountries.com/v3.1")
COUNTRY_INFO_FIELDS = "name,capital,population,flags,cca3"

# HTTP 설정 (Nominatim은 User-Agent 헤더가 없으면 요청을 거절합니다)
HTTP_TIMEOUT = float(os.getenv("FLAGMAP_HTTP_TIMEOUT", "15"))
HTTP_USER_AGENT = os.getenv("FLAGMAP_USER_AGENT", "flag-map/0.1 (streamlit)")

# 검색 설정
DEFAULT_QUERY = os.getenv("FLAGMAP_DEFAULT_QUERY", "Iran")  # 첫 로드 시 자동 검색
MULTI_QUERY_DELIMITER = "+"

# 지도 기본값
INITIAL_LAT, INITIAL_LON, INITIAL_ZOOM = 30.0, 0.0, 2.0
MIN_ZOOM, MAX_ZOOM = 1.0, 18.0
FIT_PADDING_PX = 50
FIT_MAX_ZOOM = 6.0
MAP_WIDTH_PX, MAP_HEIGHT_PX = 1200, 600  # 화면 맞춤 계산에 쓰는 지도 크기

# 배경 지도 (이름, pydeck map_provider, map_style)
MAPBOX_API_KEY = os.getenv("MAPBOX_API_KEY", "")
BASEMAPS = [
    ("다크", "carto", "dark"),
    ("라이트", "carto", "light"),
    ("도로", "carto", "road"),
    ("라벨 없는 다크", "carto", "dark_no_labels"),
]
if MAPBOX_API_KEY:  # 위성 지도는 Mapbox 키가 있을 때만
    BASEMAPS.append(("위성", "mapbox", "satellite"))

# 경계선 스타일
NEON_BORDER = "neon-border"
SIMPLE_BORDER = "simple-border"
BORDER_STYLES = {
    NEON_BORDER: {"line_color": [0, 255, 234, 255], "line_width": 3, "fill_color": [0, 255, 234, 60]},
    SIMPLE_BORDER: {"line_color": [150, 150, 150, 255], "line_width": 1, "fill_color": [150, 150, 150, 40]},
}

# 국기 패턴 기본 크기 (restcountries png 국기는 가로 320px, 실제 크기는 png 헤더에서 읽음)
FLAG_PATTERN_PREFIX = "flag-pattern-"
FLAG_PATTERN_WIDTH, FLAG_PATTERN_HEIGHT = 320, 213
