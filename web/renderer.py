# web/renderer.py
import html
import re
from typing import Dict, List, Optional, Tuple

from config import (BASEMAPS, FIT_MAX_ZOOM, FIT_PADDING_PX, FLAG_PATTERN_HEIGHT, FLAG_PATTERN_PREFIX,
                    FLAG_PATTERN_WIDTH, INITIAL_LAT, INITIAL_LON, INITIAL_ZOOM, MAP_HEIGHT_PX, MAP_WIDTH_PX,
                    MAX_ZOOM, MIN_ZOOM, NEON_BORDER, SIMPLE_BORDER)
from models import CountryFacts, OverlayLayer, PatternDefinition
from utils import fit_bounds, format_population, geometry_bounds, merge_bounds


class MapCanvas:
    """지도 상태 모델: 활성 오버레이, 패턴 정의, 배경 지도, 현재 시점.

    pydeck Deck은 매 rerun마다 이 상태로부터 다시 만들어집니다 (map_view.build_deck).
    """

    def __init__(self):
        self.layers: Dict[str, OverlayLayer] = {}
        self.patterns: Dict[str, PatternDefinition] = {}
        self.basemap_index = 0
        self.view: Tuple[float, float, float] = (INITIAL_LAT, INITIAL_LON, INITIAL_ZOOM)
        self._layer_seq = 0

    def next_layer_id(self) -> str:
        self._layer_seq += 1
        return f"overlay-{self._layer_seq}"

    @property
    def basemap(self) -> Tuple[str, str, str]:
        return BASEMAPS[self.basemap_index]

    def cycle_basemap(self) -> str:
        """다음 배경 지도로 바꾸고 그 이름을 반환합니다."""
        self.basemap_index = (self.basemap_index + 1) % len(BASEMAPS)
        return self.basemap[0]

    def zoom_by(self, delta: float) -> float:
        lat, lon, zoom = self.view
        zoom = max(MIN_ZOOM, min(MAX_ZOOM, zoom + delta))
        self.view = (lat, lon, zoom)
        return zoom

    def fit_to_overlays(self) -> bool:
        """모든 오버레이가 보이도록 시점을 맞춥니다. 오버레이가 없으면 아무것도 바꾸지 않습니다."""
        bounds = merge_bounds(geometry_bounds(layer.geometry) for layer in self.layers.values())
        if bounds is None:
            return False
        self.view = fit_bounds(bounds, MAP_WIDTH_PX, MAP_HEIGHT_PX, FIT_PADDING_PX,
                               max_zoom=FIT_MAX_ZOOM, min_zoom=MIN_ZOOM)
        return True


def build_popup(facts: Optional[CountryFacts], display_name: str) -> str:
    if facts is None:
        return html.escape(display_name)
    return (
        f"<b>{html.escape(facts.common_name)} ({html.escape(facts.official_name)})</b><br>"
        f"수도: {html.escape(facts.capital)}<br>"
        f"인구: {format_population(facts.population)} 명"
    )


def _pattern_key(country_id: str) -> str:
    # SVG/deck id에 쓸 수 없는 문자는 제거
    return re.sub(r"[^A-Za-z0-9_-]", "", country_id or "").upper() or "LOC"


class Renderer:
    def __init__(self, canvas: MapCanvas):
        self.canvas = canvas

    def _allocate_pattern_id(self, country_id: str) -> str:
        base = f"{FLAG_PATTERN_PREFIX}{_pattern_key(country_id)}"
        pattern_id, n = base, 1
        while pattern_id in self.canvas.patterns:
            n += 1
            pattern_id = f"{base}-{n}"
        return pattern_id

    def render(self, geometry: dict, facts: Optional[CountryFacts], display_name: str,
               country_id: str = "") -> OverlayLayer:
        """경계 오버레이를 만들어 지도에 바로 추가합니다.

        국기 이미지가 있으면 패턴 정의를 먼저 등록한 뒤 레이어를 추가합니다.
        레이어 생성이 실패하면 등록한 패턴도 되돌립니다.
        """
        pattern = None
        if facts is not None and facts.flag_image_url:
            country_id = country_id or facts.cca3 or display_name
            # 크기를 모르면 3:2 기본값
            pattern = PatternDefinition(
                self._allocate_pattern_id(country_id), country_id, facts.flag_image_url,
                width=facts.flag_width or FLAG_PATTERN_WIDTH,
                height=facts.flag_height or FLAG_PATTERN_HEIGHT,
            )
            self.canvas.patterns[pattern.pattern_id] = pattern

        try:
            if geometry_bounds(geometry) is None:
                raise ValueError(f"{display_name}: geometry에 좌표가 없습니다.")
            layer = OverlayLayer(
                layer_id=self.canvas.next_layer_id(),
                display_name=display_name,
                geometry=geometry,
                border_class=NEON_BORDER if pattern else SIMPLE_BORDER,
                popup_html=build_popup(facts, display_name),
                pattern_id=pattern.pattern_id if pattern else None,
                facts=facts,
            )
        except Exception:
            if pattern is not None:
                self.canvas.patterns.pop(pattern.pattern_id, None)
            raise

        self.canvas.layers[layer.layer_id] = layer
        print(f"[render] 오버레이 추가: {display_name} ({layer.border_class})")
        return layer

    def clear(self) -> List[OverlayLayer]:
        """모든 오버레이와 패턴 정의를 함께 제거합니다. 이미 비어 있으면 아무 일도 없습니다."""
        removed = list(self.canvas.layers.values())
        self.canvas.layers = {}
        self.canvas.patterns = {}
        return removed
