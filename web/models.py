# web/models.py
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


class FlagMapError(Exception):
    """국기 맵에서 발생하는 모든 오류의 기본 클래스."""


class LoadError(FlagMapError):
    """경계 데이터셋을 불러오지 못했을 때."""


class NotFoundError(FlagMapError):
    """경계 데이터셋과 지오코더 모두에서 위치를 찾지 못했을 때."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f'"{query}" 위치를 찾을 수 없습니다.')


class FactsUnavailable(FlagMapError):
    """국가 정보 서비스 응답을 사용할 수 없을 때."""


@dataclass(frozen=True)
class BoundaryRecord:
    id: str  # ISO 3166-1 alpha-3
    display_name: str
    geometry: Dict[str, Any]
    iso_a2: Optional[str] = None


@dataclass(frozen=True)
class GeneralLocation:
    display_name: str
    geometry: Dict[str, Any]


@dataclass(frozen=True)
class CountryFacts:
    common_name: str
    official_name: str
    capital: str
    population: int
    flag_image_url: str
    cca3: str = ""
    flag_width: int = 0  # 0이면 크기를 모름
    flag_height: int = 0


@dataclass(frozen=True)
class Resolution:
    """resolve() 결과. kind는 "country" 또는 "general"."""
    kind: str
    target: Union[BoundaryRecord, GeneralLocation]
    query: str

    @property
    def geometry(self) -> Dict[str, Any]:
        return self.target.geometry

    @property
    def display_name(self) -> str:
        return self.target.display_name

    @property
    def country_id(self) -> Optional[str]:
        if self.kind == "country":
            return self.target.id
        return None


@dataclass(frozen=True)
class PatternDefinition:
    pattern_id: str
    country_id: str
    image_url: str
    width: int
    height: int


@dataclass(frozen=True)
class OverlayLayer:
    layer_id: str
    display_name: str
    geometry: Dict[str, Any]
    border_class: str
    popup_html: str
    pattern_id: Optional[str] = None
    facts: Optional[CountryFacts] = None
