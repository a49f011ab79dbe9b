# web/session.py
import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Iterable, List, Optional, Protocol, Tuple

from boundary_store import BoundaryStore
from config import MULTI_QUERY_DELIMITER
from enricher import Enricher
from models import CountryFacts, FlagMapError, OverlayLayer, Resolution
from renderer import MapCanvas, Renderer
from resolver import Resolver
from utils import split_queries

DATA_NOT_READY_MESSAGE = "지도 데이터가 아직 준비되지 않았습니다. 잠시 후 다시 시도해주세요."


class UserFeedbackPort(Protocol):
    """UI 쪽에서 구현하는 사용자 피드백 인터페이스 (토스트, 로딩 표시)."""

    def notify(self, message: str, is_error: bool = False) -> None:
        ...

    def set_busy(self, busy: bool) -> None:
        ...


@dataclass
class SessionState:
    canvas: MapCanvas = field(default_factory=MapCanvas)
    loading: bool = False
    multi_mode: bool = False
    query_text: str = ""
    started: bool = False


@dataclass(frozen=True)
class Outcome:
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle_all(aws: Iterable[Awaitable[Any]]) -> List[Outcome]:
    """모든 작업이 끝날 때까지 기다리고 작업별 성공/실패를 순서대로 돌려줍니다. 하나가 실패해도 나머지는 계속됩니다."""
    results = await asyncio.gather(*aws, return_exceptions=True)
    return [Outcome(error=r) if isinstance(r, BaseException) else Outcome(value=r) for r in results]


class SearchController:
    def __init__(self, state: SessionState, store: BoundaryStore, resolver: Resolver,
                 enricher: Enricher, feedback: UserFeedbackPort):
        self.state = state
        self.store = store
        self.resolver = resolver
        self.enricher = enricher
        self.feedback = feedback
        self.renderer = Renderer(state.canvas)

    async def _lookup(self, query: str) -> Tuple[Resolution, Optional[CountryFacts]]:
        resolution = await self.resolver.resolve(query)
        facts = None
        if resolution.kind == "country":
            facts = await self.enricher.fetch_facts(resolution.country_id)
        return resolution, facts

    def _render(self, resolution: Resolution, facts: Optional[CountryFacts]) -> OverlayLayer:
        return self.renderer.render(resolution.geometry, facts, resolution.display_name,
                                    country_id=resolution.country_id or "")

    def _report_failure(self, query: str, error: BaseException) -> None:
        if isinstance(error, FlagMapError):
            self.feedback.notify(str(error), is_error=True)
        else:
            print(f"[search] 예상치 못한 오류 ({query}): {error!r}")
            self.feedback.notify(f'"{query}" 검색 중 오류가 발생했습니다.', is_error=True)

    async def submit_search(self, query_text: str) -> List[OverlayLayer]:
        """검색을 실행하고 새로 만든 오버레이 목록을 반환합니다.

        단일 모드는 기존 오버레이를 지우고 검색하며, 다중 모드는 '+'로 나눈
        검색어를 동시에 해석해 오버레이를 누적합니다.
        """
        self.state.query_text = query_text
        text = (query_text or "").strip()
        if not text or self.state.loading:
            return []

        multi = self.state.multi_mode
        if not multi and not self.store.ready:
            self.feedback.notify(DATA_NOT_READY_MESSAGE, is_error=True)
            return []

        queries = split_queries(text, MULTI_QUERY_DELIMITER) if multi else [text]
        if not queries:
            return []

        self.state.loading = True
        self.feedback.set_busy(True)
        produced: List[OverlayLayer] = []
        try:
            if not multi:
                self.renderer.clear()

            outcomes = await settle_all(self._lookup(q) for q in queries)
            for query, outcome in zip(queries, outcomes):
                if not outcome.ok:
                    self._report_failure(query, outcome.error)
                    continue
                resolution, facts = outcome.value
                try:
                    produced.append(self._render(resolution, facts))
                except ValueError as e:
                    self._report_failure(query, e)

            if produced:
                self.state.canvas.fit_to_overlays()
            print(f"[search] 완료: {len(produced)}/{len(queries)}개 위치 표시")
        finally:
            self.state.loading = False
            self.feedback.set_busy(False)
        return produced

    async def start(self, default_query: str) -> None:
        """첫 실행 시 기본 검색어로 한 번 검색합니다."""
        if self.state.started:
            return
        self.state.started = True
        if default_query and self.store.ready:
            await self.submit_search(default_query)

    def toggle_multi_mode(self) -> bool:
        self.state.multi_mode = not self.state.multi_mode
        if not self.state.multi_mode:
            self.renderer.clear()
        self.feedback.notify("다중 위치 검색이 켜졌습니다." if self.state.multi_mode else "다중 위치 검색이 꺼졌습니다.")
        return self.state.multi_mode

    def cycle_basemap(self) -> str:
        name = self.state.canvas.cycle_basemap()
        self.feedback.notify(f"{name} 지도가 활성화되었습니다.")
        return name

    def zoom_in(self) -> float:
        return self.state.canvas.zoom_by(1)

    def zoom_out(self) -> float:
        return self.state.canvas.zoom_by(-1)
