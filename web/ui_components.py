# web/ui_components.py
import altair as alt
import pandas as pd
import streamlit as st

from boundary_store import BoundaryStore
from renderer import MapCanvas
from utils import format_population, get_flag_emoji


def setup_page(title_emoji: str, title_text: str):
    """페이지 기본 설정 및 전역 CSS를 적용합니다."""
    st.set_page_config(
        page_title=f"{title_text} — Flag Map",
        layout="wide",
        page_icon=title_emoji,
    )
    # 전역 CSS (다크모드, 카드 스타일 등)
    st.markdown("""
        <style>
        body { font-family: 'sans-serif'; background-color: #0e1117; color: #fafafa; }

        /* 국가 카드 스타일 */
        .country-card { background-color: #1c1f26; padding: 12px 16px; border-radius: 12px; box-shadow: 0 0 6px rgba(0,0,0,0.5); margin-bottom: 8px; }
        .country-card b { color: #00ffea; }

        .footer { text-align: center; color: #888; font-size: 12px; margin-top: 40px; padding-bottom: 20px; }
        </style>
    """, unsafe_allow_html=True)
    st.title(f"{title_emoji} {title_text}")


class StreamlitFeedback:
    """st.toast와 placeholder로 구현한 사용자 피드백 포트."""

    def __init__(self, busy_placeholder):
        self._busy = busy_placeholder

    def notify(self, message: str, is_error: bool = False) -> None:
        st.toast(message, icon="⚠️" if is_error else "✅")

    def set_busy(self, busy: bool) -> None:
        if busy:
            self._busy.info("⏳ 위치를 검색하는 중입니다...")
        else:
            self._busy.empty()


LOAD_ERROR_SHOWN_KEY = "load_error_shown"


def reset_boundary_data(session_state) -> None:
    """경계 데이터 캐시를 비우고, 다시 실패하면 토스트가 또 뜨도록 표시 기록도 지웁니다."""
    st.cache_resource.clear()
    session_state.pop(LOAD_ERROR_SHOWN_KEY, None)


def display_sidebar(multi_mode: bool) -> dict:
    """지도 조작 사이드바를 그리고 이번 rerun에서 눌린 동작을 반환합니다."""
    sb = st.sidebar
    sb.header("🗺️ 지도 조작")

    actions = {}
    label = "➖ 다중 검색 끄기" if multi_mode else "➕ 다중 검색 켜기"
    actions["toggle_multi"] = sb.button(label, use_container_width=True)
    c1, c2 = sb.columns(2)
    actions["zoom_in"] = c1.button("🔍 확대", use_container_width=True)
    actions["zoom_out"] = c2.button("🔎 축소", use_container_width=True)
    actions["cycle_basemap"] = sb.button("🌐 배경 지도 바꾸기", use_container_width=True)

    sb.markdown("---")
    if sb.button("♻️ 경계 데이터 다시 불러오기"):
        reset_boundary_data(st.session_state)
        st.toast("경계 데이터 캐시가 초기화되었습니다.", icon="✅")

    if multi_mode:
        sb.caption("여러 위치는 '+'로 구분합니다. (예: Iran + Germany)")
    return actions


def overlays_to_frame(canvas: MapCanvas, store: BoundaryStore) -> pd.DataFrame:
    """국가 정보가 있는 오버레이를 표 형태로 모읍니다."""
    cols = ["flag", "country", "capital", "population"]
    rows = []
    for layer in canvas.layers.values():
        facts = layer.facts
        if facts is None:
            continue
        record = store.find_by_name_or_id(facts.cca3) if facts.cca3 else None
        rows.append({
            "flag": get_flag_emoji(record.iso_a2 if record else ""),
            "country": facts.common_name,
            "capital": facts.capital,
            "population": facts.population,
        })
    return pd.DataFrame(rows, columns=cols)


def display_dashboard(canvas: MapCanvas, store: BoundaryStore):
    """지도에 표시된 국가들의 요약 정보를 보여줍니다."""
    st.markdown("---")
    st.subheader("📊 표시된 국가")

    df = overlays_to_frame(canvas, store)
    if df.empty:
        st.info("국가 정보가 있는 오버레이가 없습니다.")
        return

    table = df.assign(population=df["population"].map(format_population))
    st.dataframe(table, hide_index=True, use_container_width=True)

    if len(df) > 1:
        chart = alt.Chart(df).mark_bar().encode(
            x=alt.X("population:Q", title="인구"),
            y=alt.Y("country:N", title="국가", sort="-x"),
            tooltip=["country", "capital", "population"],
        ).properties(height=40 * len(df))
        st.altair_chart(chart, use_container_width=True)


def display_footer():
    """페이지 하단 공통 푸터를 표시합니다."""
    st.markdown("""
        <div class="footer">
        Flag Map • Boundaries: datasets/geo-countries · Geocoding: OpenStreetMap Nominatim · Facts: REST Countries <br>
        Built with Streamlit & Pydeck
        </div>
    """, unsafe_allow_html=True)
