# web/_국기_검색_맵.py
import asyncio

import streamlit as st

# 공용 모듈 및 함수 import
from boundary_store import BoundaryStore
from config import DEFAULT_QUERY
from enricher import Enricher
from map_view import build_deck
from models import LoadError
from resolver import Resolver
from session import SearchController, SessionState
from ui_components import (LOAD_ERROR_SHOWN_KEY, StreamlitFeedback, display_dashboard, display_footer,
                           display_sidebar, setup_page)


@st.cache_resource(show_spinner="🌍 국가 경계 데이터를 불러오는 중...")
def load_boundary_store():
    """국가 경계 데이터를 앱 전체에서 한 번만 불러옵니다. 실패해도 빈 저장소를 돌려줍니다."""
    store = BoundaryStore()
    try:
        store.load()
    except LoadError as e:
        print(f"[boundary] {e}")
    return store


def get_session_state() -> SessionState:
    if "flagmap" not in st.session_state:
        st.session_state.flagmap = SessionState()
    return st.session_state.flagmap


# 메인 실행 로직
def main():
    setup_page("🚩", "국기 검색 맵")
    st.markdown(
        '<p style="color:gray; font-size:14px; text-align:right;">'
        "국가 이름이나 3글자 코드(예: IRN)를 입력하면 국경과 국기를 지도에 표시합니다.<br>"
        "국가가 아닌 지명은 OpenStreetMap 지오코딩으로 찾습니다.</p>",
        unsafe_allow_html=True,
    )

    store = load_boundary_store()
    state = get_session_state()

    busy_placeholder = st.empty()
    feedback = StreamlitFeedback(busy_placeholder)
    controller = SearchController(state, store, Resolver(store), Enricher(), feedback)

    if not store.ready and not st.session_state.get(LOAD_ERROR_SHOWN_KEY):
        feedback.notify("국가 경계 데이터를 불러오지 못했습니다.", is_error=True)
        st.session_state[LOAD_ERROR_SHOWN_KEY] = True

    # 1. 사이드바 조작 처리 (지도를 그리기 전에 상태를 바꿈)
    actions = display_sidebar(state.multi_mode)
    if actions["toggle_multi"]:
        controller.toggle_multi_mode()
        st.rerun()  # 버튼 라벨 갱신
    if actions["zoom_in"]:
        controller.zoom_in()
    if actions["zoom_out"]:
        controller.zoom_out()
    if actions["cycle_basemap"]:
        controller.cycle_basemap()

    # 2. 첫 실행 시 기본 검색
    if "query_input" not in st.session_state:
        st.session_state.query_input = DEFAULT_QUERY
    asyncio.run(controller.start(DEFAULT_QUERY))

    # 3. 검색창 (Enter 또는 버튼으로 제출)
    placeholder = "Iran + Germany + Japan" if state.multi_mode else "Iran"
    with st.form("search_form", clear_on_submit=False):
        col1, col2 = st.columns([5, 1])
        query_text = col1.text_input("위치 검색", key="query_input", placeholder=placeholder,
                                     label_visibility="collapsed")
        submitted = col2.form_submit_button("🔍 검색", use_container_width=True)
    if submitted:
        asyncio.run(controller.submit_search(query_text))

    # 4. 지도
    st.pydeck_chart(build_deck(state.canvas), use_container_width=True)
    mode = "다중" if state.multi_mode else "단일"
    st.caption(f"{mode} 검색 모드 · 배경 지도: {state.canvas.basemap[0]} · 표시된 위치 {len(state.canvas.layers)}개")

    display_dashboard(state.canvas, store)
    display_footer()


if __name__ == "__main__":
    main()
