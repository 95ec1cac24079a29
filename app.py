import logging

import streamlit as st

from exms.config import SORT_MODES, get_config, new_app_config, set_config
from exms.data_loader import ExamFileError, filter_exam_by_uploads, load_uploaded_exam
from exms.export import export_exam_to_excel
from exms.styles import (
    get_custom_css,
    get_table_style,
    make_entries_table,
    make_summary_table,
    render_datatables,
)
from exms.visualizations import create_grade_histogram_chart, create_pass_fail_chart

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("exms.app")

# ═══════════════════════════════════════════════════════════════════
# Session State 초기화
# ═══════════════════════════════════════════════════════════════════

if 'app_config' not in st.session_state:
    st.session_state.app_config = new_app_config()


def get_app_config(path: str, default=None):
    """세션 설정에서 값을 가져옵니다. (예: 'exam.max_grade')"""
    return get_config(st.session_state.app_config, path, default)


def set_app_config(path: str, value):
    """세션 설정 값을 변경합니다. (예: set_app_config('view.sort_mode', 'name'))"""
    set_config(st.session_state.app_config, path, value)


def load_upload(uploaded_file):
    """업로드된 시험 파일을 Exam 으로 변환합니다. 읽지 못하면 오류를 표시하고 None 을 반환합니다."""
    try:
        return load_uploaded_exam(uploaded_file)
    except ExamFileError as e:
        logger.warning("Failed to load %s: %s", uploaded_file.name, e)
        st.error(f"❌ {e}")
        return None


# --- 페이지 설정 ---
st.set_page_config(
    page_title="시험 성적 통계",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)
st.markdown(get_custom_css(), unsafe_allow_html=True)
st.markdown(get_table_style(), unsafe_allow_html=True)

# --- 사이드바 UI ---
with st.sidebar:
    st.markdown("### 📂 시험 파일")

    exam_file = st.file_uploader(
        "분석할 시험 파일 (TOML, JSON)",
        type=['toml', 'json'],
        key="exam_file",
    )

    st.markdown("---")
    st.subheader("⚙️ 시험 설정")

    override_max = st.checkbox("만점 직접 입력", value=False,
                               help="체크하지 않으면 파일의 max_grade (없으면 10점)를 사용합니다.")
    if override_max:
        max_grade = st.number_input("만점", min_value=0.0,
                                    value=float(get_app_config('exam.max_grade', 10.0)), step=1.0)
        set_app_config('exam.max_grade', max_grade)

    title = st.text_input("시험 이름", value=get_app_config('exam.title') or "",
                          help="비워두면 파일의 이름을 사용합니다.")
    set_app_config('exam.title', title or None)

    st.markdown("---")
    st.subheader("🔍 보기 설정")

    sort_keys = list(SORT_MODES)
    sort_mode = st.radio(
        "정렬",
        sort_keys,
        index=sort_keys.index(get_app_config('view.sort_mode', 'grade')),
        format_func=lambda k: SORT_MODES[k],
    )
    set_app_config('view.sort_mode', sort_mode)

    query_text = st.text_input("이름 검색 (쉼표로 구분)", help="하나라도 포함된 학생만 표시합니다.")
    queries = [q.strip() for q in query_text.split(',') if q.strip()]
    set_app_config('view.name_queries', queries)

    filter_files = st.file_uploader(
        "비교 시험 파일 (모두 응시한 학생만 표시)",
        type=['toml', 'json'],
        accept_multiple_files=True,
        key="filter_files",
    )

    step = st.number_input("히스토그램 구간 폭", min_value=0.01,
                           value=float(get_app_config('view.histogram_step', 1.0)), step=0.5)
    set_app_config('view.histogram_step', step)


# --- 메인 화면 ---
st.title("📊 시험 성적 통계")

if exam_file is None:
    st.info("왼쪽 사이드바에서 시험 파일(.toml 또는 .json)을 업로드하세요.")
    st.stop()

exam = load_upload(exam_file)
if exam is None:
    st.stop()

if override_max:
    exam.set_max_grade(get_app_config('exam.max_grade'))
if get_app_config('exam.title'):
    exam.set_title(get_app_config('exam.title'))

# 필터 (석차/백분위는 필터 후 목록으로 계산됨)
if queries:
    exam.filter_by_name(queries)
try:
    filter_exam_by_uploads(exam, filter_files)
except ExamFileError as e:
    logger.warning("Failed to load filter file %s: %s", e.path, e)
    st.error(f"❌ 비교 파일을 읽지 못해 필터를 적용할 수 없습니다. {e}")
    st.stop()

if sort_mode == 'grade':
    exam.sort_by_grade()
elif sort_mode == 'name':
    exam.sort_by_name()

stats = exam.statistics()

col1, col2, col3, col4 = st.columns(4)
col1.metric("응시 인원", f"{stats.total}명")
col2.metric("합격률", f"{stats.pass_rate:.1f}%")
col3.metric("평균", f"{stats.mean:.2f}")
col4.metric("만점", f"{exam.max_grade:g}")

if stats.total == 0:
    st.warning("⚠️ 조건에 맞는 학생이 없습니다.")

tab_students, tab_summary, tab_dist = st.tabs(["👥 학생별 성적", "📋 시험 통계", "📈 점수 분포"])

with tab_students:
    render_datatables(make_entries_table(exam), unique_id="entries")

with tab_summary:
    st.markdown(make_summary_table(stats, title=exam.title), unsafe_allow_html=True)
    st.plotly_chart(create_pass_fail_chart(stats), use_container_width=True)

with tab_dist:
    histogram = exam.histogram(step)
    st.plotly_chart(
        create_grade_histogram_chart(histogram, exam.max_grade, title=exam.title),
        use_container_width=True,
    )
    if histogram.overflow:
        st.warning(
            "⚠️ 만점보다 높은 점수가 있어 마지막 구간에 포함했습니다.\n\n"
            "다른 통계값에는 영향을 주지 않습니다."
        )

st.download_button(
    "📥 엑셀로 내보내기",
    data=export_exam_to_excel(exam, histogram_step=step),
    file_name=f"{exam.title or 'exam'}.xlsx",
    mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
)
