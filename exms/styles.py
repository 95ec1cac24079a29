"""
스타일링 모듈

HTML/CSS 스타일 처리 및 테이블 렌더링 기능을 제공합니다.
"""

import html
from typing import List, Optional

import pandas as pd
import streamlit.components.v1 as components

from .exam import Exam
from .statistics import ExamStatistics, pass_threshold


PASS_COLOR = '#1B873F'
FAIL_COLOR = '#D1242F'


def get_custom_css() -> str:
    """
    Streamlit 앱에 적용할 커스텀 CSS를 반환합니다.

    Returns:
        str: CSS 스타일 문자열
    """
    return """
    <style>
    /* 폰트 적용 (Pretendard) */
    @import url("https://cdn.jsdelivr.net/gh/orioncactus/pretendard@v1.3.9/dist/web/static/pretendard.min.css");

    html, body, [class*="css"] {
        font-family: 'Pretendard', sans-serif;
    }

    .stApp {
        background-color: #FFFFFF;
        color: #1E293B;
    }

    h1 {
        color: #1E3A8A;
        font-weight: 800;
        font-size: 2.2rem !important;
        margin-bottom: 0.5rem;
        letter-spacing: -0.05rem;
    }

    h2, h3, h4 {
        color: #334155;
        font-weight: 700;
        letter-spacing: -0.03rem;
    }

    /* 메트릭 스타일 */
    [data-testid="stMetricValue"] {
        font-size: 1.8rem;
        font-weight: 700;
        color: #2563EB;
    }
    div[data-testid="metric-container"] {
        background-color: #F8F9FA;
        padding: 15px;
        border-radius: 12px;
        border: 1px solid #E2E8F0;
    }

    /* 사이드바 */
    [data-testid="stSidebar"] {
        background-color: #F8F9FA;
        border-right: 1px solid #E2E8F0;
    }
    </style>
    """


def get_table_style() -> str:
    """
    HTML 테이블 스타일 CSS를 반환합니다.

    Returns:
        str: 테이블 CSS 스타일 문자열
    """
    return """
    <style>
    .styled-table {
        width: 100%;
        border-collapse: collapse;
        font-size: 0.85rem;
        font-family: 'Pretendard', sans-serif;
    }
    .styled-table th {
        background-color: #f0f2f6;
        font-weight: 700;
        text-align: center;
        padding: 10px 8px;
        border: 1px solid #e0e0e0;
        position: sticky;
        top: 0;
    }
    .styled-table td {
        text-align: center;
        padding: 8px 6px;
        border: 1px solid #e0e0e0;
    }
    .styled-table tr:nth-child(even) {
        background-color: #fafafa;
    }
    .styled-table td.left-align {
        text-align: left !important;
    }
    .styled-table td.pass {
        color: #1B873F;
        font-weight: 700;
    }
    .styled-table td.fail {
        color: #D1242F;
        font-weight: 700;
    }
    .table-title {
        text-align: center;
        font-weight: 800;
        color: #1E3A8A;
    }
    </style>
    """


def format_number(value: float, digits: int = 2) -> str:
    """
    숫자를 표시용 문자열로 바꿉니다. 불필요한 0은 제거합니다.

    Examples:
        >>> format_number(4.636)
        '4.64'
        >>> format_number(25.0)
        '25'
    """
    text = f"{value:.{digits}f}"
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return '0' if text == '-0' else text


def format_rank(rank: int, highest_rank: int) -> str:
    """
    석차를 '[석차/최하석차]' 형식으로 표시합니다.

    Examples:
        >>> format_rank(2, 5)
        '[2/5]'
    """
    return f"[{rank}/{highest_rank}]"


def grade_class(grade: float, max_grade: float) -> str:
    """
    합격 여부에 따른 CSS 클래스명을 반환합니다.

    Args:
        grade (float): 점수
        max_grade (float): 만점

    Returns:
        str: 만점의 절반 이상이면 'pass', 미만이면 'fail'
    """
    return 'pass' if grade >= pass_threshold(max_grade) else 'fail'


def make_html_table(
    df: pd.DataFrame,
    left_align_cols: Optional[List[str]] = None,
    cell_classes: Optional[dict] = None,
    title: Optional[str] = None
) -> str:
    """
    DataFrame을 HTML 테이블로 변환합니다.

    Args:
        df (pd.DataFrame): 변환할 DataFrame
        left_align_cols (Optional[List[str]]): 왼쪽 정렬할 컬럼 리스트
        cell_classes (Optional[dict]): {컬럼명: 행별 CSS 클래스 리스트}
        title (Optional[str]): 표 위에 표시할 제목 행

    Returns:
        str: HTML 테이블 문자열

    Examples:
        >>> df = pd.DataFrame({'이름': ['Joan'], '점수': [4.6]})
        >>> html = make_html_table(df, left_align_cols=['이름'])
    """
    left_align_cols = left_align_cols or []
    cell_classes = cell_classes or {}
    out = '<table class="styled-table">'

    # Header
    out += '<thead>'
    if title:
        out += f'<tr><th class="table-title" colspan="{max(len(df.columns), 1)}">{html.escape(title)}</th></tr>'
    if len(df.columns) > 0:
        out += '<tr>'
        for col in df.columns:
            out += f'<th>{html.escape(str(col))}</th>'
        out += '</tr>'
    out += '</thead>'

    # Body
    out += '<tbody>'
    for pos, (_, row) in enumerate(df.iterrows()):
        out += '<tr>'
        for col in df.columns:
            classes = []
            if col in left_align_cols:
                classes.append('left-align')
            if col in cell_classes:
                classes.append(cell_classes[col][pos])
            class_attr = f' class="{" ".join(classes)}"' if classes else ''
            out += f'<td{class_attr}>{html.escape(str(row[col]))}</td>'
        out += '</tr>'
    out += '</tbody></table>'

    return out


def make_entries_frame(exam: Exam) -> pd.DataFrame:
    """
    학생 목록 표시용 DataFrame 을 만듭니다.

    Args:
        exam (Exam): 시험

    Returns:
        pd.DataFrame: 이름, 점수, 백분위, 석차('[석차/최하석차]') 컬럼
    """
    annotated = exam.to_dataframe()
    highest_rank = int(annotated['Rank'].max()) if len(annotated) else 0

    return pd.DataFrame({
        '이름': annotated['Name'],
        '점수': annotated['Grade'].map(format_number),
        '백분위': annotated['Percentile'].map(format_number),
        '석차': annotated['Rank'].map(lambda r: format_rank(int(r), highest_rank)),
    })


def make_entries_table(exam: Exam) -> str:
    """
    학생 목록 HTML 테이블을 생성합니다. 점수는 합격/불합격 색으로 표시합니다.

    Args:
        exam (Exam): 시험

    Returns:
        str: HTML 테이블 문자열
    """
    display = make_entries_frame(exam)
    classes = [grade_class(g, exam.max_grade) for g in exam.grades]
    return make_html_table(display, left_align_cols=['이름'], cell_classes={'점수': classes})


def make_summary_frame(stats: ExamStatistics) -> pd.DataFrame:
    """시험 통계를 (항목, 값) 2열 DataFrame 으로 변환합니다."""
    rows = [
        ('응시 인원', str(stats.total)),
        ('합격 인원', str(stats.passed)),
        ('불합격 인원', str(stats.failed)),
        ('합격률', f"{format_number(stats.pass_rate)}%"),
        ('평균', format_number(stats.mean)),
        ('중앙값', format_number(stats.median)),
        ('표준편차', format_number(stats.std_dev)),
        ('최고 점수', format_number(stats.highest_grade)),
        ('최저 점수', format_number(stats.lowest_grade)),
    ]
    return pd.DataFrame(rows, columns=['항목', '값'])


def make_summary_table(stats: ExamStatistics, title: Optional[str] = None) -> str:
    """
    시험 통계 HTML 테이블을 생성합니다.

    Args:
        stats (ExamStatistics): 시험 통계
        title (Optional[str]): 시험 이름. 있으면 제목 행을 추가합니다.

    Returns:
        str: HTML 테이블 문자열
    """
    return make_html_table(make_summary_frame(stats), left_align_cols=['항목'], title=title)


def render_datatables(html_content: str, unique_id: str, height: int = 600) -> None:
    """
    HTML 테이블을 DataTables(정렬 가능한 표)로 렌더링합니다.

    Args:
        html_content (str): make_html_table 로 만든 HTML
        unique_id (str): 페이지 내 고유 ID
        height (int): iframe 높이
    """
    datatables_html = f"""
    <html>
    <head>
        <link rel="stylesheet" type="text/css" href="https://cdn.datatables.net/1.13.6/css/jquery.dataTables.min.css">
        {get_table_style()}
        <style>
            body {{ font-family: 'Pretendard', sans-serif; }}
        </style>
        <script type="text/javascript" charset="utf8" src="https://code.jquery.com/jquery-3.7.0.js"></script>
        <script type="text/javascript" charset="utf8" src="https://cdn.datatables.net/1.13.6/js/jquery.dataTables.min.js"></script>
    </head>
    <body style="margin: 0;">
        {html_content}
        <script>
            $(document).ready(function() {{
                $('table').attr('id', 'table_{unique_id}');
                $('#table_{unique_id}').DataTable({{
                    "paging": false,
                    "lengthChange": false,
                    "searching": false,
                    "ordering": true,
                    "info": false,
                    "autoWidth": false,
                    "order": [],
                    "language": {{
                        "zeroRecords": "데이터가 없습니다.",
                        "infoEmpty": "데이터 없음"
                    }}
                }});
            }});
        </script>
    </body>
    </html>
    """
    components.html(datatables_html, height=height, scrolling=True)
