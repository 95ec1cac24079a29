"""
엑셀 내보내기 모듈

학생 목록과 시험 통계를 서식이 적용된 엑셀 파일로 변환합니다.
"""

from datetime import datetime
from io import BytesIO
from typing import Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .config import DEFAULT_HISTOGRAM_STEP
from .exam import Exam
from .statistics import pass_threshold
from .styles import make_summary_frame

ENTRIES_SHEET = '학생별 성적'
SUMMARY_SHEET = '시험 통계'
HISTOGRAM_SHEET = '점수 분포'

ENTRY_COLUMNS = ['이름', '점수', '백분위', '석차']

THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)
HEADER_FILL = PatternFill(start_color="D9E1F2", end_color="D9E1F2", fill_type="solid")
PASS_FILL = PatternFill(start_color="DFF5E3", end_color="DFF5E3", fill_type="solid")
FAIL_FILL = PatternFill(start_color="FBE3E4", end_color="FBE3E4", fill_type="solid")
HEADER_FONT = Font(name='맑은 고딕', size=11, bold=True)
DATA_FONT = Font(name='맑은 고딕', size=10)
CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)


def _write_title(ws: Worksheet, title: str, width: int) -> None:
    title_cell = ws.cell(row=1, column=1, value=title)
    title_cell.font = Font(name='맑은 고딕', size=14, bold=True, color="FFFFFF")
    title_cell.fill = PatternFill(start_color="1A5C9E", end_color="1A5C9E", fill_type="solid")
    title_cell.alignment = Alignment(horizontal="center", vertical="center")
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=width)
    ws.row_dimensions[1].height = 24


def _write_table(ws: Worksheet, df: pd.DataFrame, header_row: int) -> None:
    for col_num, col_name in enumerate(df.columns, 1):
        cell = ws.cell(row=header_row, column=col_num, value=col_name)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = CENTER
        cell.border = THIN_BORDER

    for row_idx, row_data in enumerate(df.itertuples(index=False), start=header_row + 1):
        for col_num, value in enumerate(row_data, 1):
            cell = ws.cell(row=row_idx, column=col_num, value=value)
            cell.font = DATA_FONT
            cell.alignment = CENTER
            cell.border = THIN_BORDER

    # 셀 폭 자동 조정 (최소 8, 최대 35)
    for col_num, col_name in enumerate(df.columns, 1):
        max_length = len(str(col_name)) + 2
        for value in df[col_name]:
            max_length = max(max_length, len(str(value)) + 2)
        ws.column_dimensions[get_column_letter(col_num)].width = min(35, max(8, max_length))


def export_exam_to_excel(
    exam: Exam,
    exported_at: Optional[datetime] = None,
    histogram_step: float = DEFAULT_HISTOGRAM_STEP
) -> bytes:
    """
    시험 결과를 엑셀 파일(xlsx)로 변환합니다.

    첫 번째 시트에는 현재 순서의 학생 목록(이름, 점수, 백분위, 석차)을,
    두 번째 시트에는 시험 통계를, 세 번째 시트에는 점수 구간별 인원을
    기록합니다. 점수 셀은 합격/불합격에 따라 배경색이 다릅니다.

    Args:
        exam (Exam): 내보낼 시험
        exported_at (Optional[datetime]): 출력 일시 (기본값: 현재 시각)
        histogram_step (float): 점수 분포 구간 폭

    Returns:
        bytes: xlsx 파일 내용
    """
    exported_at = exported_at or datetime.now()
    title = exam.title or '시험 성적'

    annotated = exam.to_dataframe()
    entries = pd.DataFrame({
        '이름': annotated['Name'],
        '점수': annotated['Grade'].astype(float),
        '백분위': annotated['Percentile'].astype(float).round(2),
        '석차': annotated['Rank'].astype(int),
    }, columns=ENTRY_COLUMNS)

    wb = Workbook()

    # 1. 학생별 성적
    ws = wb.active
    ws.title = ENTRIES_SHEET
    _write_title(ws, title, len(ENTRY_COLUMNS))
    ws.cell(row=2, column=1, value="만점:").font = Font(bold=True, size=10)
    ws.cell(row=2, column=2, value=exam.max_grade)
    ws.cell(row=2, column=3, value="출력일시:").font = Font(bold=True, size=10)
    ws.cell(row=2, column=4, value=exported_at.strftime('%Y년 %m월 %d일 %H:%M:%S'))

    header_row = 4
    _write_table(ws, entries, header_row)

    threshold = pass_threshold(exam.max_grade)
    grade_col = ENTRY_COLUMNS.index('점수') + 1
    for offset, grade in enumerate(entries['점수'], start=1):
        ws.cell(row=header_row + offset, column=grade_col).fill = (
            PASS_FILL if grade >= threshold else FAIL_FILL
        )

    # 2. 시험 통계
    ws_summary = wb.create_sheet(SUMMARY_SHEET)
    _write_title(ws_summary, title, 2)
    _write_table(ws_summary, make_summary_frame(exam.statistics()), header_row=3)

    # 3. 점수 분포
    ws_hist = wb.create_sheet(HISTOGRAM_SHEET)
    _write_title(ws_hist, title, 4)
    _write_table(ws_hist, exam.histogram(histogram_step).to_frame(), header_row=3)

    output = BytesIO()
    wb.save(output)
    return output.getvalue()
