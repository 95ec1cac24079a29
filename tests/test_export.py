"""
엑셀 내보내기 모듈 테스트
"""

from datetime import datetime
from io import BytesIO

import pytest
from openpyxl import load_workbook
from exms.exam import Exam
from exms.export import (
    ENTRIES_SHEET,
    HISTOGRAM_SHEET,
    SUMMARY_SHEET,
    PASS_FILL,
    FAIL_FILL,
    export_exam_to_excel,
)


class TestExport:
    """엑셀 내보내기 테스트"""

    def make_workbook(self, exam, **kwargs):
        content = export_exam_to_excel(exam, exported_at=datetime(2024, 6, 1, 9, 30), **kwargs)
        return load_workbook(BytesIO(content))

    def test_sheets(self):
        """학생별 성적/시험 통계 시트"""
        wb = self.make_workbook(Exam.from_mapping({"Ana": 7.0}, title="Final"))

        assert wb.sheetnames == [ENTRIES_SHEET, SUMMARY_SHEET, HISTOGRAM_SHEET]
        assert wb[ENTRIES_SHEET]['A1'].value == "Final"

    def test_entries_in_current_order(self):
        """현재 순서대로 이름, 점수, 백분위, 석차 기록"""
        exam = Exam.from_mapping({"Bea": 2.0, "Ana": 7.0, "Carlos": 7.0})
        exam.sort_by_grade()
        ws = self.make_workbook(exam)[ENTRIES_SHEET]

        header = [ws.cell(row=4, column=c).value for c in range(1, 5)]
        assert header == ['이름', '점수', '백분위', '석차']

        rows = [[ws.cell(row=r, column=c).value for c in range(1, 5)] for r in range(5, 8)]
        assert rows == [
            ['Ana', 7.0, 100.0, 1],
            ['Carlos', 7.0, 100.0, 1],
            ['Bea', 2.0, 0.0, 2],
        ]

    def test_grade_fill(self):
        """점수 셀 합격/불합격 배경색"""
        exam = Exam.from_mapping({"Ana": 7.0, "Bea": 2.0})
        ws = self.make_workbook(exam)[ENTRIES_SHEET]

        assert ws['B5'].fill.start_color.rgb.endswith(PASS_FILL.start_color.rgb[-6:])
        assert ws['B6'].fill.start_color.rgb.endswith(FAIL_FILL.start_color.rgb[-6:])

    def test_summary_sheet(self):
        """시험 통계 시트"""
        exam = Exam.from_mapping({"A": 4.65, "B": 3.6, "C": 7.94, "D": 5.03, "E": 1.96})
        ws = self.make_workbook(exam)[SUMMARY_SHEET]

        values = {ws.cell(row=r, column=1).value: ws.cell(row=r, column=2).value for r in range(4, 13)}
        assert values['응시 인원'] == '5'
        assert values['합격 인원'] == '2'
        assert values['평균'] == '4.64'

    def test_histogram_sheet(self):
        """점수 분포 시트 (구간 폭 적용)"""
        exam = Exam.from_mapping({"A": 1.0, "B": 4.5, "C": 9.9, "D": 10.0})
        ws = self.make_workbook(exam, histogram_step=5.0)[HISTOGRAM_SHEET]

        header = [ws.cell(row=3, column=c).value for c in range(1, 5)]
        assert header == ['구간', '하한', '상한', '인원']
        rows = [[ws.cell(row=r, column=c).value for c in range(1, 5)] for r in (4, 5)]
        assert rows == [['0-5', 0.0, 5.0, 2], ['5-10', 5.0, 10.0, 2]]
        assert ws.cell(row=6, column=1).value is None

    def test_empty_exam(self):
        """빈 시험도 내보내기 가능"""
        wb = self.make_workbook(Exam())
        assert wb[ENTRIES_SHEET]['A1'].value == '시험 성적'


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
