"""
스타일 모듈 테스트
"""

import pytest
import pandas as pd
from exms.exam import Exam
from exms.statistics import calculate_exam_statistics
from exms.styles import (
    make_html_table,
    make_entries_frame,
    make_entries_table,
    make_summary_frame,
    make_summary_table,
    grade_class,
    format_number,
    format_rank,
)


class TestStyles:
    """스타일 함수 테스트"""

    def test_make_html_table_basic(self):
        """기본 HTML 테이블 생성 테스트"""
        data = {
            '이름': ['Joan', 'David'],
            '점수': [4.6, 7.94]
        }
        df = pd.DataFrame(data)

        html = make_html_table(df)

        assert '<table class="styled-table">' in html
        assert '<thead>' in html
        assert '<tbody>' in html
        assert 'Joan' in html
        assert '7.94' in html

    def test_make_html_table_left_align(self):
        """왼쪽 정렬 컬럼 테스트"""
        df = pd.DataFrame({'이름': ['Joan'], '점수': [4.6]})

        html = make_html_table(df, left_align_cols=['이름'])

        assert 'class="left-align"' in html

    def test_make_html_table_escapes(self):
        """HTML 특수문자 이스케이프"""
        df = pd.DataFrame({'이름': ['<b>Ana</b>']})
        html = make_html_table(df)

        assert '<b>Ana</b>' not in html
        assert '&lt;b&gt;Ana&lt;/b&gt;' in html

    def test_make_html_table_title(self):
        """제목 행"""
        df = pd.DataFrame({'항목': ['평균'], '값': ['4.6']})
        html = make_html_table(df, title='Econometrics')

        assert 'colspan="2"' in html
        assert 'Econometrics' in html

    def test_grade_class(self):
        """만점의 절반 기준 합격/불합격"""
        assert grade_class(5.0, 10.0) == 'pass'
        assert grade_class(4.99, 10.0) == 'fail'
        assert grade_class(15.0, 30.0) == 'pass'

    def test_format_number(self):
        """숫자 표시"""
        assert format_number(4.636) == '4.64'
        assert format_number(25.0) == '25'
        assert format_number(0.0) == '0'
        assert format_number(33.333333) == '33.33'
        assert format_number(-0.001) == '0'

    def test_format_rank(self):
        """석차 표시"""
        assert format_rank(1, 3) == '[1/3]'


class TestExamTables:
    """시험 테이블 생성 테스트"""

    def test_entries_frame(self):
        """학생 목록 표시용 DataFrame"""
        exam = Exam.from_mapping({"A": 5.0, "B": 5.0, "C": 10.0})
        frame = make_entries_frame(exam)

        assert list(frame.columns) == ['이름', '점수', '백분위', '석차']
        assert frame['석차'].tolist() == ['[2/2]', '[2/2]', '[1/2]']
        assert frame['백분위'].tolist() == ['0', '0', '100']

    def test_entries_table_marks_pass_fail(self):
        """점수 셀에 합격/불합격 클래스"""
        exam = Exam.from_mapping({"Ana": 7.0, "Bea": 2.0})
        html = make_entries_table(exam)

        assert 'class="pass"' in html
        assert 'class="fail"' in html
        assert 'class="left-align"' in html

    def test_entries_table_empty(self):
        """빈 시험"""
        html = make_entries_table(Exam())
        assert '<tbody></tbody>' in html

    def test_summary_frame(self):
        """요약 통계 표"""
        stats = calculate_exam_statistics(pd.Series([4.65, 3.6, 7.94, 5.03, 1.96]), 10.0)
        frame = make_summary_frame(stats)
        values = dict(zip(frame['항목'], frame['값']))

        assert values['응시 인원'] == '5'
        assert values['합격 인원'] == '2'
        assert values['불합격 인원'] == '3'
        assert values['합격률'] == '40%'
        assert values['평균'] == '4.64'

    def test_summary_table_title(self):
        """제목이 있으면 제목 행 추가"""
        stats = calculate_exam_statistics(pd.Series([6.0]), 10.0)

        assert 'Econometrics' in make_summary_table(stats, title='Econometrics')
        assert 'table-title' not in make_summary_table(stats)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
