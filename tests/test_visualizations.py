"""
시각화 모듈 테스트
"""

import pytest
import pandas as pd
import plotly.graph_objects as go
from exms.statistics import calculate_exam_statistics, calculate_histogram
from exms.styles import FAIL_COLOR, PASS_COLOR
from exms.visualizations import create_grade_histogram_chart, create_pass_fail_chart


class TestHistogramChart:
    """점수 분포 차트 테스트"""

    def test_bars_match_buckets(self):
        """막대 = 구간별 인원"""
        hist = calculate_histogram(pd.Series([1.2, 4.5, 9.9, 10.0]), 10.0)
        fig = create_grade_histogram_chart(hist, 10.0, title='Econometrics')

        assert isinstance(fig, go.Figure)
        bar = fig.data[0]
        assert list(bar.x) == hist.labels
        assert list(bar.y) == [0, 1, 0, 0, 1, 0, 0, 0, 0, 2]
        assert 'Econometrics' in fig.layout.title.text

    def test_colors_follow_pass_threshold(self):
        """합격 기준 이상 구간은 합격 색"""
        hist = calculate_histogram(pd.Series([], dtype=float), 10.0)
        fig = create_grade_histogram_chart(hist, 10.0)
        colors = list(fig.data[0].marker.color)

        assert colors[:5] == [FAIL_COLOR] * 5
        assert colors[5:] == [PASS_COLOR] * 5


class TestPassFailChart:
    """합격/불합격 차트 테스트"""

    def test_values(self):
        stats = calculate_exam_statistics(pd.Series([4.65, 3.6, 7.94, 5.03, 1.96]), 10.0)
        fig = create_pass_fail_chart(stats)

        assert list(fig.data[0].values) == [2, 3]
        assert '40.0%' in fig.layout.title.text


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
