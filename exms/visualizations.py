"""
시각화 모듈

Plotly 기반의 점수 분포 차트 생성 기능을 제공합니다.
"""

from typing import Optional

import plotly.graph_objects as go

from .statistics import ExamStatistics, Histogram, pass_threshold
from .styles import FAIL_COLOR, PASS_COLOR


def create_grade_histogram_chart(
    histogram: Histogram,
    max_grade: float,
    title: Optional[str] = None
) -> go.Figure:
    """
    점수 구간별 인원 막대 그래프를 생성합니다.

    Args:
        histogram (Histogram): calculate_histogram 결과
        max_grade (float): 만점 (합격 기준 색 구분에 사용)
        title (Optional[str]): 시험 이름

    Returns:
        go.Figure: Plotly Figure 객체

    Note:
        - 구간 하한이 합격 기준 이상이면 합격 색, 아니면 불합격 색입니다.
    """
    threshold = pass_threshold(max_grade)
    colors = [
        PASS_COLOR if bucket.lower >= threshold else FAIL_COLOR
        for bucket in histogram.buckets
    ]
    hover_texts = [
        f"점수 범위: [{bucket.lower:g}, {bucket.upper:g})<br>학생 수: {bucket.count}명"
        for bucket in histogram.buckets
    ]

    fig = go.Figure()

    fig.add_trace(go.Bar(
        x=histogram.labels,
        y=histogram.counts,
        hovertext=hover_texts,
        hoverinfo="text",
        text=[str(c) if c else '' for c in histogram.counts],
        textposition='outside',
        marker=dict(
            color=colors,
            line=dict(color='rgba(0,0,0,0.4)', width=1.5)
        )
    ))

    max_count = max(histogram.counts) if histogram.counts else 0
    graph_title = f"<b>{title} 점수 분포</b>" if title else "<b>점수 분포</b>"

    fig.update_layout(
        title=graph_title,
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(240,242,246,0.3)",
        font_family="Pretendard",
        height=400,
        showlegend=False,
        xaxis_title="점수 구간",
        yaxis_title="학생 수",
        bargap=0.05,
        margin=dict(l=60, r=60, t=80, b=60),
        yaxis=dict(range=[0, max(1, max_count) * 1.2], dtick=1 if max_count <= 10 else None)
    )

    return fig


def create_pass_fail_chart(stats: ExamStatistics) -> go.Figure:
    """
    합격/불합격 인원 도넛 차트를 생성합니다.

    Args:
        stats (ExamStatistics): 시험 통계

    Returns:
        go.Figure: Plotly Pie 차트
    """
    fig = go.Figure()

    fig.add_trace(go.Pie(
        labels=['합격', '불합격'],
        values=[stats.passed, stats.failed],
        hole=0.5,
        sort=False,
        marker=dict(colors=[PASS_COLOR, FAIL_COLOR]),
        textinfo='label+value',
        hovertemplate="<b>%{label}</b><br>%{value}명 (%{percent})<extra></extra>"
    ))

    fig.update_layout(
        title=f"<b>합격률 {stats.pass_rate:.1f}%</b>",
        paper_bgcolor="rgba(0,0,0,0)",
        font_family="Pretendard",
        height=400,
        showlegend=False,
        margin=dict(l=40, r=40, t=80, b=40)
    )

    return fig
