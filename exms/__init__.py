"""
시험 성적 통계 모듈 패키지

이 패키지는 시험 점수 파일을 읽어 석차, 백분위, 요약 통계, 점수 분포를
계산하고 표시하는 기능을 모듈화하여 제공합니다.

Modules:
    - config: 기본값 및 설정 딕셔너리 접근
    - data_loader: TOML/JSON 시험 파일 로딩 및 파싱
    - exam: 학생 점수 목록, 정렬 및 필터
    - statistics: 통계 계산 (석차, 백분위, 평균, 히스토그램 등)
    - styles: HTML/CSS 스타일 처리
    - visualizations: Plotly 기반 시각화
    - export: 엑셀 내보내기
"""

from .data_loader import (
    ExamFileError,
    ExamFileParseError,
    ExamFileReadError,
    MissingFormatError,
    UnsupportedFormatError,
    load_exam_file,
)
from .exam import Entry, Exam
from .statistics import ExamStatistics, Histogram, HistogramBucket

__version__ = "1.0.0"

__all__ = [
    "Entry",
    "Exam",
    "ExamStatistics",
    "Histogram",
    "HistogramBucket",
    "ExamFileError",
    "ExamFileParseError",
    "ExamFileReadError",
    "MissingFormatError",
    "UnsupportedFormatError",
    "load_exam_file",
]
