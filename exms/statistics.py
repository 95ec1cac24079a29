"""
통계 계산 모듈

시험 점수 분석에 필요한 통계량(석차, 백분위, 평균, 중앙값, 표준편차,
합격 인원, 히스토그램 구간)을 계산하는 기능을 제공합니다.

모든 함수는 입력을 변경하지 않는 순수 함수입니다. 석차와 백분위는 저장하지
않고 현재 점수 목록에서 매번 다시 계산합니다.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# 만점이 0일 때 사용하는 최소 구간 폭
MIN_BUCKET_WIDTH = 0.01


def _as_series(grades) -> pd.Series:
    if isinstance(grades, pd.Series):
        return grades.astype(float)
    return pd.Series(list(grades), dtype=float)


def calculate_ranks(grades) -> pd.Series:
    """
    점수 내림차순 석차를 계산합니다.

    동점자는 같은 석차를 받고, 서로 다른 점수가 나올 때마다 석차가 1씩
    증가합니다. 동점 판정은 오차 허용 없이 값이 정확히 같은지로 합니다.

    Args:
        grades (pd.Series): 점수 목록

    Returns:
        pd.Series: 입력과 같은 인덱스의 석차 (1부터 시작하는 정수)

    Examples:
        >>> calculate_ranks(pd.Series([5.0, 5.0, 10.0])).tolist()
        [2, 2, 1]
    """
    grades = _as_series(grades)

    if grades.empty:
        return pd.Series(dtype='int64', index=grades.index)

    return grades.rank(method='dense', ascending=False).astype('int64')


def calculate_percentiles(grades) -> pd.Series:
    """
    점수별 백분위(0~100)를 계산합니다.

    오름차순으로 정렬했을 때 i번째(0부터) 점수의 백분위는 i / (n - 1) * 100
    입니다. 동점 그룹은 그룹의 첫 위치에서 계산한 값을 공유하고, 최고 점수는
    항상 100입니다.

    Args:
        grades (pd.Series): 점수 목록

    Returns:
        pd.Series: 입력과 같은 인덱스의 백분위

    Examples:
        >>> calculate_percentiles(pd.Series([4.65, 3.6, 7.94, 5.03, 1.96])).tolist()
        [50.0, 25.0, 100.0, 75.0, 0.0]
    """
    grades = _as_series(grades)
    n = len(grades)

    if n == 0:
        return pd.Series(dtype=float, index=grades.index)

    # 동점 그룹의 첫 위치 = 자신보다 낮은 점수의 개수
    first_index = grades.rank(method='min', ascending=True) - 1
    percentiles = first_index / max(n - 1, 1) * 100

    return percentiles.where(grades != grades.max(), 100.0)


def attach_statistics(df: pd.DataFrame, grade_col: str = 'Grade') -> pd.DataFrame:
    """
    DataFrame 복사본에 석차(Rank)와 백분위(Percentile) 컬럼을 추가합니다.

    Args:
        df (pd.DataFrame): 점수 컬럼을 가진 데이터
        grade_col (str): 점수 컬럼명 (기본값: 'Grade')

    Returns:
        pd.DataFrame: 'Percentile', 'Rank' 컬럼이 추가된 새 DataFrame
    """
    annotated = df.copy()
    annotated['Percentile'] = calculate_percentiles(annotated[grade_col])
    annotated['Rank'] = calculate_ranks(annotated[grade_col])
    return annotated


def calculate_mean(grades) -> float:
    """평균을 계산합니다. 점수가 없으면 0을 반환합니다."""
    grades = _as_series(grades)
    if grades.empty:
        return 0.0
    return float(grades.mean())


def calculate_median(grades) -> float:
    """
    중앙값을 계산합니다.

    짝수 개일 때는 가운데 두 값의 평균입니다. 점수가 없으면 0을 반환합니다.
    """
    grades = _as_series(grades)
    if grades.empty:
        return 0.0
    return float(grades.median())


def calculate_std_dev(grades) -> float:
    """모표준편차(n으로 나눔)를 계산합니다. 점수가 없으면 0을 반환합니다."""
    grades = _as_series(grades)
    if grades.empty:
        return 0.0
    return float(np.std(grades.to_numpy(), ddof=0))


def pass_threshold(max_grade: float) -> float:
    """합격 기준 점수(만점의 절반)를 반환합니다."""
    return max_grade / 2


def count_passed(grades, max_grade: float) -> int:
    """
    합격 인원을 계산합니다.

    Args:
        grades (pd.Series): 점수 목록
        max_grade (float): 만점

    Returns:
        int: 만점의 절반 이상을 받은 인원 수

    Examples:
        >>> count_passed(pd.Series([4.65, 3.6, 7.94, 5.03, 1.96]), 10.0)
        2
    """
    grades = _as_series(grades)
    return int((grades >= pass_threshold(max_grade)).sum())


@dataclass(frozen=True)
class ExamStatistics:
    """시험 전체 통계. 현재 점수 목록에서 매번 새로 계산합니다."""

    total: int
    passed: int
    failed: int
    pass_rate: float
    mean: float
    median: float
    std_dev: float
    max_grade_config: float
    highest_grade: float
    lowest_grade: float
    highest_rank: int


def calculate_exam_statistics(grades, max_grade: float) -> ExamStatistics:
    """
    시험 전체 통계를 계산합니다.

    Args:
        grades (pd.Series): 점수 목록
        max_grade (float): 설정된 만점

    Returns:
        ExamStatistics: 인원, 합격/불합격, 합격률, 평균, 중앙값, 표준편차,
            최고/최저 점수, 최하 석차

    Note:
        - 합격 기준은 만점의 절반 이상입니다.
        - 점수가 없으면 모든 통계값은 0입니다.

    Examples:
        >>> stats = calculate_exam_statistics(pd.Series([4.65, 3.6, 7.94, 5.03, 1.96]), 10.0)
        >>> stats.passed, round(stats.mean, 3)
        (2, 4.636)
    """
    grades = _as_series(grades)

    total = len(grades)
    passed = count_passed(grades, max_grade)
    ranks = calculate_ranks(grades)

    return ExamStatistics(
        total=total,
        passed=passed,
        failed=total - passed,
        pass_rate=passed / total * 100 if total else 0.0,
        mean=calculate_mean(grades),
        median=calculate_median(grades),
        std_dev=calculate_std_dev(grades),
        max_grade_config=float(max_grade),
        highest_grade=float(grades.max()) if total else 0.0,
        lowest_grade=float(grades.min()) if total else 0.0,
        highest_rank=int(ranks.max()) if total else 0,
    )


@dataclass(frozen=True)
class HistogramBucket:
    """반개구간 [lower, upper) 과 해당 구간의 인원 수"""

    lower: float
    upper: float
    count: int

    @property
    def label(self) -> str:
        return f"{self.lower:g}-{self.upper:g}"


@dataclass(frozen=True)
class Histogram:
    buckets: Tuple[HistogramBucket, ...]
    step: float
    overflow: bool = False

    @property
    def counts(self) -> List[int]:
        return [bucket.count for bucket in self.buckets]

    @property
    def labels(self) -> List[str]:
        return [bucket.label for bucket in self.buckets]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            '구간': self.labels,
            '하한': [bucket.lower for bucket in self.buckets],
            '상한': [bucket.upper for bucket in self.buckets],
            '인원': self.counts,
        })


def calculate_histogram(
    grades,
    max_grade: float,
    step: Optional[float] = None
) -> Histogram:
    """
    점수를 고정 폭 구간으로 나누어 인원 수를 셉니다.

    구간은 [0, step), [step, 2*step), ... 이며 만점까지 덮습니다.

    Args:
        grades (pd.Series): 점수 목록
        max_grade (float): 만점
        step (Optional[float]): 구간 폭 (기본값: 1.0)

    Returns:
        Histogram: 구간 목록과 만점 초과 여부(overflow)

    Raises:
        ValueError: 구간 폭이 0 이하일 때

    Note:
        - 만점과 같은 점수는 마지막 구간에 들어갑니다.
        - 만점을 넘는 점수는 마지막 구간으로 옮기고 overflow를 표시합니다.
        - 음수 점수는 첫 구간에 넣습니다.
        - 구간 계산용 보정은 다른 통계값에 영향을 주지 않습니다.

    Examples:
        >>> hist = calculate_histogram(pd.Series([10.0, 11.0]), 10.0)
        >>> hist.counts[-1], hist.overflow
        (2, True)
    """
    if step is None:
        step = 1.0
    if not step > 0:
        raise ValueError(f"구간 폭은 0보다 커야 합니다: {step}")

    grades = _as_series(grades)

    if max_grade <= 0:
        step = MIN_BUCKET_WIDTH
        n_buckets = 1
    else:
        n_buckets = max(1, math.ceil(max_grade / step - 1e-9))

    values = grades.to_numpy(dtype=float)
    overflow = bool((values > max_grade).any())
    if overflow:
        logger.debug("%d grade(s) above max grade %s clamped into last bucket",
                     int((values > max_grade).sum()), max_grade)

    # 만점 이상은 만점 - ε 처럼 마지막 구간으로
    indices = np.where(values >= max_grade, n_buckets - 1, np.floor(values / step))
    indices = np.clip(indices, 0, n_buckets - 1).astype(int)
    counts = np.bincount(indices, minlength=n_buckets)

    buckets = tuple(
        HistogramBucket(lower=i * step, upper=(i + 1) * step, count=int(counts[i]))
        for i in range(n_buckets)
    )
    return Histogram(buckets=buckets, step=step, overflow=overflow)
