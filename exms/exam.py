"""
시험 모듈

학생 이름과 점수를 순서대로 보관하는 Exam 클래스와 정렬/필터 기능을 제공합니다.

석차와 백분위는 Exam에 저장하지 않습니다. entries, to_dataframe(),
statistics() 를 호출할 때마다 현재 학생 목록으로 다시 계산하므로 필터링
후에도 항상 최신 값입니다.
"""

import logging
import math
import numbers
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd
from unidecode import unidecode

from .config import DEFAULT_HISTOGRAM_STEP, DEFAULT_MAX_GRADE
from .statistics import (
    ExamStatistics,
    Histogram,
    attach_statistics,
    calculate_exam_statistics,
    calculate_histogram,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Entry:
    """학생 한 명의 점수 기록. rank/percentile 은 Exam 이 계산해서 채웁니다."""

    name: str
    grade: float
    rank: Optional[int] = None
    percentile: Optional[float] = None


def normalize_name(name: str) -> str:
    """
    이름 비교용 정규화 문자열을 반환합니다.

    발음 구별 기호가 붙은 글자(é, ñ, Ł, Ø 등)를 기본 라틴 문자로 바꾸고
    소문자로 변환합니다.

    Examples:
        >>> normalize_name("Jiménez")
        'jimenez'
        >>> normalize_name("Łukasz")
        'lukasz'
    """
    return unidecode(str(name)).lower()


def _validate_grade(name: str, grade) -> float:
    if isinstance(grade, bool) or not isinstance(grade, numbers.Real):
        raise ValueError(f"'{name}' 학생의 점수가 숫자가 아닙니다: {grade!r}")
    grade = float(grade)
    if not math.isfinite(grade):
        raise ValueError(f"'{name}' 학생의 점수가 유효하지 않습니다: {grade!r}")
    return grade


def _validate_max_grade(max_grade) -> float:
    if isinstance(max_grade, bool) or not isinstance(max_grade, numbers.Real):
        raise ValueError(f"만점은 숫자여야 합니다: {max_grade!r}")
    max_grade = float(max_grade)
    if not math.isfinite(max_grade) or max_grade < 0:
        raise ValueError(f"만점은 0 이상의 유한한 값이어야 합니다: {max_grade!r}")
    return max_grade


EntryLike = Union[Entry, Tuple[str, float]]


class Exam:
    """
    시험 한 회차의 학생 점수 목록.

    Args:
        entries: (이름, 점수) 쌍 또는 Entry 목록. 순서를 유지합니다.
        max_grade (float): 만점 (기본값: 10.0)
        title (Optional[str]): 시험 이름

    Examples:
        >>> exam = Exam([("Joan", 4.6), ("Jose", 3.6), ("David", 7.94)])
        >>> exam.sort_by_grade()
        >>> exam.names
        ['David', 'Joan', 'Jose']
    """

    def __init__(
        self,
        entries: Iterable[EntryLike] = (),
        max_grade: float = DEFAULT_MAX_GRADE,
        title: Optional[str] = None
    ):
        names = []
        grades = []
        for item in entries:
            if isinstance(item, Entry):
                name, grade = item.name, item.grade
            else:
                name, grade = item
            names.append(str(name))
            grades.append(_validate_grade(name, grade))

        self._df = pd.DataFrame({
            'Name': pd.Series(names, dtype=object),
            'Grade': pd.Series(grades, dtype=float),
        })
        self.max_grade = max_grade
        self.title = title

    @classmethod
    def from_mapping(
        cls,
        students: Mapping[str, float],
        max_grade: float = DEFAULT_MAX_GRADE,
        title: Optional[str] = None
    ) -> 'Exam':
        """{이름: 점수} 딕셔너리로 Exam 을 만듭니다. 딕셔너리 순서를 유지합니다."""
        return cls(students.items(), max_grade=max_grade, title=title)

    @property
    def max_grade(self) -> float:
        return self._max_grade

    @max_grade.setter
    def max_grade(self, value: float) -> None:
        self._max_grade = _validate_max_grade(value)

    def set_max_grade(self, max_grade: float) -> None:
        self.max_grade = max_grade

    def set_title(self, title: Optional[str]) -> None:
        self.title = title

    def __len__(self) -> int:
        return len(self._df)

    def __repr__(self) -> str:
        return f"Exam(title={self.title!r}, students={len(self)}, max_grade={self.max_grade})"

    @property
    def names(self) -> List[str]:
        return self._df['Name'].tolist()

    @property
    def grades(self) -> pd.Series:
        """점수 목록의 복사본"""
        return self._df['Grade'].copy()

    # ------------------------------------------------------------------
    # 계산 결과 (항상 현재 목록 기준)
    # ------------------------------------------------------------------

    def to_dataframe(self) -> pd.DataFrame:
        """
        현재 순서대로 Name, Grade, Percentile, Rank 컬럼을 가진 DataFrame 을
        반환합니다. 반환값은 복사본입니다.
        """
        return attach_statistics(self._df, grade_col='Grade')

    @property
    def entries(self) -> List[Entry]:
        """석차와 백분위가 채워진 Entry 목록 (현재 순서)"""
        annotated = self.to_dataframe()
        return [
            Entry(
                name=row.Name,
                grade=float(row.Grade),
                rank=int(row.Rank),
                percentile=float(row.Percentile),
            )
            for row in annotated.itertuples(index=False)
        ]

    def statistics(self) -> ExamStatistics:
        return calculate_exam_statistics(self._df['Grade'], self.max_grade)

    def histogram(self, step: float = DEFAULT_HISTOGRAM_STEP) -> Histogram:
        return calculate_histogram(self._df['Grade'], self.max_grade, step)

    # ------------------------------------------------------------------
    # 정렬
    # ------------------------------------------------------------------

    def sort_by_name(self) -> None:
        """
        이름 오름차순으로 정렬합니다.

        대소문자와 발음 구별 기호를 무시하며 ("á" 는 "a" 로 비교), 같은 이름은
        기존 순서를 유지합니다.
        """
        self._df = self._df.sort_values(
            'Name',
            key=lambda names: names.map(normalize_name),
            kind='stable',
            ignore_index=True,
        )

    def sort_by_grade(self) -> None:
        """
        점수 내림차순으로 정렬합니다. 동점자는 이름 오름차순입니다.

        이름으로 먼저 안정 정렬한 뒤 점수로 다시 안정 정렬합니다.
        """
        self.sort_by_name()
        self._df = self._df.sort_values(
            'Grade',
            ascending=False,
            kind='stable',
            ignore_index=True,
        )

    # ------------------------------------------------------------------
    # 필터
    # ------------------------------------------------------------------

    def _retain(self, mask: pd.Series, reason: str) -> None:
        removed = int((~mask).sum())
        self._df = self._df[mask].reset_index(drop=True)
        logger.debug("%s filter removed %d of %d students", reason, removed, removed + len(self._df))

    def filter_by_name(self, queries: Union[str, Iterable[str]]) -> None:
        """
        이름에 검색어 중 하나라도 포함된 학생만 남깁니다.

        대소문자를 구분하지 않는 부분 문자열 검색이며, 검색어가 없으면 아무도
        남지 않습니다.

        Args:
            queries (Union[str, Iterable[str]]): 검색어 또는 검색어 목록

        Examples:
            >>> exam = Exam([("Joan", 4.6), ("Jose", 3.6), ("David", 7.94)])
            >>> exam.filter_by_name(["jo"])
            >>> exam.names
            ['Joan', 'Jose']
        """
        if isinstance(queries, str):
            queries = [queries]
        lowered = [str(q).lower() for q in queries]
        mask = self._df['Name'].map(
            lambda name: any(q in name.lower() for q in lowered)
        ).astype(bool)
        self._retain(mask, 'name')

    def filter_by_names(self, names: Iterable[str]) -> None:
        """주어진 이름 목록과 정확히 일치하는(대소문자 무시) 학생만 남깁니다."""
        allowed = {str(name).lower() for name in names}
        mask = self._df['Name'].map(lambda name: name.lower() in allowed).astype(bool)
        self._retain(mask, 'membership')

    def filter_by_exam(self, *others: 'Exam') -> None:
        """
        다른 시험들에 모두 응시한 학생만 남깁니다.

        여러 시험이 주어지면 차례로 교집합을 적용합니다.

        Args:
            *others (Exam): 비교할 시험
        """
        for other in others:
            self.filter_by_names(other.names)
