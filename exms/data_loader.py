"""
데이터 로더 모듈

시험 점수 파일(TOML, JSON)을 읽어 Exam 객체로 변환하는 기능을 제공합니다.

파일 형식:
    [details]                       # 선택
    name = "Econometrics"           # 선택, 없으면 파일 이름 사용
    max_grade = 10.0                # 선택, 기본값 10.0

    [students]
    "Abad Martinez, Jose" = 4.89
    "Alcántara Campillo, Irene" = 4.41

JSON 파일은 같은 구조의 객체 하나({"details": {...}, "students": {...}})입니다.
학생 순서는 파일에 적힌 순서를 따릅니다.
"""

import json
import logging
import numbers
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from .config import SUPPORTED_FORMATS
from .exam import Exam

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

ALLOWED_TOP_LEVEL_KEYS = {'details', 'students'}
ALLOWED_DETAIL_KEYS = {'name', 'title', 'max_grade'}


class ExamFileError(Exception):
    """시험 파일 처리 중 발생하는 모든 오류의 기반 클래스"""

    def __init__(self, path: PathLike, message: str):
        self.path = Path(path)
        super().__init__(message)


class ExamFileReadError(ExamFileError):
    """파일을 열거나 읽지 못했을 때"""

    def __init__(self, path: PathLike, cause: OSError):
        self.cause = cause
        super().__init__(path, f"'{path}' 파일을 읽는 중 오류가 발생했습니다: {cause}")


class ExamFileParseError(ExamFileError):
    """파일 내용을 해석하지 못했거나 형식이 맞지 않을 때"""

    def __init__(self, path: PathLike, file_format: str, reason: str):
        self.format = file_format
        self.reason = reason
        super().__init__(path, f"'{path}' 파일을 해석하는 중 오류가 발생했습니다 ({file_format}): {reason}")


class MissingFormatError(ExamFileError):
    """파일 확장자가 없을 때"""

    def __init__(self, path: PathLike):
        super().__init__(path, f"'{path}' 파일의 확장자를 알 수 없습니다.")


class UnsupportedFormatError(ExamFileError):
    """지원하지 않는 확장자일 때"""

    def __init__(self, path: PathLike, extension: str):
        self.extension = extension
        super().__init__(
            path,
            f"'{path}' 파일은 지원하지 않는 형식입니다: .{extension} "
            f"(지원 형식: {', '.join('.' + f for f in SUPPORTED_FORMATS)})"
        )


def detect_format(path: PathLike) -> str:
    """
    파일 확장자로 형식을 판별합니다.

    Args:
        path (PathLike): 파일 경로 또는 이름

    Returns:
        str: 'toml' 또는 'json'

    Raises:
        MissingFormatError: 확장자가 없을 때
        UnsupportedFormatError: 지원하지 않는 확장자일 때

    Examples:
        >>> detect_format("students.TOML")
        'toml'
    """
    suffix = Path(path).suffix
    if not suffix:
        raise MissingFormatError(path)

    extension = suffix[1:].lower()
    if extension not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(path, suffix[1:])

    return extension


def _deserialize(content: str, file_format: str, path: PathLike) -> Any:
    try:
        if file_format == 'toml':
            return tomllib.loads(content)
        return json.loads(content)
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise ExamFileParseError(path, file_format, str(e)) from e


def _validate_document(document: Any, file_format: str, path: PathLike) -> Dict[str, Any]:
    def fail(reason: str):
        raise ExamFileParseError(path, file_format, reason)

    if not isinstance(document, dict):
        fail("최상위 값은 테이블(객체)이어야 합니다.")

    unknown = set(document) - ALLOWED_TOP_LEVEL_KEYS
    if unknown:
        fail(f"알 수 없는 항목: {', '.join(sorted(unknown))}")

    students = document.get('students')
    if students is None:
        fail("'students' 항목이 없습니다.")
    if not isinstance(students, dict):
        fail("'students' 항목은 {이름: 점수} 테이블이어야 합니다.")

    for name, grade in students.items():
        if isinstance(grade, bool) or not isinstance(grade, numbers.Real):
            fail(f"'{name}' 학생의 점수가 숫자가 아닙니다: {grade!r}")

    details = document.get('details')
    if details is None:
        details = {}
    if not isinstance(details, dict):
        fail("'details' 항목은 테이블이어야 합니다.")

    unknown = set(details) - ALLOWED_DETAIL_KEYS
    if unknown:
        fail(f"'details' 의 알 수 없는 항목: {', '.join(sorted(unknown))}")

    for key in ('name', 'title'):
        if key in details and not isinstance(details[key], str):
            fail(f"'details.{key}' 는 문자열이어야 합니다.")

    max_grade = details.get('max_grade')
    if max_grade is not None:
        if isinstance(max_grade, bool) or not isinstance(max_grade, numbers.Real):
            fail(f"'details.max_grade' 는 숫자여야 합니다: {max_grade!r}")
        if max_grade < 0:
            fail(f"'details.max_grade' 는 0 이상이어야 합니다: {max_grade!r}")

    return {'students': students, 'details': details}


def parse_exam_content(content: str, path: PathLike, file_format: Optional[str] = None) -> Exam:
    """
    파일 내용 문자열을 Exam 으로 변환합니다.

    Args:
        content (str): 파일 내용
        path (PathLike): 파일 경로 또는 이름 (형식 판별과 기본 제목에 사용)
        file_format (Optional[str]): 'toml' 또는 'json'. 없으면 확장자로 판별

    Returns:
        Exam: 파일 순서대로 학생이 담긴 시험

    Raises:
        MissingFormatError, UnsupportedFormatError: 형식을 판별할 수 없을 때
        ExamFileParseError: 내용을 해석하지 못했을 때
    """
    if file_format is None:
        file_format = detect_format(path)

    document = _validate_document(_deserialize(content, file_format, path), file_format, path)
    details = document['details']

    # 제목 우선순위: details.name > details.title > 파일 이름
    title = details.get('name') or details.get('title') or Path(path).stem or None

    try:
        exam = Exam.from_mapping(document['students'], title=title)
        if details.get('max_grade') is not None:
            exam.set_max_grade(details['max_grade'])
    except ValueError as e:
        raise ExamFileParseError(path, file_format, str(e)) from e

    logger.debug("Loaded %d students from %s (%s)", len(exam), path, file_format)
    return exam


def load_exam_file(path: PathLike) -> Exam:
    """
    시험 파일을 읽어 Exam 으로 변환합니다.

    Args:
        path (PathLike): .toml 또는 .json 파일 경로

    Returns:
        Exam: 파일 내용으로 만든 시험

    Raises:
        MissingFormatError: 확장자가 없을 때
        UnsupportedFormatError: 지원하지 않는 확장자일 때
        ExamFileReadError: 파일을 읽지 못했을 때
        ExamFileParseError: 내용을 해석하지 못했을 때

    Examples:
        >>> exam = load_exam_file("students.toml")
        >>> exam.title
        'students'
    """
    path = Path(path)
    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ExamFileReadError(path, e) from e
    except UnicodeDecodeError as e:
        raise ExamFileParseError(path, detect_format(path), f"UTF-8 텍스트가 아닙니다: {e}") from e

    return parse_exam_content(content, path)


def load_uploaded_exam(uploaded_file) -> Exam:
    """
    업로드된 파일 객체(Streamlit UploadedFile 등)를 Exam 으로 변환합니다.

    Args:
        uploaded_file: name 속성과 getvalue() 메서드를 가진 파일 객체

    Returns:
        Exam: 파일 내용으로 만든 시험
    """
    name = uploaded_file.name
    file_format = detect_format(name)

    try:
        content = uploaded_file.getvalue().decode('utf-8')
    except UnicodeDecodeError as e:
        raise ExamFileParseError(name, file_format, f"UTF-8 텍스트가 아닙니다: {e}") from e

    return parse_exam_content(content, name, file_format)


def filter_exam_by_files(exam: Exam, paths: Iterable[PathLike]) -> None:
    """
    주어진 파일들에 모두 포함된 학생만 남깁니다.

    모든 파일을 먼저 읽은 뒤 교집합을 적용합니다. 하나라도 읽지 못하면
    오류를 그대로 전파하고 시험은 바뀌지 않습니다.

    Args:
        exam (Exam): 필터를 적용할 시험
        paths (Iterable[PathLike]): 비교할 시험 파일 경로 목록
    """
    others = [load_exam_file(path) for path in paths]
    exam.filter_by_exam(*others)


def filter_exam_by_uploads(exam: Exam, uploaded_files) -> None:
    """
    업로드된 시험 파일들에 모두 포함된 학생만 남깁니다.

    filter_exam_by_files 와 같이 모든 파일을 읽은 뒤에만 필터를 적용합니다.

    Args:
        exam (Exam): 필터를 적용할 시험
        uploaded_files: name 속성과 getvalue() 메서드를 가진 파일 객체 목록
    """
    others = [load_uploaded_exam(f) for f in uploaded_files or []]
    exam.filter_by_exam(*others)
