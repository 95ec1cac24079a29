"""
설정 모듈

시험 분석에 사용되는 기본값과 중첩 설정 딕셔너리 접근 함수를 제공합니다.
"""

import copy
from typing import Any, Dict


DEFAULT_MAX_GRADE = 10.0
DEFAULT_HISTOGRAM_STEP = 1.0
SUPPORTED_FORMATS = ('toml', 'json')

# 정렬 방식
SORT_MODES = {
    'grade': '점수순',
    'name': '이름순',
    'original': '파일 순서',
}

DEFAULT_APP_CONFIG: Dict[str, Any] = {
    # ============= 시험 기본 설정 =============
    'exam': {
        'max_grade': DEFAULT_MAX_GRADE,
        'title': None,
    },

    # ============= 화면 설정 =============
    'view': {
        'sort_mode': 'grade',
        'histogram_step': DEFAULT_HISTOGRAM_STEP,
        'name_queries': [],
    },
}


def new_app_config() -> Dict[str, Any]:
    """기본 설정의 독립된 복사본을 반환합니다."""
    return copy.deepcopy(DEFAULT_APP_CONFIG)


def get_config(config: Dict[str, Any], path: str, default=None):
    """
    설정 딕셔너리에서 값을 안전하게 가져옵니다.

    사용 예시:
        get_config(config, 'exam.max_grade')       → 10.0
        get_config(config, 'view.sort_mode')       → 'grade'
        get_config(config, 'view.unknown', 'x')    → 'x'
    """
    keys = path.split('.')
    value = config

    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default

    return value


def set_config(config: Dict[str, Any], path: str, value) -> None:
    """
    설정 딕셔너리의 값을 변경합니다. 중간 경로가 없으면 생성합니다.

    사용 예시:
        set_config(config, 'exam.max_grade', 30.0)
        set_config(config, 'view.name_queries', ['jo'])
    """
    keys = path.split('.')

    # 마지막 키 전까지 순회
    for key in keys[:-1]:
        if key not in config or not isinstance(config[key], dict):
            config[key] = {}
        config = config[key]

    config[keys[-1]] = value
