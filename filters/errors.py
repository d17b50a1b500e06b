"""
스케치 변환 예외 모듈
"""


class SketchError(Exception):
    """스케치 변환 관련 예외의 기본 클래스"""


class InvalidInputError(SketchError, ValueError):
    """입력 이미지나 파라미터가 올바르지 않을 때 발생"""


class ProcessingError(SketchError):
    """필터 단계에서 결과를 만들지 못했을 때 발생"""
