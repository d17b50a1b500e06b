"""
필터 베이스 클래스 모듈

모든 스케치 필터의 기본이 되는 추상 클래스와 필터 관리자,
RGBA 버퍼 변환 함수를 정의합니다.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import numpy as np
from PIL import Image

from filters.errors import InvalidInputError


class BaseFilter(ABC):
    """
    필터 베이스 추상 클래스

    모든 필터는 이 클래스를 상속받아 구현해야 합니다.
    """

    def __init__(self, name: str, description: str = ""):
        """
        필터 초기화

        Args:
            name: 필터 이름
            description: 필터 설명
        """
        self.name = name
        self.description = description
        self._default_params = {}

    @abstractmethod
    def apply(self, image: np.ndarray, **params) -> np.ndarray:
        """
        이미지에 필터를 적용합니다 (추상 메서드)

        Args:
            image: 입력 이미지 (NumPy array, RGBA 형식)
            **params: 필터별 파라미터

        Returns:
            필터가 적용된 새 이미지 (NumPy array, RGBA 형식)
        """
        pass

    def set_default_params(self, params: Dict[str, Any]):
        """
        필터의 기본 파라미터를 설정합니다

        Args:
            params: 설정할 기본 파라미터
        """
        self._default_params = params.copy()

    def validate_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        파라미터 유효성 검증 및 기본값 적용

        Args:
            params: 검증할 파라미터

        Returns:
            검증 및 기본값이 적용된 파라미터
        """
        validated = self._default_params.copy()
        validated.update(params)
        return validated

    def __str__(self):
        return f"{self.name}: {self.description}"


class FilterManager:
    """
    필터 관리자

    등록된 스케치 스타일을 이름으로 관리합니다.
    알 수 없는 이름은 기본 필터로 대체됩니다.
    """

    def __init__(self, default_filter_name: str = "pencil"):
        self._registered_filters = {}
        self.default_filter_name = default_filter_name

    def register_filter(self, filter_obj: BaseFilter):
        """
        필터를 등록합니다

        Args:
            filter_obj: 등록할 필터 객체
        """
        self._registered_filters[filter_obj.name] = filter_obj

    def unregister_filter(self, filter_name: str):
        """
        필터 등록을 해제합니다

        Args:
            filter_name: 해제할 필터 이름
        """
        if filter_name in self._registered_filters:
            del self._registered_filters[filter_name]

    def get_filter(self, filter_name: str) -> Optional[BaseFilter]:
        """
        등록된 필터를 가져옵니다

        Args:
            filter_name: 필터 이름

        Returns:
            필터 객체 (없으면 None)
        """
        return self._registered_filters.get(filter_name)

    def get_all_filters(self) -> Dict[str, BaseFilter]:
        """
        등록된 모든 필터를 반환합니다

        Returns:
            필터 이름과 객체의 딕셔너리
        """
        return self._registered_filters.copy()

    def resolve_filter(self, filter_name: Optional[str]) -> BaseFilter:
        """
        이름에 해당하는 필터를 반환하고, 없으면 기본 필터를 반환합니다

        Args:
            filter_name: 필터 이름 (None 또는 알 수 없는 이름 허용)

        Returns:
            필터 객체
        """
        if filter_name:
            filter_obj = self.get_filter(str(filter_name).strip().lower())
            if filter_obj is not None:
                return filter_obj

        filter_obj = self.get_filter(self.default_filter_name)
        if filter_obj is None:
            raise KeyError(f"기본 필터 '{self.default_filter_name}'가 등록되지 않았습니다")
        return filter_obj


def to_rgba_array(buffer, width: int, height: int) -> np.ndarray:
    """
    RGBA 픽셀 버퍼를 (H, W, 4) 배열로 변환합니다

    입력 버퍼는 수정하지 않습니다. bytes 계열은 읽기 전용 뷰로 감쌉니다.

    Args:
        buffer: RGBA 버퍼 (bytes, bytearray, memoryview 또는 NumPy array)
        width: 이미지 너비
        height: 이미지 높이

    Returns:
        RGBA 이미지 (H, W, 4), uint8
    """
    if buffer is None:
        raise InvalidInputError("변환할 이미지가 없습니다")

    try:
        width, height = int(width), int(height)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidInputError(f"이미지 크기가 올바르지 않습니다: {width}x{height}") from e
    if width <= 0 or height <= 0:
        raise InvalidInputError(f"이미지 크기가 올바르지 않습니다: {width}x{height}")

    if isinstance(buffer, (bytes, bytearray, memoryview)):
        data = np.frombuffer(buffer, dtype=np.uint8)
    else:
        data = np.asarray(buffer)
        if data.dtype != np.uint8:
            if not np.issubdtype(data.dtype, np.number) or np.iscomplexobj(data):
                raise InvalidInputError(f"픽셀 버퍼 형식이 올바르지 않습니다: {data.dtype}")
            # NaN/무한대와 소수 값은 픽셀로 인정하지 않음
            if not np.isfinite(data).all() or not np.array_equal(data, np.round(data)):
                raise InvalidInputError("픽셀 값은 0에서 255 사이의 정수여야 합니다")
            if data.size and (data.min() < 0 or data.max() > 255):
                raise InvalidInputError("픽셀 값은 0에서 255 사이여야 합니다")
            data = data.astype(np.uint8)

    expected = width * height * 4
    if data.size != expected:
        raise InvalidInputError(
            f"버퍼 길이가 크기와 맞지 않습니다: {data.size} != {width}x{height}x4"
        )

    return data.reshape(height, width, 4)


def pil_to_numpy(image: Image.Image) -> np.ndarray:
    """
    PIL Image를 NumPy array로 변환합니다

    Args:
        image: PIL Image 객체

    Returns:
        NumPy array (RGBA 형식)
    """
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    return np.array(image)


def numpy_to_pil(array: np.ndarray) -> Image.Image:
    """
    NumPy array를 PIL Image로 변환합니다

    Args:
        array: NumPy array (RGBA 형식)

    Returns:
        PIL Image 객체
    """
    array = np.clip(array, 0, 255).astype(np.uint8)
    return Image.fromarray(array)
