"""
예술적 효과 필터 모듈

연필, 윤곽선, 숯, 부드러운 스케치 스타일을 제공합니다.
모든 스타일은 RGBA 이미지를 받아 같은 크기의 불투명한 흑백 RGBA 이미지를 반환합니다.
"""

import math
from abc import abstractmethod
from typing import Any, Dict

import numpy as np

from filters.base_filter import BaseFilter, FilterManager
from filters.basic_filters import (
    apply_contrast,
    broadcast_to_rgba,
    clamp_to_uint8,
    invert,
    rgba_to_grayscale,
)
from filters.errors import InvalidInputError, ProcessingError
from filters.pixel_effects import detect_edges, gaussian_blur

DEFAULT_SKETCH_PARAMS = {
    "blur_radius": 5,
    "edge_strength": 1.0,
    "contrast": 1.0,
}


class SketchFilter(BaseFilter):
    """스케치 스타일 공통 베이스"""

    def __init__(self, name: str, description: str = ""):
        super().__init__(name, description)
        self.set_default_params(DEFAULT_SKETCH_PARAMS)

    def validate_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        파라미터 유효성 검증 및 기본값 적용

        Args:
            params: blur_radius, edge_strength, contrast

        Returns:
            타입이 정리된 파라미터
        """
        validated = super().validate_params(params)

        try:
            blur_radius = int(validated["blur_radius"])
            edge_strength = float(validated["edge_strength"])
            contrast = float(validated["contrast"])
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidInputError(f"파라미터 형식이 올바르지 않습니다: {e}") from e

        if blur_radius < 0:
            raise InvalidInputError(f"블러 반경은 0 이상이어야 합니다: {blur_radius}")
        if not math.isfinite(edge_strength) or edge_strength < 0:
            raise InvalidInputError(f"엣지 강도는 0 이상이어야 합니다: {edge_strength}")
        if not math.isfinite(contrast):
            raise InvalidInputError(f"대비 값이 올바르지 않습니다: {contrast}")

        validated.update(
            blur_radius=blur_radius, edge_strength=edge_strength, contrast=contrast
        )
        return validated

    def apply(self, image: np.ndarray, **params) -> np.ndarray:
        """
        스케치 효과 적용

        Args:
            image: 입력 이미지 (H, W, 4) RGBA, 수정되지 않음
            blur_radius: 가우시안 블러 반경
            edge_strength: 소벨 엣지 강도 배율
            contrast: 대비 계수

        Returns:
            스케치 효과가 적용된 RGBA 이미지 (알파 255)
        """
        if image is None or image.ndim != 3 or image.shape[2] != 4:
            shape = None if image is None else image.shape
            raise InvalidInputError(f"RGBA 이미지가 필요합니다: {shape}")

        params = self.validate_params(params)
        gray = rgba_to_grayscale(image)

        values = self.render(
            gray, params["blur_radius"], params["edge_strength"], params["contrast"]
        )

        result = broadcast_to_rgba(clamp_to_uint8(values))
        if result.shape != image.shape:
            raise ProcessingError(
                f"{self.name} 결과 크기가 입력과 다릅니다: {result.shape} != {image.shape}"
            )
        return result

    @abstractmethod
    def render(
        self, gray: np.ndarray, blur_radius: int, edge_strength: float, contrast: float
    ) -> np.ndarray:
        """
        서브클래스에서 구현: 휘도 버퍼로부터 최종 값 계산 (저장 전, float 허용)
        """
        pass


class PencilSketchFilter(SketchFilter):
    """연필 스케치 필터"""

    def __init__(self):
        super().__init__("pencil", "반전 블러와 닷지 블렌드로 연필 스케치를 만듭니다")

    def render(self, gray, blur_radius, edge_strength, contrast):
        blurred = gaussian_blur(invert(gray), blur_radius)
        value = self._dodge_blend(gray, blurred)
        return apply_contrast(value, contrast)

    def _dodge_blend(self, front: np.ndarray, back: np.ndarray) -> np.ndarray:
        """
        Dodge blend mode 구현

        Args:
            front: 전경 이미지 (회색조)
            back: 배경 이미지 (반전 후 블러)

        Returns:
            [0, 255] 범위의 블렌드 값 (float)
        """
        base = front.astype(np.float64)
        divisor = 255 - back.astype(np.float64)

        # 분모가 0이면 포화(흰색)
        ratio = np.divide(
            base, divisor, out=np.full_like(base, np.inf), where=divisor != 0
        )
        return np.clip(ratio * 255, 0, 255)


class OutlineSketchFilter(SketchFilter):
    """윤곽선 스케치 필터 (blur_radius 사용 안 함)"""

    def __init__(self):
        super().__init__("outline", "소벨 엣지를 반전시켜 윤곽선 그림을 만듭니다")

    def render(self, gray, blur_radius, edge_strength, contrast):
        edges = detect_edges(gray, edge_strength)
        return apply_contrast(invert(edges), contrast)


class CharcoalSketchFilter(SketchFilter):
    """숯 스케치 필터"""

    def __init__(self):
        super().__init__("charcoal", "강한 블러와 엣지를 합쳐 숯 느낌을 만듭니다")

    def render(self, gray, blur_radius, edge_strength, contrast):
        blurred = gaussian_blur(gray, blur_radius * 2)
        # 엣지는 블러 전 회색조에서 계산
        edges = detect_edges(gray, edge_strength * 1.5)

        value = np.minimum(
            blurred.astype(np.float64) * 0.7, 255 - edges.astype(np.float64) * 0.8
        )
        return apply_contrast(value, contrast * 0.8)


class SoftSketchFilter(SketchFilter):
    """부드러운 스케치 필터"""

    def __init__(self):
        super().__init__("soft", "원본과 블러를 섞어 부드러운 스케치를 만듭니다")

    def render(self, gray, blur_radius, edge_strength, contrast):
        blurred = gaussian_blur(gray, blur_radius)
        value = gray.astype(np.float64) * 0.7 + blurred.astype(np.float64) * 0.3
        return apply_contrast(value, contrast * 0.7)


def create_default_manager() -> FilterManager:
    """네 가지 스케치 스타일이 등록된 필터 관리자 생성 (기본값: pencil)"""
    manager = FilterManager(default_filter_name="pencil")
    manager.register_filter(PencilSketchFilter())
    manager.register_filter(OutlineSketchFilter())
    manager.register_filter(CharcoalSketchFilter())
    manager.register_filter(SoftSketchFilter())
    return manager
