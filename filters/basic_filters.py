"""
기본 필터 모듈

회색조 변환, 톤 반전, 대비 조정 등 픽셀 단위 기본 연산을 구현합니다.
"""

import numpy as np


def clamp_to_uint8(values) -> np.ndarray:
    """
    값을 8비트 버퍼에 저장 가능한 형태로 변환합니다

    NaN은 0, 무한대는 범위 끝값으로 처리하고 반올림(짝수 우선) 후
    [0, 255]로 잘라냅니다.

    Args:
        values: 스칼라 또는 배열

    Returns:
        uint8 배열
    """
    values = np.nan_to_num(
        np.asarray(values, dtype=np.float64), nan=0.0, posinf=255.0, neginf=0.0
    )
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def rgba_to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    RGBA 이미지를 단일 채널 휘도 버퍼로 변환합니다

    Args:
        image: 입력 이미지 (NumPy array, (H, W, 4) RGBA 형식)

    Returns:
        휘도 버퍼 (H, W), uint8
    """
    rgb = image[..., :3].astype(np.float64)
    # 표준 휘도 가중치, 알파는 무시
    gray = rgb[..., 0] * 0.299 + rgb[..., 1] * 0.587 + rgb[..., 2] * 0.114
    return clamp_to_uint8(gray)


def invert(luminance: np.ndarray) -> np.ndarray:
    """톤 반전 (255 - 값)"""
    return (255 - luminance).astype(np.uint8)


def apply_contrast(value, contrast: float):
    """
    중간값(128)을 기준으로 대비를 조정합니다

    이 단계에서는 범위를 제한하지 않습니다. 저장 시점에
    clamp_to_uint8로 잘라냅니다.

    Args:
        value: 스칼라 또는 배열
        contrast: 대비 계수

    Returns:
        조정된 값 (float)
    """
    if isinstance(value, np.ndarray):
        value = value.astype(np.float64)
    return (value - 128) * contrast + 128


def broadcast_to_rgba(luminance: np.ndarray) -> np.ndarray:
    """
    휘도 버퍼를 불투명한 RGBA 이미지로 확장합니다

    Args:
        luminance: 휘도 버퍼 (H, W), uint8

    Returns:
        RGBA 이미지 (H, W, 4), 알파는 항상 255
    """
    height, width = luminance.shape
    result = np.empty((height, width, 4), dtype=np.uint8)
    result[..., 0] = luminance
    result[..., 1] = luminance
    result[..., 2] = luminance
    result[..., 3] = 255
    return result
