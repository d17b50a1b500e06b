"""
픽셀 기반 효과 필터 모듈

분리형 가우시안 블러와 소벨 엣지 검출을 제공합니다.
두 연산 모두 단일 채널 휘도 버퍼 (H, W) uint8을 입력으로 받습니다.
"""

import numpy as np

from filters.basic_filters import clamp_to_uint8
from filters.errors import InvalidInputError

SOBEL_X = np.array([[-1, 0, 1],
                    [-2, 0, 2],
                    [-1, 0, 1]], dtype=np.float64)

SOBEL_Y = np.array([[-1, -2, -1],
                    [ 0,  0,  0],
                    [ 1,  2,  1]], dtype=np.float64)


def create_gaussian_kernel(radius: int) -> np.ndarray:
    """
    1차원 가우시안 커널 생성

    Args:
        radius: 커널 반경 (크기는 2 * radius + 1)

    Returns:
        합이 1이 되도록 정규화된 커널
    """
    if radius < 0:
        raise InvalidInputError(f"블러 반경은 0 이상이어야 합니다: {radius}")
    if radius == 0:
        return np.ones(1, dtype=np.float64)

    sigma = radius / 2
    offsets = np.arange(-radius, radius + 1, dtype=np.float64)
    kernel = np.exp(-(offsets * offsets) / (2 * sigma * sigma))

    return kernel / kernel.sum()


def _convolve_axis(data: np.ndarray, kernel: np.ndarray, axis: int) -> np.ndarray:
    """한 축 방향 가중 평균 (경계는 가장자리 픽셀 복제)"""
    radius = len(kernel) // 2
    pad_width = [(0, 0), (0, 0)]
    pad_width[axis] = (radius, radius)
    padded = np.pad(data.astype(np.float64), pad_width, mode="edge")

    length = data.shape[axis]
    total = np.zeros(data.shape, dtype=np.float64)
    for offset, weight in enumerate(kernel):
        if axis == 1:
            window = padded[:, offset:offset + length]
        else:
            window = padded[offset:offset + length, :]
        total += window * weight

    return total / kernel.sum()


def gaussian_blur(luminance: np.ndarray, radius: int) -> np.ndarray:
    """
    분리형 가우시안 블러 (가로 → 세로)

    Args:
        luminance: 휘도 버퍼 (H, W), uint8
        radius: 블러 반경 (0이면 입력 그대로)

    Returns:
        블러가 적용된 새 휘도 버퍼
    """
    radius = int(radius)
    if radius < 0:
        raise InvalidInputError(f"블러 반경은 0 이상이어야 합니다: {radius}")
    if radius == 0:
        return luminance.copy()

    kernel = create_gaussian_kernel(radius)

    # 가로 패스 결과도 8비트로 저장한 뒤 세로 패스에 사용
    horizontal = clamp_to_uint8(_convolve_axis(luminance, kernel, axis=1))
    return clamp_to_uint8(_convolve_axis(horizontal, kernel, axis=0))


def detect_edges(luminance: np.ndarray, strength: float) -> np.ndarray:
    """
    소벨 연산자로 엣지 강도 계산

    내부 픽셀만 계산하며 테두리(첫/마지막 행과 열)는 0으로 남습니다.

    Args:
        luminance: 휘도 버퍼 (H, W), uint8
        strength: 엣지 강도 배율

    Returns:
        엣지 강도 버퍼 (H, W), uint8
    """
    height, width = luminance.shape
    edges = np.zeros((height, width), dtype=np.uint8)
    if width < 3 or height < 3:
        return edges

    data = luminance.astype(np.float64)
    gx = np.zeros((height - 2, width - 2), dtype=np.float64)
    gy = np.zeros((height - 2, width - 2), dtype=np.float64)

    for ky in range(3):
        for kx in range(3):
            window = data[ky:ky + height - 2, kx:kx + width - 2]
            gx += window * SOBEL_X[ky, kx]
            gy += window * SOBEL_Y[ky, kx]

    magnitude = np.sqrt(gx * gx + gy * gy) * strength
    edges[1:-1, 1:-1] = clamp_to_uint8(np.minimum(magnitude, 255))

    return edges
