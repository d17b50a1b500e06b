from pathlib import Path
from typing import Optional

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from config.settings import SettingsManager
from filters.base_filter import numpy_to_pil, pil_to_numpy
from filters.errors import InvalidInputError


class FileManager:
    def __init__(self, settings: Optional[SettingsManager] = None):
        self.settings = settings or SettingsManager()
        self.current_file_path = None

    def load_image(self, file_path) -> np.ndarray:
        """
        지정된 경로의 이미지 파일을 RGBA 배열로 로드

        Args:
            file_path: 로드할 이미지 파일 경로

        Returns:
            이미지 데이터 (NumPy array, (H, W, 4) RGBA)
        """
        path = Path(file_path)
        if not path.is_file():
            raise InvalidInputError(f"파일을 찾을 수 없습니다: {path}")

        max_mb = self.settings.get_float("input/max_file_size_mb")
        if path.stat().st_size > max_mb * 1024 * 1024:
            raise InvalidInputError(f"이미지 크기는 {max_mb:g}MB 이하여야 합니다")

        try:
            with Image.open(path) as image:
                image_array = pil_to_numpy(image)
        except (UnidentifiedImageError, OSError) as e:
            raise InvalidInputError(
                f"올바른 이미지 파일(JPG, PNG 등)을 선택해 주세요: {path.name}"
            ) from e

        self.current_file_path = str(path)
        return image_array

    def fit_to_display(
        self,
        image: np.ndarray,
        max_width: Optional[int] = None,
        max_height: Optional[int] = None,
    ) -> np.ndarray:
        """
        비율을 유지하면서 표시 영역에 맞게 축소 (확대는 하지 않음)

        Args:
            image: RGBA 이미지
            max_width: 최대 너비 (None이면 설정값)
            max_height: 최대 높이 (None이면 설정값)

        Returns:
            축소된 이미지 (크기가 같으면 원본)
        """
        if max_width is None:
            max_width = self.settings.get_int("display/max_width")
        if max_height is None:
            max_height = self.settings.get_int("display/max_height")

        height, width = image.shape[:2]
        new_width, new_height = float(width), float(height)

        if new_width > max_width:
            new_height = new_height * max_width / new_width
            new_width = max_width

        if new_height > max_height:
            new_width = new_width * max_height / new_height
            new_height = max_height

        new_width = max(1, int(new_width))
        new_height = max(1, int(new_height))
        if (new_width, new_height) == (width, height):
            return image

        return cv2.resize(image, (new_width, new_height), interpolation=cv2.INTER_AREA)

    def save_image(self, image_data, file_path=None) -> Path:
        """
        이미지를 PNG로 저장

        Args:
            image_data: RGBA 이미지 (NumPy array)
            file_path: 저장 경로 (None이면 설정된 기본 파일 이름)

        Returns:
            저장된 파일 경로
        """
        if image_data is None:
            raise InvalidInputError("저장할 이미지가 없습니다")

        path = Path(file_path or self.settings.get("export/filename"))
        numpy_to_pil(image_data).save(path, format="PNG")
        return path

    def get_current_file_name(self):
        if self.current_file_path:
            return Path(self.current_file_path).name
        return None
