"""
스케치 변환 서비스

RGBA 버퍼를 받아 선택된 스케치 스타일을 적용하고 결과를 돌려줍니다.
한 번에 하나의 변환만 실행되며, 실행 중에 들어온 요청은 거절됩니다.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import NamedTuple, Optional

import numpy as np
from PyQt5.QtCore import QObject, pyqtSignal

from config.settings import SettingsManager
from filters.artistic import create_default_manager
from filters.base_filter import FilterManager, to_rgba_array
from filters.errors import InvalidInputError

GENERIC_FAILURE_MESSAGE = "이미지 변환 중 오류가 발생했습니다. 다른 이미지로 다시 시도해 주세요."
BUSY_MESSAGE = "이미 변환이 진행 중입니다"


class ConversionResult(NamedTuple):
    """변환 결과 (성공 시 image, 실패 시 error)"""

    image: Optional[np.ndarray]
    error: Optional[str] = None
    error_kind: Optional[str] = None  # invalid_input, processing_failure, busy
    elapsed: float = 0.0
    style: str = ""

    @property
    def success(self) -> bool:
        return self.image is not None

    @property
    def buffer(self) -> Optional[bytes]:
        """RGBA 순서의 평탄화된 바이트 버퍼"""
        if self.image is None:
            return None
        return self.image.tobytes()


class SketchConverter(QObject):
    """
    스케치 변환 관리자

    필터 관리자에서 스타일을 찾아 적용하고, 오류를 하나의 실패 결과로 변환합니다.
    convert()는 호출한 스레드에서, submit()은 백그라운드 작업 스레드에서 실행됩니다.
    """

    conversion_started = pyqtSignal(str)
    conversion_completed = pyqtSignal(np.ndarray, float)
    conversion_failed = pyqtSignal(str)

    def __init__(
        self,
        filter_manager: Optional[FilterManager] = None,
        settings: Optional[SettingsManager] = None,
    ):
        super().__init__()
        self.filter_manager = filter_manager or create_default_manager()
        self.settings = settings or SettingsManager()
        self.last_output = None

        self._processing_guard = threading.Lock()
        self._executor = None

    @property
    def is_processing(self) -> bool:
        """변환 실행 중 여부"""
        return self._processing_guard.locked()

    def convert(
        self,
        buffer,
        width: int,
        height: int,
        style: Optional[str] = None,
        blur_radius: Optional[int] = None,
        edge_strength: Optional[float] = None,
        contrast: Optional[float] = None,
    ) -> ConversionResult:
        """
        RGBA 버퍼를 스케치로 변환합니다

        Args:
            buffer: RGBA 버퍼 (길이 = width * height * 4)
            width: 이미지 너비
            height: 이미지 높이
            style: 스타일 이름 (알 수 없으면 pencil)
            blur_radius: 블러 반경 (None이면 설정 기본값)
            edge_strength: 엣지 강도 (None이면 설정 기본값)
            contrast: 대비 (None이면 설정 기본값)

        Returns:
            ConversionResult
        """
        if not self._processing_guard.acquire(blocking=False):
            return ConversionResult(None, BUSY_MESSAGE, "busy", style=style or "")

        try:
            return self._run_conversion(
                buffer, width, height, style, blur_radius, edge_strength, contrast
            )
        finally:
            self._processing_guard.release()

    def submit(
        self,
        buffer,
        width: int,
        height: int,
        style: Optional[str] = None,
        blur_radius: Optional[int] = None,
        edge_strength: Optional[float] = None,
        contrast: Optional[float] = None,
    ) -> Optional[Future]:
        """
        변환을 백그라운드 작업 스레드에서 실행합니다

        시그널은 작업 스레드에서 발생하므로 Qt 이벤트 루프가 있는 스레드에
        연결된 슬롯만 호출됩니다. Qt 없이 호출하는 경우 반환된 Future로
        결과를 받습니다.

        Returns:
            ConversionResult를 담을 Future (이미 실행 중이면 None)
        """
        if not self._processing_guard.acquire(blocking=False):
            return None

        try:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="sketch-converter"
                )
            return self._executor.submit(
                self._run_and_release,
                buffer, width, height, style, blur_radius, edge_strength, contrast,
            )
        except Exception:
            self._processing_guard.release()
            raise

    def reset(self):
        """이전 변환 결과를 지웁니다"""
        self.last_output = None

    def shutdown(self, wait: bool = True):
        """작업 스레드 종료"""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def _run_and_release(self, *args) -> ConversionResult:
        try:
            return self._run_conversion(*args)
        finally:
            self._processing_guard.release()

    def _run_conversion(
        self, buffer, width, height, style, blur_radius, edge_strength, contrast
    ) -> ConversionResult:
        style_name = style or self.filter_manager.default_filter_name
        start_time = time.time()

        try:
            # 스타일을 지정하지 않거나 알 수 없으면 기본 필터 (pencil)
            filter_obj = self.filter_manager.resolve_filter(style)
            style_name = filter_obj.name
            self.conversion_started.emit(style_name)

            defaults = self.settings.get_sketch_defaults()
            params = {
                "blur_radius": defaults["blur_radius"] if blur_radius is None else blur_radius,
                "edge_strength": defaults["edge_strength"] if edge_strength is None else edge_strength,
                "contrast": defaults["contrast"] if contrast is None else contrast,
            }

            image = to_rgba_array(buffer, width, height)
            validated_params = filter_obj.validate_params(params)
            result = filter_obj.apply(image, **validated_params)

        except InvalidInputError as e:
            elapsed_time = time.time() - start_time
            print(f"'{style_name}' 입력 오류: {e}")
            self.conversion_failed.emit(str(e))
            return ConversionResult(
                None, str(e), "invalid_input", elapsed_time, style_name
            )

        except Exception as e:
            elapsed_time = time.time() - start_time
            print(f"'{style_name}' 스케치 변환 중 오류 발생: {e}")
            self.conversion_failed.emit(GENERIC_FAILURE_MESSAGE)
            return ConversionResult(
                None,
                GENERIC_FAILURE_MESSAGE,
                "processing_failure",
                elapsed_time,
                style_name,
            )

        elapsed_time = time.time() - start_time
        self.last_output = result
        self.conversion_completed.emit(result, elapsed_time)

        return ConversionResult(result, None, None, elapsed_time, style_name)
