"""
스케치 변환 서비스 테스트
"""

import threading

import numpy as np
import pytest

from filters.artistic import PencilSketchFilter, SketchFilter, create_default_manager
from services import ConversionResult, SketchConverter
from services.converter import BUSY_MESSAGE, GENERIC_FAILURE_MESSAGE


class BrokenFilter(SketchFilter):
    """항상 실패하는 테스트용 필터"""

    def __init__(self):
        super().__init__("broken", "테스트용")

    def render(self, gray, blur_radius, edge_strength, contrast):
        raise ZeroDivisionError("boom")


class BlockingFilter(SketchFilter):
    """이벤트가 설정될 때까지 대기하는 테스트용 필터"""

    def __init__(self):
        super().__init__("blocking", "테스트용")
        self.started = threading.Event()
        self.release = threading.Event()

    def render(self, gray, blur_radius, edge_strength, contrast):
        self.started.set()
        self.release.wait(timeout=10)
        return gray


def create_buffer(width=5, height=4):
    image = np.zeros((height, width, 4), dtype=np.uint8)
    image[..., 0] = 200
    image[..., 1] = np.arange(width, dtype=np.uint8) * 40
    image[..., 3] = 255
    return image


@pytest.fixture
def converter():
    manager = create_default_manager()
    manager.register_filter(BrokenFilter())
    converter = SketchConverter(filter_manager=manager)
    yield converter
    converter.shutdown()


def test_convert_flat_bytes(converter):
    image = create_buffer()
    result = converter.convert(image.tobytes(), 5, 4, style="outline")

    assert isinstance(result, ConversionResult)
    assert result.success
    assert result.error is None
    assert result.style == "outline"
    assert len(result.buffer) == len(image.tobytes())
    assert np.all(result.image[..., 3] == 255)
    assert converter.last_output is result.image


def test_convert_end_to_end_white_outline(converter):
    white = bytes([255] * (4 * 4 * 4))
    result = converter.convert(white, 4, 4, style="outline", blur_radius=7,
                               edge_strength=1.0, contrast=1.0)

    assert result.success
    assert result.buffer == white


def test_convert_uses_defaults_and_fallback(converter):
    image = create_buffer()
    fallback = converter.convert(image, 5, 4, style="mystery")
    pencil = converter.convert(image, 5, 4, style="pencil")
    default = converter.convert(image, 5, 4)

    assert fallback.style == "pencil"
    assert np.array_equal(fallback.image, pencil.image)
    assert np.array_equal(default.image, pencil.image)

    expected = PencilSketchFilter().apply(image, blur_radius=5, edge_strength=1.0, contrast=1.0)
    assert np.array_equal(pencil.image, expected)


def test_convert_invalid_input_keeps_previous_output(converter):
    good = converter.convert(create_buffer(), 5, 4, style="soft")
    assert good.success

    result = converter.convert(bytes(10), 5, 4, style="soft")
    assert not result.success
    assert result.image is None
    assert result.buffer is None
    assert result.error_kind == "invalid_input"
    assert converter.last_output is good.image

    missing = converter.convert(None, 5, 4)
    assert missing.error_kind == "invalid_input"

    negative = converter.convert(create_buffer(), 5, 4, blur_radius=-3)
    assert negative.error_kind == "invalid_input"


def test_convert_processing_failure(converter):
    good = converter.convert(create_buffer(), 5, 4)
    result = converter.convert(create_buffer(), 5, 4, style="broken")

    assert not result.success
    assert result.error_kind == "processing_failure"
    assert result.error == GENERIC_FAILURE_MESSAGE
    assert converter.last_output is good.image
    assert not converter.is_processing


def test_signals(converter):
    started, completed, failed = [], [], []
    converter.conversion_started.connect(started.append)
    converter.conversion_completed.connect(lambda image, elapsed: completed.append(image))
    converter.conversion_failed.connect(failed.append)

    converter.convert(create_buffer(), 5, 4, style="charcoal")
    converter.convert(create_buffer(), 5, 4, style="broken")

    assert started == ["charcoal", "broken"]
    assert len(completed) == 1
    assert completed[0].shape == (4, 5, 4)
    assert failed == [GENERIC_FAILURE_MESSAGE]


def test_submit_runs_in_background(converter):
    future = converter.submit(create_buffer(), 5, 4, style="soft", blur_radius=1)
    result = future.result(timeout=10)

    assert result.success
    assert result.style == "soft"
    assert not converter.is_processing


def test_at_most_one_conversion():
    blocking = BlockingFilter()
    manager = create_default_manager()
    manager.register_filter(blocking)
    converter = SketchConverter(filter_manager=manager)

    try:
        future = converter.submit(create_buffer(), 5, 4, style="blocking")
        assert blocking.started.wait(timeout=10)
        assert converter.is_processing

        # 실행 중인 요청은 거절 (대기열에 넣지 않음)
        assert converter.submit(create_buffer(), 5, 4) is None
        busy = converter.convert(create_buffer(), 5, 4)
        assert not busy.success
        assert busy.error_kind == "busy"
        assert busy.error == BUSY_MESSAGE

        blocking.release.set()
        assert future.result(timeout=10).success
        assert not converter.is_processing

        assert converter.convert(create_buffer(), 5, 4).success
    finally:
        blocking.release.set()
        converter.shutdown()


def test_reset(converter):
    converter.convert(create_buffer(), 5, 4)
    assert converter.last_output is not None
    converter.reset()
    assert converter.last_output is None


@pytest.fixture
def settings():
    from config.settings import SettingsManager

    settings = SettingsManager()
    settings.reset_to_defaults()
    yield settings
    settings.reset_to_defaults()


def test_bad_setting_becomes_failure(settings):
    settings.set("sketch/blur_radius", "wide")
    converter = SketchConverter(settings=settings)

    result = converter.convert(create_buffer(), 5, 4)

    assert not result.success
    assert result.error_kind == "processing_failure"
    assert result.error == GENERIC_FAILURE_MESSAGE
    assert not converter.is_processing


def test_missing_default_filter_becomes_failure(settings):
    manager = create_default_manager()
    manager.unregister_filter("pencil")
    converter = SketchConverter(filter_manager=manager, settings=settings)

    result = converter.convert(create_buffer(), 5, 4, style="watercolor")

    assert not result.success
    assert result.error_kind == "processing_failure"
    assert result.style == "watercolor"


def test_unspecified_style_is_pencil(settings):
    settings.set("sketch/style", "outline")
    converter = SketchConverter(settings=settings)

    result = converter.convert(create_buffer(), 5, 4)

    assert result.success
    assert result.style == "pencil"


@pytest.mark.parametrize(
    "buffer",
    [
        np.full(80, np.nan),
        np.full(80, np.inf),
        np.full(80, 12.5),
    ],
)
def test_non_integral_pixels_are_invalid_input(converter, buffer):
    result = converter.convert(buffer, 5, 4)

    assert not result.success
    assert result.error_kind == "invalid_input"
    assert converter.last_output is None


@pytest.mark.parametrize(
    "width, height, params",
    [
        (5, 4, {"blur_radius": float("inf")}),
        (5, 4, {"blur_radius": float("nan")}),
        (5, 4, {"edge_strength": float("inf")}),
        ("five", 4, {}),
        (5, None, {}),
    ],
)
def test_bad_arguments_are_invalid_input(converter, width, height, params):
    result = converter.convert(create_buffer().tobytes(), width, height, **params)

    assert not result.success
    assert result.error_kind == "invalid_input"
