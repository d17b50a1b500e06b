"""
설정 관리자

스케치 변환의 기본 파라미터와 허용 범위, 입력/출력 관련 설정을 관리합니다.
설정은 메모리에만 보관되며 디스크에 저장하지 않습니다.
"""

from typing import Any, Dict, Tuple


class SettingsManager:
    """
    애플리케이션 설정 관리자

    싱글톤 패턴으로 구현되어 애플리케이션 전체에서 동일한 인스턴스를 사용합니다.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True

        # 기본값 정의
        self._defaults = {
            # 스케치 기본 파라미터
            "sketch/style": "pencil",  # pencil, outline, charcoal, soft
            "sketch/blur_radius": 5,
            "sketch/edge_strength": 1.0,
            "sketch/contrast": 1.0,
            # 파라미터 허용 범위 (최소, 최대)
            "limits/blur_radius": (0, 20),
            "limits/edge_strength": (0.0, 5.0),
            "limits/contrast": (0.1, 3.0),
            # 입력 이미지
            "input/max_file_size_mb": 10,
            # 화면 표시 크기
            "display/max_width": 500,
            "display/max_height": 500,
            # 내보내기
            "export/filename": "sketch-magic.png",
        }
        self._values = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        설정 값을 가져옵니다.

        Args:
            key: 설정 키 (예: "sketch/style")
            default: 기본값 (None이면 _defaults에서 찾음)

        Returns:
            설정 값
        """
        if default is None:
            default = self._defaults.get(key)
        return self._values.get(key, default)

    def get_int(self, key: str, default: int = None) -> int:
        """정수 타입 설정 값을 가져옵니다."""
        return int(self.get(key, default))

    def get_float(self, key: str, default: float = None) -> float:
        """실수 타입 설정 값을 가져옵니다."""
        return float(self.get(key, default))

    def get_bool(self, key: str, default: bool = None) -> bool:
        """불리언 타입 설정 값을 가져옵니다."""
        value = self.get(key, default)
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value)

    def get_range(self, name: str) -> Tuple[float, float]:
        """
        파라미터 허용 범위를 반환합니다.

        Args:
            name: 파라미터 이름 (예: "blur_radius")

        Returns:
            (최소, 최대) 튜플
        """
        low, high = self.get(f"limits/{name}")
        return low, high

    def set(self, key: str, value: Any) -> None:
        """
        설정 값을 변경합니다.

        Args:
            key: 설정 키
            value: 저장할 값
        """
        self._values[key] = value

    def remove(self, key: str) -> None:
        """변경된 설정 값을 지우고 기본값으로 되돌립니다."""
        self._values.pop(key, None)

    def reset_to_defaults(self) -> None:
        """모든 설정을 기본값으로 초기화합니다."""
        self._values.clear()

    def get_all(self) -> Dict[str, Any]:
        """현재 모든 설정을 딕셔너리로 반환합니다."""
        result = {}
        for key in self._defaults.keys():
            result[key] = self.get(key)
        return result

    def get_sketch_defaults(self) -> Dict[str, Any]:
        """스케치 변환 기본 파라미터를 반환합니다."""
        return {
            "style": self.get("sketch/style"),
            "blur_radius": self.get_int("sketch/blur_radius"),
            "edge_strength": self.get_float("sketch/edge_strength"),
            "contrast": self.get_float("sketch/contrast"),
        }
