"""
스케치 변환 서비스 컴포넌트
"""

from .converter import ConversionResult, SketchConverter

__all__ = ["ConversionResult", "SketchConverter"]
