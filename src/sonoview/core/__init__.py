"""Core components for SonoView."""

from .config import Config, DetectionConfig
from .result import Circle, CircleResult, Line, LineResult, ResultKind
from .detector import DetectionMethod, UltrasoundDetector

__all__ = [
    "Config",
    "DetectionConfig",
    "Circle",
    "CircleResult",
    "Line",
    "LineResult",
    "ResultKind",
    "DetectionMethod",
    "UltrasoundDetector",
]
