"""
Configuration for SonoView.

Two layers:
1. Config - hierarchical YAML loader with environment variable overrides
   (config/default.yaml, config/{SONOVIEW_ENV}.yaml, SONOVIEW_* variables)
2. DetectionConfig - immutable per-call parameter bundle consumed by every
   detector. Out-of-range values are clamped, never rejected.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml


class Config:
    """
    Hierarchical configuration loader.

    Load order (later overrides earlier):
    1. default.yaml
    2. {SONOVIEW_ENV}.yaml (development, production, etc.)
    3. Environment variables (SONOVIEW_*)

    Usage:
        config = Config()
        ratio = config.get('interfaces.min_peak_height_ratio', 0.15)
        # or
        detection = DetectionConfig.from_dict(config.as_dict)
    """

    ENV_PREFIX = "SONOVIEW_"

    def __init__(self, config_dir: Path | None = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Path to configuration directory. Defaults to project config/
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent.parent / "config"
        self.config_dir = Path(config_dir)
        self.env = os.getenv("SONOVIEW_ENV", "development")
        self._config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load and merge configuration files."""
        config: dict[str, Any] = {}

        default_path = self.config_dir / "default.yaml"
        if default_path.exists():
            with open(default_path, encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}

        env_path = self.config_dir / f"{self.env}.yaml"
        if env_path.exists():
            with open(env_path, encoding="utf-8") as f:
                env_config = yaml.safe_load(f) or {}
                config = self._deep_merge(config, env_config)

        return self._apply_env_overrides(config)

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: dict) -> dict:
        """
        Apply SONOVIEW_* environment variables.

        Nesting levels are separated by a double underscore so that
        snake_case keys survive:
        SONOVIEW_INTERFACES__MIN_PEAK_HEIGHT_RATIO=0.2
            -> config['interfaces']['min_peak_height_ratio'] = 0.2
        """
        for key, value in os.environ.items():
            if key.startswith(self.ENV_PREFIX) and key != "SONOVIEW_ENV":
                path = key[len(self.ENV_PREFIX) :].lower().split("__")
                self._set_nested(config, path, self._parse_value(value))
        return config

    def _set_nested(self, d: dict, keys: list, value: Any) -> None:
        """Set a nested dictionary value."""
        for key in keys[:-1]:
            d = d.setdefault(key, {})
        d[keys[-1]] = value

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "false"):
            return value.lower() == "true"
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            pass
        return value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Dot-separated path like 'ransac.iterations'
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value: Any = self._config
        for k in key.split("."):
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default
            if value is None:
                return default
        return value

    def __getitem__(self, key: str) -> Any:
        """Get top-level configuration section."""
        return self._config.get(key, {})

    @property
    def as_dict(self) -> dict[str, Any]:
        """Return configuration as dictionary."""
        return self._config.copy()


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


@dataclass(frozen=True)
class DetectionConfig:
    """
    Parameter bundle for a single detection call.

    Instances are immutable; use ``with_thresholds`` or
    ``dataclasses.replace`` to derive a modified copy. Every field is clamped
    into its documented range on construction.

    Attributes:
        canny_lower: Hysteresis lower threshold, [10, 200]
        canny_upper: Hysteresis upper threshold, [10, 200], always above canny_lower
        hough_threshold: Minimum accumulator votes for a line segment
        min_line_length: Segments shorter than this are discarded (pixels)
        max_line_gap: Largest gap bridged when joining collinear segments
        dp: Inverse accumulator resolution for Hough circles
        min_dist: Minimum distance between detected circle centers
        circle_param1: Upper edge threshold used by the Hough gradient method
        circle_param2: Center accumulator threshold (lower = more circles)
        min_radius: Smallest circle radius searched
        max_radius: Largest circle radius searched
        min_peak_height_ratio: Interface peak height as a fraction of width,
            [0.05, 0.5]
        blob_min_area: Smallest contour area accepted as a blob
        blob_max_area: Largest contour area accepted as a blob
        min_circularity: Blobs must score strictly above this
        perimeter_epsilon: Douglas-Peucker tolerance (pixels) applied to a
            contour before measuring its perimeter; 0 measures the raw chain
        ransac_max_lines: Upper bound on RANSAC rounds
        ransac_min_inliers: Minimum support for a RANSAC line
        ransac_iterations: Random trials per RANSAC round
        ransac_min_inlier_ratio: Early exit when best support / all edge
            points drops below this
        ransac_min_sample_distance: Sample pairs closer than this are skipped
        ransac_base_threshold: Inlier distance at the baseline resolution
        ransac_baseline_size: Resolution (pixels) the base threshold was tuned at
    """

    canny_lower: float = 30.0
    canny_upper: float = 90.0

    hough_threshold: int = 100
    min_line_length: float = 50.0
    max_line_gap: float = 10.0

    dp: float = 1.2
    min_dist: float = 80.0
    circle_param1: int = 100
    circle_param2: int = 20
    min_radius: int = 10
    max_radius: int = 200

    min_peak_height_ratio: float = 0.15

    blob_min_area: float = 100.0
    blob_max_area: float = 10000.0
    min_circularity: float = 0.6
    perimeter_epsilon: float = 1.0

    ransac_max_lines: int = 20
    ransac_min_inliers: int = 50
    ransac_iterations: int = 1000
    ransac_min_inlier_ratio: float = 0.02
    ransac_min_sample_distance: float = 50.0
    ransac_base_threshold: float = 3.0
    ransac_baseline_size: float = 640.0

    def __post_init__(self) -> None:
        lower = _clamp(float(self.canny_lower), 10.0, 200.0)
        upper = _clamp(float(self.canny_upper), 10.0, 200.0)
        if lower > upper:
            lower, upper = upper, lower
        # Hysteresis needs a strict gap; a pair pinned to one bound is split
        if lower == upper:
            if upper < 200.0:
                upper = lower + 1.0
            else:
                lower = upper - 1.0
        min_radius = max(0, int(self.min_radius))

        clamped = {
            "canny_lower": lower,
            "canny_upper": upper,
            "hough_threshold": max(1, int(self.hough_threshold)),
            "min_line_length": max(0.0, float(self.min_line_length)),
            "max_line_gap": max(0.0, float(self.max_line_gap)),
            "dp": max(1.0, float(self.dp)),
            "min_dist": max(1.0, float(self.min_dist)),
            "circle_param1": max(1, int(self.circle_param1)),
            "circle_param2": max(1, int(self.circle_param2)),
            "min_radius": min_radius,
            "max_radius": max(min_radius, int(self.max_radius)),
            "min_peak_height_ratio": _clamp(float(self.min_peak_height_ratio), 0.05, 0.5),
            "blob_min_area": max(0.0, float(self.blob_min_area)),
            "blob_max_area": max(float(self.blob_min_area), float(self.blob_max_area)),
            "min_circularity": _clamp(float(self.min_circularity), 0.0, 1.0),
            "perimeter_epsilon": max(0.0, float(self.perimeter_epsilon)),
            "ransac_max_lines": max(0, int(self.ransac_max_lines)),
            "ransac_min_inliers": max(2, int(self.ransac_min_inliers)),
            "ransac_iterations": max(1, int(self.ransac_iterations)),
            "ransac_min_inlier_ratio": _clamp(float(self.ransac_min_inlier_ratio), 0.0, 1.0),
            "ransac_min_sample_distance": max(0.0, float(self.ransac_min_sample_distance)),
            "ransac_base_threshold": max(0.0, float(self.ransac_base_threshold)),
            "ransac_baseline_size": max(1.0, float(self.ransac_baseline_size)),
        }
        for name, value in clamped.items():
            object.__setattr__(self, name, value)

    def with_thresholds(self, lower: float, upper: float) -> "DetectionConfig":
        """Return a copy using the given hysteresis thresholds."""
        return replace(self, canny_lower=lower, canny_upper=upper)

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "DetectionConfig":
        """
        Create a DetectionConfig from the nested YAML layout.

        Args:
            config: Dictionary with optional sections 'edges', 'hough_lines',
                'circles', 'blob', 'interfaces' and 'ransac'

        Returns:
            DetectionConfig with unspecified values left at their defaults
        """
        edges = config.get("edges", {}) or {}
        hough = config.get("hough_lines", {}) or {}
        circles = config.get("circles", {}) or {}
        blob = config.get("blob", {}) or {}
        interfaces = config.get("interfaces", {}) or {}
        ransac = config.get("ransac", {}) or {}
        defaults = cls()

        return cls(
            canny_lower=edges.get("lower", defaults.canny_lower),
            canny_upper=edges.get("upper", defaults.canny_upper),
            hough_threshold=hough.get("threshold", defaults.hough_threshold),
            min_line_length=hough.get("min_line_length", defaults.min_line_length),
            max_line_gap=hough.get("max_line_gap", defaults.max_line_gap),
            dp=circles.get("dp", defaults.dp),
            min_dist=circles.get("min_dist", defaults.min_dist),
            circle_param1=circles.get("param1", defaults.circle_param1),
            circle_param2=circles.get("param2", defaults.circle_param2),
            min_radius=circles.get("min_radius", defaults.min_radius),
            max_radius=circles.get("max_radius", defaults.max_radius),
            min_peak_height_ratio=interfaces.get(
                "min_peak_height_ratio", defaults.min_peak_height_ratio
            ),
            blob_min_area=blob.get("min_area", defaults.blob_min_area),
            blob_max_area=blob.get("max_area", defaults.blob_max_area),
            min_circularity=blob.get("min_circularity", defaults.min_circularity),
            perimeter_epsilon=blob.get("perimeter_epsilon", defaults.perimeter_epsilon),
            ransac_max_lines=ransac.get("max_lines", defaults.ransac_max_lines),
            ransac_min_inliers=ransac.get("min_inliers", defaults.ransac_min_inliers),
            ransac_iterations=ransac.get("iterations", defaults.ransac_iterations),
            ransac_min_inlier_ratio=ransac.get(
                "min_inlier_ratio", defaults.ransac_min_inlier_ratio
            ),
            ransac_min_sample_distance=ransac.get(
                "min_sample_distance", defaults.ransac_min_sample_distance
            ),
            ransac_base_threshold=ransac.get("base_threshold", defaults.ransac_base_threshold),
            ransac_baseline_size=ransac.get("baseline_size", defaults.ransac_baseline_size),
        )
