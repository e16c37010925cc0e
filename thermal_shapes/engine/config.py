"""Analysis configuration: frame geometry plus classification thresholds."""

from __future__ import annotations

from dataclasses import dataclass, field

from thermal_shapes.config import settings
from thermal_shapes.engine import constants


@dataclass
class AnalysisConfig:
    """Controls the per-frame pipeline. Defaults come from settings/constants."""

    frame_width: int = field(default_factory=lambda: settings.frame_width)
    frame_height: int = field(default_factory=lambda: settings.frame_height)
    mask_bit: int = 255

    # Waist search
    slant_window_rows: int = constants.SLANT_WINDOW_ROWS
    slant_distance_tolerance: float = constants.SLANT_DISTANCE_TOLERANCE

    # Classification
    circularity_tolerance: int = constants.CIRCULARITY_TOLERANCE
    ceiling_heat_min_rows: int = constants.CEILING_HEAT_MIN_ROWS

    # Smoothing
    fill_cracks: bool = True
    crack_ratio: float = constants.CRACK_RATIO
