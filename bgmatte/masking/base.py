from __future__ import annotations
from abc import ABC, abstractmethod
import logging
import numpy as np

from ..pipeline.buffers import PixelBuffer
from ..schemas.config import THRESHOLD_MIN, THRESHOLD_MAX, BLUR_RADIUS_MIN, BLUR_RADIUS_MAX, clamp

# Sensitivity 1..100 maps onto 0..255 per-channel distance.
THRESHOLD_SCALE = 2.55


class Masker(ABC):
    @abstractmethod
    def build_mask(self, pixels: PixelBuffer, threshold: float) -> np.ndarray:
        """Return background mask (uint8 0/1, 1 = background), same HxW as image."""
        raise NotImplementedError


def clamp_threshold(threshold: float, logger: logging.Logger | None = None) -> float:
    t = clamp(float(threshold), THRESHOLD_MIN, THRESHOLD_MAX)
    if t != threshold and logger is not None:
        logger.warning(f"⚠️ threshold {threshold} outside [{THRESHOLD_MIN:g}, {THRESHOLD_MAX:g}]; using {t:g}")
    return t


def clamp_blur_radius(radius: float, logger: logging.Logger | None = None) -> int:
    r = int(clamp(int(round(float(radius))), BLUR_RADIUS_MIN, BLUR_RADIUS_MAX))
    if r != radius and logger is not None:
        logger.warning(f"⚠️ blur radius {radius} outside [{BLUR_RADIUS_MIN}, {BLUR_RADIUS_MAX}]; using {r}")
    return r


def color_limit(threshold: float) -> float:
    return threshold * THRESHOLD_SCALE
