from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass
class MaskQC:
    background_px: int
    foreground_px: int
    foreground_fraction: float
    passed: bool


def evaluate_mask(mask: np.ndarray, min_fg_fraction: float, max_fg_fraction: float) -> MaskQC:
    total = int(mask.size)
    bg = int(np.count_nonzero(mask))
    fg = total - bg
    frac = fg / total if total else 0.0
    passed = total > 0 and (min_fg_fraction <= frac <= max_fg_fraction)
    return MaskQC(bg, fg, frac, passed)
