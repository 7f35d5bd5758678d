from __future__ import annotations
from typing import Optional
import numpy as np

from ..pipeline.buffers import PixelBuffer, check_mask
from ..pipeline.progress import (
    CancelToken, ProgressCallback, ProgressReporter, COMPOSITE_STAGE, as_reporter, check,
)


class AlphaCompositor:
    """Zero the alpha of every background pixel; copy everything else untouched.

    Works through the image in bands of rows so progress and cancellation are
    checked between bands.
    """

    def __init__(self, rows_per_band: int = 64) -> None:
        self.rows_per_band = max(1, int(rows_per_band))

    def apply_mask(self,
                   pixels: PixelBuffer,
                   mask: np.ndarray,
                   progress: "ProgressReporter | ProgressCallback | None" = None,
                   cancel: Optional[CancelToken] = None) -> PixelBuffer:
        reporter = as_reporter(progress)
        bg = check_mask(mask, pixels)
        out = pixels.rgba.copy()
        H = pixels.height

        for y0 in range(0, H, self.rows_per_band):
            check(cancel)
            reporter.stage(COMPOSITE_STAGE, y0, H)
            y1 = min(H, y0 + self.rows_per_band)
            out[y0:y1, :, 3][bg[y0:y1]] = 0

        reporter.stage(COMPOSITE_STAGE, 1, 1)
        return PixelBuffer(out)
