from __future__ import annotations
import math
import numpy as np
import cv2

from ..utils.logging_utils import get_logger
from ..masking.base import clamp_blur_radius
from ..pipeline.buffers import PixelBuffer


def _premultiply(rgba: np.ndarray) -> np.ndarray:
    """uint8 RGBA -> float32 premultiplied RGBA in [0,1]."""
    f = rgba.astype(np.float32) / 255.0
    f[..., :3] *= f[..., 3:4]
    return f


def _over(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """Porter-Duff `src over dst` on premultiplied float RGBA; returns uint8 straight RGBA."""
    a_src = src[..., 3:4]
    out = src + dst * (1.0 - a_src)
    a = out[..., 3:4]
    rgb = np.divide(out[..., :3], a, out=np.zeros_like(out[..., :3]), where=a > 1e-6)
    res = np.concatenate([rgb, a], axis=2)
    return np.clip(np.rint(res * 255.0), 0, 255).astype(np.uint8)


def edge_band(alpha: np.ndarray, sigma: float) -> np.ndarray:
    """Pixels within ceil(3*sigma) of a fully transparent pixel."""
    r = int(math.ceil(3.0 * sigma))
    bg = (alpha == 0).astype(np.uint8)
    k = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (r * 2 + 1, r * 2 + 1))
    return cv2.dilate(bg, k) > 0


class EdgeBlurrer:
    """
    Soften the cut-out edge of an alpha-masked image.

    The alpha-weighted (premultiplied) image is Gaussian-blurred with sigma =
    radius, then the sharp image is composited over the blur inside a band of
    ceil(3*radius) pixels around the transparent background. Pixels outside
    that band, and opaque pixels anywhere, come out exactly as they went in.
    """

    def __init__(self) -> None:
        self.logger = get_logger("edge_blur")

    def soften_edges(self, masked: PixelBuffer, blur_radius: int) -> PixelBuffer:
        blur_radius = clamp_blur_radius(blur_radius, self.logger)
        if blur_radius <= 0 or masked.pixel_count == 0:
            return masked.copy()

        band = edge_band(masked.alpha, blur_radius)
        if not band.any():
            return masked.copy()

        sharp = _premultiply(masked.rgba)
        blurred = cv2.GaussianBlur(sharp, (0, 0), sigmaX=float(blur_radius),
                                   borderType=cv2.BORDER_CONSTANT)
        soft = _over(sharp, blurred)
        keep = ~band | (masked.alpha == 255)
        out = masked.rgba.copy()
        out[~keep] = soft[~keep]
        return PixelBuffer(out)
