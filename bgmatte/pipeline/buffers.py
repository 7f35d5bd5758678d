from __future__ import annotations
from dataclasses import dataclass
import numpy as np

# Mask convention: uint8 HxW, 1 = background, 0 = foreground.
BACKGROUND = 1
FOREGROUND = 0


@dataclass(frozen=True)
class PixelBuffer:
    """RGBA image, HxWx4 uint8, row-major with top-left origin.

    Stages never write into a buffer they were handed; each one returns a new
    PixelBuffer.
    """
    rgba: np.ndarray

    def __post_init__(self) -> None:
        a = self.rgba
        if not isinstance(a, np.ndarray):
            raise ValueError(f"PixelBuffer expects a numpy array, got {type(a).__name__}")
        if a.ndim != 3 or a.shape[2] != 4:
            raise ValueError(f"PixelBuffer expects shape (H, W, 4), got {a.shape}")
        if a.dtype != np.uint8:
            raise ValueError(f"PixelBuffer expects uint8 channels, got {a.dtype}")

    @property
    def height(self) -> int:
        return int(self.rgba.shape[0])

    @property
    def width(self) -> int:
        return int(self.rgba.shape[1])

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def rgb(self) -> np.ndarray:
        return self.rgba[..., :3]

    @property
    def alpha(self) -> np.ndarray:
        return self.rgba[..., 3]

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.rgba.copy())

    @classmethod
    def from_rgb(cls, rgb: np.ndarray, alpha: int = 255) -> "PixelBuffer":
        rgb = np.asarray(rgb, dtype=np.uint8)
        if rgb.ndim != 3 or rgb.shape[2] != 3:
            raise ValueError(f"from_rgb expects shape (H, W, 3), got {rgb.shape}")
        a = np.full(rgb.shape[:2] + (1,), alpha, dtype=np.uint8)
        return cls(np.concatenate([rgb, a], axis=2))


def check_mask(mask: np.ndarray, pixels: PixelBuffer) -> np.ndarray:
    """Validate a mask against the buffer it was built for and return it as bool."""
    if mask.shape != (pixels.height, pixels.width):
        raise ValueError(f"mask shape {mask.shape} does not match image {(pixels.height, pixels.width)}")
    return mask.astype(bool)


def mask_to_image(mask: np.ndarray) -> np.ndarray:
    """0/1 mask -> 0/255 grayscale (background white), for saving."""
    return np.where(mask.astype(bool), 255, 0).astype(np.uint8)
