from __future__ import annotations
from pathlib import Path
from typing import List, Optional
import numpy as np
import cv2

from ..utils.logging_utils import get_logger
from .buffers import PixelBuffer, mask_to_image

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".webp")
MAX_INPUT_BYTES = 5 * 1024 * 1024
OUTPUT_SUFFIX = "-nobg"
MASK_SUFFIX = "-mask"

_log = get_logger("io")


def discover_images(input_dir: Path, limit: int | None = None) -> List[Path]:
    files = []
    for p in sorted(input_dir.iterdir()):
        if not p.is_file() or p.stem.endswith((OUTPUT_SUFFIX, MASK_SUFFIX)):
            continue
        if p.suffix.lower() not in IMAGE_SUFFIXES:
            _log.warning(f"⏭️ Skipping {p.name}: not a PNG, JPG or WEBP image")
            continue
        files.append(p)
    return files[:limit] if limit else files


def _to_rgba(img: np.ndarray) -> np.ndarray:
    # OpenCV hands back gray, BGR or BGRA depending on the file
    if img.dtype == np.uint16:
        img = (img // 257).astype(np.uint8)
    elif img.dtype != np.uint8:
        img = cv2.normalize(img, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2RGBA)
    if img.shape[2] == 4:
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGBA)


def decode_image(data: bytes) -> PixelBuffer:
    buf = np.frombuffer(data, dtype=np.uint8)
    img = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED) if buf.size else None
    if img is None:
        raise ValueError("Failed to decode image bytes.")
    return PixelBuffer(_to_rgba(img))


def check_input_file(path: Path, max_bytes: int = MAX_INPUT_BYTES) -> None:
    """Reject anything but PNG, JPG or WEBP, and files over `max_bytes`."""
    path = Path(path)
    if path.suffix.lower() not in IMAGE_SUFFIXES:
        raise ValueError(f"Unsupported file type '{path.suffix}'; use a PNG, JPG or WEBP image.")
    size = path.stat().st_size
    if size > max_bytes:
        raise ValueError(f"File is {size / 1048576:.1f} MiB; the limit is {max_bytes / 1048576:.1f} MiB.")


def read_image(path: Path, max_bytes: int = MAX_INPUT_BYTES) -> PixelBuffer:
    check_input_file(path, max_bytes)
    return decode_image(Path(path).read_bytes())


def encode_png(pixels: PixelBuffer) -> bytes:
    ok, buf = cv2.imencode(".png", cv2.cvtColor(pixels.rgba, cv2.COLOR_RGBA2BGRA))
    if not ok:
        raise RuntimeError("PNG encoding failed.")
    return buf.tobytes()


def write_png(path: Path, pixels: PixelBuffer) -> None:
    Path(path).write_bytes(encode_png(pixels))


def write_mask(path: Path, mask: np.ndarray) -> None:
    ok, buf = cv2.imencode(".png", mask_to_image(mask))
    if not ok:
        raise RuntimeError("PNG encoding failed.")
    Path(path).write_bytes(buf.tobytes())


def output_path(output_dir: Path, src: Path, suffix: str = OUTPUT_SUFFIX) -> Path:
    return output_dir / f"{src.stem}{suffix}.png"


def mask_path(masks_dir: Optional[Path], src: Path) -> Optional[Path]:
    return None if masks_dir is None else output_path(masks_dir, src, MASK_SUFFIX)
