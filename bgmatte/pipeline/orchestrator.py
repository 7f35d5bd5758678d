# bgmatte/pipeline/orchestrator.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional
import logging

from ..schemas.config import AppConfig
from ..utils.logging_utils import get_logger
from ..masking.base import clamp_blur_radius, clamp_threshold, color_limit
from ..masking.flood_fill import FloodFillMasker, Engine
from ..compositing.alpha import AlphaCompositor
from ..compositing.edge_blur import EdgeBlurrer
from ..qc.rules import evaluate_mask
from .buffers import PixelBuffer
from .io import read_image, write_png, write_mask, output_path, mask_path
from .progress import CancelToken, ProgressCallback, as_reporter, check

_log = get_logger("orchestrator")


def remove_background(
    pixels: PixelBuffer,
    threshold: float = 30,
    blur_radius: int = 3,
    progress: Optional[ProgressCallback] = None,
    cancel: Optional[CancelToken] = None,
    engine: Engine = "frontier",
    masker: Optional[FloodFillMasker] = None,
) -> PixelBuffer:
    """
    Mask -> composite -> (optional) soften, strictly in that order.

    `progress` receives non-decreasing percentages: 0..50 while the mask is
    built, 50..100 while alpha is applied. Out-of-range threshold / blur
    values are clamped.
    """
    result, _ = _run_stages(pixels, threshold, blur_radius, progress, cancel,
                            masker or FloodFillMasker(engine=engine))
    return result


def _run_stages(pixels, threshold, blur_radius, progress, cancel, masker):
    reporter = as_reporter(progress)
    threshold = clamp_threshold(threshold, _log)
    blur_radius = clamp_blur_radius(blur_radius, _log)

    mask = masker.build_mask(pixels, threshold, reporter, cancel)
    masked = AlphaCompositor().apply_mask(pixels, mask, reporter, cancel)
    check(cancel)
    if blur_radius > 0:
        masked = EdgeBlurrer().soften_edges(masked, blur_radius)
    return masked, mask


class _StageLogger:
    """Progress sink that logs each time a new 10% step is crossed."""

    def __init__(self, logger: logging.Logger, label: str) -> None:
        self.logger = logger
        self.label = label
        self.next_step = 10

    def __call__(self, value: float) -> None:
        if value >= self.next_step:
            self.logger.info(f"   ⏳ {self.label} {int(value)}%")
            self.next_step = (int(value) // 10 + 1) * 10


def run_images(
    images: Iterable[Path],
    output_dir: Path,
    logs_dir: Path,
    cfg: AppConfig,
    masks_dir: Optional[Path] = None,
    cancel: Optional[CancelToken] = None,
) -> List[Path]:
    """
    Remove the background of each image file and write `<stem>-nobg.png`.
    A failing image is logged and skipped; cancellation stops the whole batch.
    Returns the paths written.
    """
    logger = get_logger("orchestrator", logs_dir)

    output_dir.mkdir(parents=True, exist_ok=True)
    if masks_dir is not None:
        masks_dir.mkdir(parents=True, exist_ok=True)

    masker = FloodFillMasker(engine=cfg.masking.engine,
                             cancel_check_every=cfg.masking.cancel_check_every)
    logger.info(
        f"🎚️ threshold={cfg.masking.threshold:g} (color limit {color_limit(cfg.masking.threshold):.1f}) | "
        f"blur={cfg.blur.radius} | engine={cfg.masking.engine}"
    )

    written: List[Path] = []
    failed = 0
    for i, src in enumerate(images, 1):
        try:
            logger.info("")
            logger.info(f"🚀 [{i}] {src.name} | Loading image")
            pixels = read_image(src, cfg.run.max_bytes)
            logger.info(f" [{i}] {pixels.width}x{pixels.height} | Building mask + compositing…")

            sink = _StageLogger(logger, src.name) if cfg.run.log_progress else None
            result, mask = _run_stages(pixels, cfg.masking.threshold, cfg.blur.radius,
                                       sink, cancel, masker)

            qc = evaluate_mask(mask, cfg.qc.min_foreground_fraction, cfg.qc.max_foreground_fraction)
            logger.info(
                f" QC | background={qc.background_px} foreground={qc.foreground_px} "
                f"({qc.foreground_fraction * 100:.1f}%) → {'PASS' if qc.passed else 'FAIL'}"
            )
            if not qc.passed:
                logger.warning(
                    f" [{i}] {src.name} foreground share {qc.foreground_fraction * 100:.1f}% outside "
                    f"[{cfg.qc.min_foreground_fraction * 100:.0f}%, {cfg.qc.max_foreground_fraction * 100:.0f}%]; "
                    "try a different threshold."
                )

            mp = mask_path(masks_dir, src)
            if mp is not None:
                write_mask(mp, mask)
            out = output_path(output_dir, src)
            write_png(out, result)
            written.append(out)
            logger.info(f" 🖼️  Saved → {out.name}")

        except Exception as e:
            if cancel is not None and cancel.cancelled:
                logger.warning(f" [{i}] {src.name} cancelled; stopping batch.")
                break
            failed += 1
            logger.error(f" [{i}] {src.name} failed: {e}")

    logger.info(f"📊 {len(written)} written, {failed} failed")
    return written
