# bgmatte/masking/flood_fill.py
"""
Border-seeded flood fill background masker.

Every perimeter pixel seeds a breadth-first fill over the 8-connected pixel
grid. A neighbour joins the background when its RGB Euclidean distance to the
pixel being expanded is strictly below `threshold * 2.55`. Whatever the fill
never reaches is foreground.

Two engines produce the same mask:
  - "queue":    textbook FIFO BFS, one pixel per dequeue.
  - "frontier": the same BFS processed one layer at a time with numpy.
The reachable set does not depend on expansion order, so the masks are
bit-identical.
"""
from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Literal, Optional
import numpy as np

from ..utils.logging_utils import get_logger
from ..pipeline.buffers import PixelBuffer, BACKGROUND
from ..pipeline.progress import (
    CancelToken, ProgressCallback, ProgressReporter, MASK_STAGE, as_reporter, check,
)
from .base import Masker, clamp_threshold, color_limit

Engine = Literal["frontier", "queue"]

# (dy, dx): 4-connected first, then diagonals
NEIGHBOURS = (
    (0, 1), (0, -1), (1, 0), (-1, 0),
    (1, 1), (-1, 1), (1, -1), (-1, -1),
)


@dataclass
class FillResult:
    mask: np.ndarray      # uint8 HxW, 1 = background
    enqueued: int         # enqueue operations, never more than W*H
    waves: int            # BFS layers expanded (seed layer included)

    @property
    def background_px(self) -> int:
        return int(self.mask.sum())


def border_indices(width: int, height: int) -> np.ndarray:
    """Flat indices of all perimeter pixels, each listed once, in row-major order."""
    if width <= 0 or height <= 0:
        return np.empty(0, dtype=np.int64)
    edge = np.zeros((height, width), dtype=bool)
    edge[0, :] = True
    edge[-1, :] = True
    edge[:, 0] = True
    edge[:, -1] = True
    return np.flatnonzero(edge)


class FloodFillMasker(Masker):
    def __init__(self,
                 engine: Engine = "frontier",
                 cancel_check_every: int = 4096) -> None:
        if engine not in ("frontier", "queue"):
            raise ValueError(f"unknown flood fill engine: {engine!r}")
        self.engine = engine
        self.cancel_check_every = max(1, int(cancel_check_every))
        self.logger = get_logger("flood_fill")

    def build_mask(self,
                   pixels: PixelBuffer,
                   threshold: float,
                   progress: "ProgressReporter | ProgressCallback | None" = None,
                   cancel: Optional[CancelToken] = None) -> np.ndarray:
        return self.fill(pixels, threshold, progress, cancel).mask

    def fill(self,
             pixels: PixelBuffer,
             threshold: float,
             progress: "ProgressReporter | ProgressCallback | None" = None,
             cancel: Optional[CancelToken] = None) -> FillResult:
        reporter = as_reporter(progress)
        limit = color_limit(clamp_threshold(threshold, self.logger))
        H, W = pixels.height, pixels.width
        if H == 0 or W == 0:
            reporter.stage(MASK_STAGE, 1, 1)
            return FillResult(np.zeros((H, W), np.uint8), 0, 0)

        # int32 so channel differences can go negative
        rgb = pixels.rgb.reshape(-1, 3).astype(np.int32)
        if self.engine == "queue":
            result = _fill_queue(rgb, W, H, limit * limit, reporter, cancel, self.cancel_check_every)
        else:
            result = _fill_frontier(rgb, W, H, limit * limit, reporter, cancel)
        reporter.stage(MASK_STAGE, 1, 1)
        self.logger.debug(
            f"flood fill ({self.engine}) {W}x{H} limit={limit:.2f}: "
            f"{result.background_px} background px, {result.enqueued} enqueued, {result.waves} waves"
        )
        return result


def _fill_queue(rgb: np.ndarray, W: int, H: int, limit_sq: float,
                reporter: ProgressReporter, cancel: Optional[CancelToken],
                check_every: int) -> FillResult:
    total = W * H
    mask = np.zeros(total, dtype=np.uint8)
    visited = np.zeros(total, dtype=bool)
    queue: deque[int] = deque()
    enqueued = 0

    def enqueue(i: int) -> None:
        nonlocal enqueued
        if not visited[i]:
            visited[i] = True
            queue.append(i)
            enqueued += 1

    for i in border_indices(W, H).tolist():
        enqueue(i)

    # wave accounting: the current layer ends when `layer_left` reaches 0
    waves = 0
    layer_left = 0
    processed = 0
    colors = rgb.tolist()
    while queue:
        if layer_left == 0:
            waves += 1
            layer_left = len(queue)
        if processed % check_every == 0:
            check(cancel)
            reporter.stage(MASK_STAGE, processed, total)
        idx = queue.popleft()
        layer_left -= 1
        processed += 1
        if mask[idx] == BACKGROUND:
            continue
        mask[idx] = BACKGROUND

        y, x = divmod(idx, W)
        r, g, b = colors[idx]
        for dy, dx in NEIGHBOURS:
            ny, nx = y + dy, x + dx
            if nx < 0 or nx >= W or ny < 0 or ny >= H:
                continue
            n = ny * W + nx
            if visited[n]:
                continue
            nr, ng, nb = colors[n]
            dr, dg, db = r - nr, g - ng, b - nb
            if dr * dr + dg * dg + db * db < limit_sq:
                enqueue(n)

    return FillResult(mask.reshape(H, W), enqueued, waves)


def _fill_frontier(rgb: np.ndarray, W: int, H: int, limit_sq: float,
                   reporter: ProgressReporter, cancel: Optional[CancelToken]) -> FillResult:
    total = W * H
    mask = np.zeros(total, dtype=np.uint8)
    visited = np.zeros(total, dtype=bool)

    frontier = border_indices(W, H)
    visited[frontier] = True
    enqueued = int(frontier.size)
    processed = 0
    waves = 0

    while frontier.size:
        check(cancel)
        reporter.stage(MASK_STAGE, processed, total)
        waves += 1
        mask[frontier] = BACKGROUND
        processed += int(frontier.size)

        ys, xs = np.divmod(frontier, W)
        src_rgb = rgb[frontier]
        found = []
        for dy, dx in NEIGHBOURS:
            ny, nx = ys + dy, xs + dx
            ok = (nx >= 0) & (nx < W) & (ny >= 0) & (ny < H)
            if not ok.any():
                continue
            n = ny[ok] * W + nx[ok]
            fresh = ~visited[n]
            if not fresh.any():
                continue
            n = n[fresh]
            diff = src_rgb[ok][fresh] - rgb[n]
            close = np.einsum("ij,ij->i", diff, diff) < limit_sq
            if close.any():
                found.append(n[close])

        if not found:
            break
        # a pixel may be reachable from several frontier pixels; enqueue it once
        frontier = np.unique(np.concatenate(found))
        visited[frontier] = True
        enqueued += int(frontier.size)

    return FillResult(mask.reshape(H, W), enqueued, waves)
