import numpy as np
from bgmatte.pipeline.buffers import PixelBuffer


def solid(h, w, rgb, alpha=255):
    arr = np.zeros((h, w, 4), dtype=np.uint8)
    arr[..., :3] = rgb
    arr[..., 3] = alpha
    return PixelBuffer(arr)


def ring_with_center(center_rgb, ring_rgb=(0, 0, 0), size=4):
    """size x size image: 2x2 block of center_rgb in the middle, ring_rgb elsewhere."""
    arr = np.zeros((size, size, 4), dtype=np.uint8)
    arr[..., :3] = ring_rgb
    arr[..., 3] = 255
    c = size // 2
    arr[c - 1:c + 1, c - 1:c + 1, :3] = center_rgb
    return PixelBuffer(arr)


def random_image(h=40, w=50, seed=0):
    rng = np.random.default_rng(seed)
    return PixelBuffer(rng.integers(0, 256, (h, w, 4), dtype=np.uint8))


def blob_image(h=48, w=64, seed=1):
    """Noisy light backdrop with a dark noisy subject in the middle."""
    rng = np.random.default_rng(seed)
    arr = np.empty((h, w, 4), dtype=np.uint8)
    arr[..., :3] = 220 + rng.integers(-6, 7, (h, w, 3))
    arr[h // 4: 3 * h // 4, w // 4: 3 * w // 4, :3] = 40 + rng.integers(-6, 7, (h // 2, w // 2, 3))
    arr[..., 3] = 255
    return PixelBuffer(arr)
