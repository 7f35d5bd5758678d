import numpy as np
import pytest

from bgmatte.pipeline.buffers import PixelBuffer, check_mask, mask_to_image
from bgmatte.qc.rules import evaluate_mask


@pytest.mark.parametrize("arr", [
    np.zeros((4, 4, 3), np.uint8),
    np.zeros((4, 4), np.uint8),
    np.zeros((4, 4, 4), np.float32),
])
def test_pixel_buffer_rejects_bad_arrays(arr):
    with pytest.raises(ValueError):
        PixelBuffer(arr)


def test_pixel_buffer_rejects_non_arrays():
    with pytest.raises(ValueError):
        PixelBuffer([[0, 0, 0, 0]])


def test_pixel_buffer_dimensions():
    pb = PixelBuffer(np.zeros((3, 7, 4), np.uint8))
    assert (pb.width, pb.height, pb.pixel_count) == (7, 3, 21)
    assert pb.rgb.shape == (3, 7, 3)
    assert pb.alpha.shape == (3, 7)


def test_from_rgb_adds_opaque_alpha():
    pb = PixelBuffer.from_rgb(np.full((2, 2, 3), 9, np.uint8))
    assert np.all(pb.alpha == 255)
    assert np.all(pb.rgb == 9)


def test_mask_helpers():
    pb = PixelBuffer(np.zeros((2, 3, 4), np.uint8))
    m = np.array([[1, 0, 1], [0, 0, 1]], np.uint8)
    assert check_mask(m, pb).dtype == bool
    assert mask_to_image(m).tolist() == [[255, 0, 255], [0, 0, 255]]
    with pytest.raises(ValueError):
        check_mask(m.T, pb)


def test_evaluate_mask():
    m = np.zeros((10, 10), np.uint8)
    m[0] = 1
    qc = evaluate_mask(m, 0.01, 0.99)
    assert (qc.background_px, qc.foreground_px) == (10, 90)
    assert qc.foreground_fraction == pytest.approx(0.9)
    assert qc.passed
    assert not evaluate_mask(np.ones((4, 4), np.uint8), 0.01, 0.99).passed
    assert not evaluate_mask(np.zeros((0, 4), np.uint8), 0.0, 1.0).passed
