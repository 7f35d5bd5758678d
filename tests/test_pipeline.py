import numpy as np
import pytest

from bgmatte.compositing.alpha import AlphaCompositor
from bgmatte.compositing.edge_blur import EdgeBlurrer
from bgmatte.masking.flood_fill import FloodFillMasker
from bgmatte.pipeline.orchestrator import remove_background
from bgmatte.pipeline.progress import CancelToken, PipelineCancelled

from helpers import blob_image, ring_with_center


def test_remove_background_matches_stages():
    img = blob_image()
    mask = FloodFillMasker().build_mask(img, 30)
    masked = AlphaCompositor().apply_mask(img, mask)
    expected = EdgeBlurrer().soften_edges(masked, 3)

    out = remove_background(img, threshold=30, blur_radius=3)
    assert np.array_equal(out.rgba, expected.rgba)


def test_remove_background_without_blur_is_alpha_only():
    img = ring_with_center((255, 0, 0))
    out = remove_background(img, threshold=10, blur_radius=0)
    assert np.all(out.alpha[1:3, 1:3] == 255)
    assert out.alpha.sum() == 4 * 255
    assert np.array_equal(out.rgb, img.rgb)


def test_progress_spans_both_stages():
    seen = []
    remove_background(blob_image(), progress=seen.append)
    assert seen == sorted(seen)
    assert seen[0] == 0
    assert 50 in seen
    assert seen[-1] == 100


@pytest.mark.parametrize("engine", ["frontier", "queue"])
def test_engines_give_same_output(engine):
    img = blob_image(seed=4)
    ref = remove_background(img, 25, 2)
    assert np.array_equal(remove_background(img, 25, 2, engine=engine).rgba, ref.rgba)


def test_out_of_range_parameters_are_clamped():
    img = blob_image()
    assert np.array_equal(remove_background(img, 30, 25).rgba, remove_background(img, 30, 10).rgba)
    assert np.array_equal(remove_background(img, 30, -2).rgba, remove_background(img, 30, 0).rgba)
    assert np.array_equal(remove_background(img, 0, 0).rgba, remove_background(img, 1, 0).rgba)


def test_cancelled_pipeline_raises():
    token = CancelToken()
    token.cancel()
    with pytest.raises(PipelineCancelled):
        remove_background(blob_image(), cancel=token)
