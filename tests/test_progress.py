import pytest

from bgmatte.pipeline.progress import (
    CancelToken, PipelineCancelled, ProgressReporter, MASK_STAGE, COMPOSITE_STAGE, as_reporter,
)


def test_reporter_never_goes_backwards():
    seen = []
    r = ProgressReporter(seen.append)
    for v in (0, 10, 5, 10, 30, 29, 120, -4):
        r.report(v)
    assert seen == [0, 10, 30, 100]
    assert r.last == 100


def test_stage_mapping():
    seen = []
    r = ProgressReporter(seen.append)
    r.stage(MASK_STAGE, 1, 4)
    r.stage(MASK_STAGE, 4, 4)
    r.stage(COMPOSITE_STAGE, 1, 2)
    r.stage(COMPOSITE_STAGE, 0, 0)
    assert seen == [12.5, 50, 75, 100]


def test_reporter_without_callback():
    r = ProgressReporter()
    r.report(40)
    assert r.last == 40


def test_as_reporter_passthrough():
    r = ProgressReporter()
    assert as_reporter(r) is r
    assert as_reporter(None).callback is None


def test_cancel_token():
    t = CancelToken()
    t.raise_if_cancelled()
    assert not t.cancelled
    t.cancel()
    assert t.cancelled
    with pytest.raises(PipelineCancelled):
        t.raise_if_cancelled()
    assert issubclass(PipelineCancelled, RuntimeError)
