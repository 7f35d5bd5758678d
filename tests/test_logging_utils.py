import logging

from bgmatte.utils.logging_utils import get_logger, LOG_FILE_NAME


def _file_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, logging.FileHandler)]


def test_single_file_handler_across_log_dirs(tmp_path):
    first = get_logger("log_dirs", tmp_path / "run1")
    old = _file_handlers(first)[0]
    for i in range(2, 5):
        logger = get_logger("log_dirs", tmp_path / f"run{i}")
    handlers = _file_handlers(logger)
    assert len(handlers) == 1
    assert handlers[0].baseFilename == str((tmp_path / "run4" / LOG_FILE_NAME).absolute())
    assert old.stream is None  # closed

    logger.info("only in the latest run")
    handlers[0].flush()
    assert "only in the latest run" in (tmp_path / "run4" / LOG_FILE_NAME).read_text(encoding="utf-8")
    assert "only in the latest run" not in (tmp_path / "run1" / LOG_FILE_NAME).read_text(encoding="utf-8")


def test_same_log_dir_reuses_handler(tmp_path):
    a = get_logger("same_dir", tmp_path)
    h = _file_handlers(a)[0]
    b = get_logger("same_dir", tmp_path)
    assert a is b
    assert _file_handlers(b) == [h]


def test_console_handler_added_once():
    get_logger("console_once")
    logger = get_logger("console_once")
    stream = [h for h in logger.handlers if type(h) is logging.StreamHandler]
    assert len(stream) == 1
    assert not logger.propagate
