from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Optional
from colorlog import ColoredFormatter

LOG_FILE_NAME = "run.log"


def get_logger(name: str,
               log_dir: Optional[Path] = None,
               level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(f"bgmatte.{name}")
    logger.setLevel(level)
    logger.propagate = False

    if not logger.handlers:
        # Console handler (colored)
        ch = logging.StreamHandler()
        ch.setLevel(level)
        fmt = ColoredFormatter(
            "%(log_color)s%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%H:%M:%S",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "white",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "red,bg_white",
            },
        )
        ch.setFormatter(fmt)
        logger.addHandler(ch)

    # File handler (plain); one per logger, moved when log_dir changes
    if log_dir is not None:
        log_path = os.path.abspath(log_dir / LOG_FILE_NAME)
        current = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        if not any(h.baseFilename == log_path for h in current):
            for h in current:
                logger.removeHandler(h)
                h.close()
            log_dir.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_path, encoding="utf-8")
            fh.setLevel(level)
            fh.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
            logger.addHandler(fh)

    return logger
