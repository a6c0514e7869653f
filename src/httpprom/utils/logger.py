import logging
import os
from typing import Optional

_FMT = "[%(levelname)s] %(message)s"


def get_logger(name: str = "httpprom") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    fmt = logging.Formatter(_FMT)
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    return logger


def configure_logging(
    logger_name: str = "httpprom",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    log_path: Optional[str] = None,
) -> logging.Logger:
    """
    Process-level logging baseline: console handler at console_level, plus an
    optional file handler at file_level. Safe to call more than once.
    """
    logger = get_logger(logger_name)
    logger.setLevel(min(console_level, file_level) if log_path else console_level)

    for h in logger.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            h.setLevel(console_level)

    if log_path:
        exists = any(
            isinstance(h, logging.FileHandler) and h.baseFilename == os.path.abspath(log_path)
            for h in logger.handlers
        )
        if not exists:
            fh = logging.FileHandler(log_path, encoding="utf-8")
            fh.setLevel(file_level)
            fh.setFormatter(logging.Formatter("%(asctime)s " + _FMT))
            logger.addHandler(fh)
    return logger
