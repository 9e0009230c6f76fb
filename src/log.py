import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging_to_console(level: int | None = None):
    """
    Configure the root logger to write to stderr.

    Safe to call more than once; a second call does not add another handler.
    """
    root = logging.getLogger()
    root.setLevel(level or logging.getLevelName(settings.LOG_LEVEL))

    if any(getattr(h, "_console", False) for h in root.handlers):
        return root

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._console = True
    root.addHandler(handler)
    return root


def setup_logging_to_file(
    app: str, level: int = logging.INFO, logger: logging.Logger | None = None
):
    """
    Attach a daily rotating file handler named after ``app``.

    Files go to ``settings.LOG_DIR`` and a week of backups is kept.
    """
    logger = logger or logging.getLogger()
    logger.setLevel(level)

    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app}.log"

    for h in logger.handlers:
        if isinstance(h, TimedRotatingFileHandler) and Path(h.baseFilename) == log_file.resolve():
            return logger

    file_handler = TimedRotatingFileHandler(
        filename=log_file,
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(file_handler)

    logger.info("File logging initialized for %s", app)
    return logger
