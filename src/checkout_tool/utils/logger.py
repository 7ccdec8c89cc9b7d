import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "checkout"


def setup_logger(level: str = "INFO", log_dir: Optional[Path] = None) -> logging.Logger:
    """
    Configure the shared logger for the checkout tool.

    Features:
    - Console output, plus daily rotating log files when log_dir is given
    - Unified log format with timestamp and level
    - Safe to call repeatedly; handlers are only attached once
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Avoid duplicate handlers if setup_logger() is called multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            filename=log_dir / "checkout.log",
            when="midnight",
            interval=1,
            backupCount=7,
            encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logger initialized")
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger under the shared checkout logger."""
    if name.startswith("checkout_tool."):
        name = name[len("checkout_tool."):]
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
