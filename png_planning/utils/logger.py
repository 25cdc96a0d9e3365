"""
Logging utilities
"""

import sys
from pathlib import Path
from typing import Optional
from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def SetupLogger(log_dir: Optional[str] = None, level: str = "INFO", debug_file: bool = False):
    """
    Setup logger for a planning run

    Args:
        log_dir: Directory to save log files, None keeps console output only
        level: Console and main file logging level
        debug_file: Also write DEBUG records (planner iterations, filter stats) to a separate file
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_dir is None:
        return logger

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger.add(
        str(log_path / "png_planning_{time:YYYY-MM-DD}.log"),
        rotation="00:00",
        retention="7 days",
        level=level,
        encoding="utf-8",
        format=FILE_FORMAT
    )

    if debug_file:
        logger.add(
            str(log_path / "png_planning_debug_{time:YYYY-MM-DD}.log"),
            rotation="00:00",
            retention="7 days",
            level="DEBUG",
            filter=lambda record: record["level"].name == "DEBUG",
            encoding="utf-8",
            format=FILE_FORMAT
        )

    logger.info(f"Log initialized, saving to: {log_path}")
    return logger
