#!/usr/bin/env python3
"""
Logging configuration for the overlay viewer

All pipeline stages log through the logger named LOGGER_NAME, so the level
and file output chosen in `setup_logger` apply to per-row diagnostics too.
"""

import logging
from pathlib import Path
from datetime import datetime
from typing import Iterable
from rich.logging import RichHandler

LOGGER_NAME = "BoxOverlay"

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(
    name: str = LOGGER_NAME,
    log_dir: str = "logs",
    level: str = "INFO",
    save_to_file: bool = True
) -> logging.Logger:
    """
    Setup logger with rich console output and an optional log file

    Args:
        name: Logger name
        log_dir: Directory to save log files
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        save_to_file: Whether to save logs to file

    Returns:
        Configured logger instance
    """
    log_level = getattr(logging, level.upper())

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()

    # Track rows can contain brackets, keep rich markup off
    console_handler = RichHandler(rich_tracebacks=True, markup=False, show_path=False)
    console_handler.setLevel(log_level)
    logger.addHandler(console_handler)

    if save_to_file:
        log_dir_path = Path(log_dir)
        log_dir_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_dir_path / f"{name}_{timestamp}.log"

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")

    return logger


def log_section(logger: logging.Logger, title: str):
    """Log a section header"""
    separator = "=" * 80
    logger.info(separator)
    logger.info(f"  {title}")
    logger.info(separator)


def log_config(logger: logging.Logger, config: dict, indent: int = 1):
    """Log nested configuration, one key per line"""
    if indent == 1:
        logger.info("Configuration:")
    pad = "  " * indent
    for key, value in config.items():
        if isinstance(value, dict):
            logger.info(f"{pad}{key}:")
            log_config(logger, value, indent + 1)
        else:
            logger.info(f"{pad}{key}: {value}")


def log_frame_summary(
    logger: logging.Logger,
    frame_name: str,
    num_rows: int,
    num_in_roi: int,
    track_ids: Iterable[int]
):
    """
    Log how many rows survived each filter of one frame

    The drawn track ids go to DEBUG, near to far.
    """
    track_ids = list(track_ids)
    logger.info(
        f"{frame_name}: rows {num_rows} -> roi {num_in_roi} -> visible {len(track_ids)}"
    )
    if track_ids:
        logger.debug(f"{frame_name}: drawn tracks {track_ids}")
