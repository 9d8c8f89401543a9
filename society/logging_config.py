"""Logging setup for the society admin tools.

Everything logs under the 'society' logger. Console output goes to stderr so
command output on stdout stays clean. Admin runs can also keep one log file per
run, giving a record of each change made to the data files.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

LOGGER_NAME = 'society'

# Only worth seeing when debugging GitHub calls
NOISY_LOGGERS = ('urllib3', 'requests')


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    log_to_console: bool = True,
) -> logging.Logger:
    """
    Configure the 'society' logger, replacing handlers from earlier calls.

    Args:
        level: Logging level (default: INFO)
        log_dir: When given, also write society_admin_<timestamp>.log there
        log_to_console: Whether to log to stderr (default: True)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f'society_admin_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        logger.addHandler(console_handler)

    third_party_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    return logger
