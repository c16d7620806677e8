"""Run logging: a per-run log file plus optional forwarding of stdlib records to logfire."""

import logging
from datetime import datetime
from pathlib import Path

import logfire

from sitespec.utils.files import get_logs_path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Transport chatter stays out of the run log unless it is a warning
NOISY_LOGGERS = ('httpx', 'httpcore', 'hpack')

_installed: list[logging.Handler] = []


def parse_level(level: str) -> int:
    """Map a level name to its number.

    'ALL' means every record. Unknown names fall back to DEBUG.
    """
    name = level.upper()
    if name == 'ALL':
        return logging.NOTSET
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.DEBUG


def setup_local_logging(
    level: str = 'DEBUG',
    logs_dir: Path | None = None,
    forward_to_logfire: bool = False,
) -> Path:
    """Route the root logger to a fresh run log file.

    Calling it again replaces the handlers installed by the previous call, so a
    long-lived process never writes one record twice.

    Args:
        level: Level name such as 'DEBUG', 'INFO' or 'ALL'
        logs_dir: Directory for run logs; defaults to .sitespec/logs
        forward_to_logfire: Also hand records to logfire so they join the traces

    Returns:
        Path of the run log file.

    """
    logs_dir = logs_dir or get_logs_path()
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_file = logs_dir / f'run_{timestamp}.log'
    numeric_level = parse_level(level)

    root_logger = logging.getLogger()
    while _installed:
        handler = _installed.pop()
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _installed.append(file_handler)
    if forward_to_logfire:
        _installed.append(logfire.LogfireLoggingHandler())

    for handler in _installed:
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return log_file
