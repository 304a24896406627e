"""Process-wide stdlib logging for the resilient CLI.

The retry core never logs through this module; it writes to the injected
LeveledLogger. This only wires the root logger used by the configuration
loader, the transport and the StdlibLogger sink.
"""

import logging
import sys
from typing import List, Optional

from resilient.domain.models.common import LogLevel

TRACE = int(LogLevel.TRACE)
DEFAULT_LOG_LEVEL = logging.WARNING
DEFAULT_LOG_FORMAT = '%(asctime)s %(levelname)-7s [%(name)s] %(message)s'

# Libraries that log every request at INFO
CHATTY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    log_level: int = DEFAULT_LOG_LEVEL,
    log_format: str = DEFAULT_LOG_FORMAT,
    log_file: Optional[str] = None,
) -> List[logging.Handler]:
    """Points the root logger at stderr, and at `log_file` when given.

    Handlers installed by an earlier call are replaced, so the CLI can call
    this once per command.

    Returns:
        The handlers now attached to the root logger.
    """
    logging.addLevelName(TRACE, "TRACE")
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(log_format)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
        except OSError as e:
            file_error = e

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    # Transport internals only show up when explicitly debugging
    chatty_level = log_level if log_level <= logging.DEBUG else max(log_level, logging.WARNING)
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)

    if file_error is not None:
        logging.error(f"Cannot write log file {log_file}: {file_error}")
    logging.debug(f"Root logger at {logging.getLevelName(log_level)}, {len(handlers)} handler(s)")
    return handlers


def level_from_name(name: Optional[str], default: int = DEFAULT_LOG_LEVEL) -> int:
    """Maps a level name such as 'debug', 'WARN' or 'TRACE' to its numeric value."""
    if not name:
        return default
    name = str(name).upper()
    if name == "TRACE":
        return TRACE
    if name == "WARN":
        name = "WARNING"
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else default
