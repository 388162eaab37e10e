# questionbank/logging_config.py
"""
Logging setup for the question aggregation engine.

Every module logs under the 'questionbank' namespace through get_logger().
Pipeline messages about one document go through document_logger(), which
prefixes them with the document id so interleaved runs stay readable.

Set QUESTIONBANK_DEV_MODE=1 for DEBUG output with a wider, column-aligned
format; console output is colored when stdout is a terminal.
"""
import logging
import os
import sys
from typing import Any, MutableMapping, Optional, Tuple, Union

ROOT_LOGGER = 'questionbank'

CONSOLE_FORMAT = '[%(asctime)s] %(levelname)s - %(name)s - %(message)s'
DEV_CONSOLE_FORMAT = '[%(asctime)s] %(levelname)-8s | %(name)-32s | %(message)s'
FILE_FORMAT = CONSOLE_FORMAT
SHORT_DATEFMT = '%H:%M:%S'
FULL_DATEFMT = '%Y-%m-%d %H:%M:%S'


class LogColors:
    """ANSI escape codes used by the console formatter."""
    RESET = "\033[0m"

    CYAN = "\033[36m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"
    MAGENTA = "\033[35m"

    BOLD_BLUE = "\033[1;34m"
    BOLD_GREEN = "\033[1;32m"
    BOLD_RED = "\033[1;31m"


LEVEL_COLORS = {
    logging.DEBUG: LogColors.CYAN,
    logging.INFO: LogColors.GREEN,
    logging.WARNING: LogColors.YELLOW,
    logging.ERROR: LogColors.RED,
    logging.CRITICAL: LogColors.MAGENTA,
}

# Checked in order; the first marker found in a message picks its color
MESSAGE_MARKERS: Tuple[Tuple[str, str], ...] = (
    ("FAILED", LogColors.BOLD_RED),
    ("COMPLETE", LogColors.BOLD_GREEN),
    ("BEGIN", LogColors.BOLD_BLUE),
    ("START", LogColors.MAGENTA),
    ("DONE", LogColors.MAGENTA),
)


def _paint(text: str, color: str) -> str:
    return f"{color}{text}{LogColors.RESET}"


class ColoredFormatter(logging.Formatter):
    """
    Console formatter that colors the level name and pipeline milestones.

    Colors are dropped when stdout is not a terminal.
    """

    def __init__(self, *args, use_colors: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if not self.use_colors:
            return super().format(record)

        # Other handlers must see the uncolored record
        record = logging.makeLogRecord(record.__dict__)

        level_color = LEVEL_COLORS.get(record.levelno)
        if level_color:
            record.levelname = _paint(record.levelname, level_color)

        message = record.getMessage()
        for marker, color in MESSAGE_MARKERS:
            if marker in message:
                message = _paint(message, color)
                break
        record.msg = message
        record.args = ()

        return super().format(record)


class DocumentLoggerAdapter(logging.LoggerAdapter):
    """Prefixes every message with the document it concerns."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        return f"[doc {self.extra['document_id']}] {msg}", kwargs


def document_logger(logger: logging.Logger, document_id: int) -> DocumentLoggerAdapter:
    """
    Wrap a logger so its messages name one document.

    Args:
        logger: Module logger from get_logger()
        document_id: Document the messages are about

    Returns:
        Adapter logging "[doc <id>] <message>" through the given logger
    """
    return DocumentLoggerAdapter(logger, {'document_id': document_id})


def is_dev_mode() -> bool:
    """True if QUESTIONBANK_DEV_MODE is 1, yes, true or on."""
    return os.getenv('QUESTIONBANK_DEV_MODE', '').strip().lower() in ('1', 'yes', 'true', 'on')


def _resolve_level(level: Optional[Union[int, str]], dev_mode: bool) -> Union[int, str]:
    if level is None:
        return logging.DEBUG if dev_mode else logging.INFO
    if isinstance(level, str):
        return level.upper()
    return level


def _handler(
    handler: logging.Handler,
    level: Union[int, str],
    formatter: logging.Formatter,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: Optional[Union[int, str]] = None,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    use_colors: bool = True
) -> logging.Logger:
    """
    Configure the package logger.

    Replaces any handlers from a previous call, so it is safe to call again
    with new settings.

    Args:
        level: Level or level name (default: INFO, DEBUG in dev mode)
        log_file: Also write plain, uncolored logs to this file
        format_string: Console format (default depends on dev mode)
        use_colors: Color console output when stdout is a terminal

    Returns:
        The 'questionbank' logger
    """
    dev_mode = is_dev_mode()
    level = _resolve_level(level, dev_mode)
    if format_string is None:
        format_string = DEV_CONSOLE_FORMAT if dev_mode else CONSOLE_FORMAT

    if use_colors:
        console_formatter = ColoredFormatter(format_string, datefmt=SHORT_DATEFMT)
    else:
        console_formatter = logging.Formatter(format_string, datefmt=FULL_DATEFMT)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level, console_formatter))

    if log_file:
        logger.addHandler(_handler(
            logging.FileHandler(log_file, encoding='utf-8'),
            level,
            logging.Formatter(FILE_FORMAT, datefmt=FULL_DATEFMT),
        ))

    if dev_mode:
        logger.info("DEVELOPER MODE ENABLED - verbose logging active")

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get the logger for one module.

    Args:
        name: Short module name, e.g. 'grouping_service'

    Returns:
        Logger namespaced under 'questionbank'
    """
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')


def log_section(logger: logging.Logger, title: str, width: int = 80) -> None:
    """Log a title framed by separator lines."""
    rule = "=" * width
    for line in (rule, f"  {title}", rule):
        logger.info(line)
