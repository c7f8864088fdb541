import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Third-party loggers that flood DEBUG output on every remote call
NOISY_LOGGERS = ("urllib3", "werkzeug", "PIL")


def _parse_level(level):
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(name="healthscan", level=logging.INFO):
    """
    Configure the root logger for the scanner, the API and the CLI.

    Args:
        name: Application logger to return
        level: Level as int or name ("DEBUG", "info", ...); unknown names fall back to INFO
    """
    level = _parse_level(level)
    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    for handler in root_logger.handlers:
        handler.setLevel(level)
        if handler.formatter is None:
            handler.setFormatter(formatter)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))

    return logging.getLogger(name)
