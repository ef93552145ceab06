"""Console logging setup for command-line runs.

Library modules only create loggers; handlers are installed here, once,
by the entry point.
"""

import logging

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def configure_logging(level: str = "INFO") -> None:
    """Replace root handlers with a single console handler at ``level``."""
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    # Clear existing handlers and add a console handler
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)

    logging.getLogger(__name__).debug("Logging: level=%s", logging.getLevelName(log_level))
