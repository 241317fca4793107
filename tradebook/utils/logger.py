import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "WARNING", name: str = "tradebook") -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    if logger.handlers:
        return logger

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
