# src/html_shell/core/utils/configure_logging.py
import logging
import sys
from typing import Dict, Optional, Union

from tqdm import tqdm

LevelLike = Union[str, int, None]

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"


class LogWithTqdm(logging.Handler):
    """
    A logging handler that writes through `tqdm.write()`, so log messages
    do not break the progress bar of a running batch.
    """
    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _to_level(level: LevelLike, fallback: int) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return fallback


def configure_logger(
        general_level: LevelLike = 'WARNING',
        module_specific_levels: Optional[Dict[str, LevelLike]] = None,
        silenced_loggers: Optional[Dict[str, LevelLike]] = None,
) -> None:
    """
    Configures the root logger and specific module loggers with a
    tqdm-friendly handler.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.WARNING))

    # Replace whatever was installed before.
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, level in (module_specific_levels or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    # Muzzle noisy loggers by setting their level high.
    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))
