"""
chipview logging.

Parsing runs on worker threads, so every record carries the thread name:

    [INFO] chipview-parse-3: Job 3 parsed top.gds in 0.42s

The starting level is WARNING, or whatever ``CHIPVIEW_LOG_LEVEL`` names.
Change it at runtime with :func:`set_log_level`:

    import chipview
    chipview.set_log_level('SILENT')   # nothing at all
    chipview.set_log_level('DEBUG')    # skipped polygons, discarded results
"""

import logging
import os

SILENT = logging.CRITICAL + 1

logger = logging.getLogger('chipview')

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter('[%(levelname)s] %(threadName)s: %(message)s'))
    logger.addHandler(handler)


def _resolve(level: str | int) -> int:
    if not isinstance(level, str):
        return int(level)
    name = level.upper()
    if name == 'SILENT':
        return SILENT
    numeric = logging.getLevelName(name)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level '{level}'")
    return numeric


def set_log_level(level: str | int) -> int:
    """
    Set the chipview log level and return the previous one.

    Args:
        level: 'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL', 'SILENT'
               (any case), or a numeric level

    Raises:
        ValueError: If *level* is a string that names no logging level.
    """
    previous = logger.level
    logger.setLevel(_resolve(level))
    return previous


logger.setLevel(_resolve(os.environ.get('CHIPVIEW_LOG_LEVEL', 'WARNING')))
