import functools
import logging
import time
from typing import Optional

ROOT_LOGGER_NAME = "raid_engine"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Niveau de détail du décorateur ``log_calls``
LOG_LEVELS = {"NONE": 0, "BASIC": 1, "DETAILED": 2}
LOG_LEVEL = LOG_LEVELS["BASIC"]


def configure_logging(level: int | str = logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Attach a stream handler to the project root logger.

    Calling it twice only updates the level and format of the existing handler.
    """

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    handler = next((h for h in logger.handlers if getattr(h, "_raid_engine", False)), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler._raid_engine = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return logger


def log_calls(func):
    """Décorateur qui trace les appels, les retours et le temps d'exécution."""

    call_logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.calls")

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if LOG_LEVEL == 0 or not call_logger.isEnabledFor(logging.DEBUG):
            return func(*args, **kwargs)

        call_logger.debug("Appel %s args=%r kwargs=%r", func.__qualname__, args, kwargs)
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed = time.perf_counter() - start_time

        if LOG_LEVEL >= 2:
            call_logger.debug("Retour %s: %r", func.__qualname__, result)
        call_logger.debug("Temps d'exécution %s: %.6f s", func.__qualname__, elapsed)
        return result

    return wrapper


_RESOLUTION_LOGGER_NAME = f"{ROOT_LOGGER_NAME}.resolution"
_RESOLUTION_LOGGER: Optional[logging.Logger] = None


def get_resolution_logger() -> logging.Logger:
    """Return the shared logger receiving one trace line per resolved hit."""

    global _RESOLUTION_LOGGER
    if _RESOLUTION_LOGGER is not None:
        return _RESOLUTION_LOGGER

    logger = logging.getLogger(_RESOLUTION_LOGGER_NAME)
    logger.propagate = True
    _RESOLUTION_LOGGER = logger
    return logger
