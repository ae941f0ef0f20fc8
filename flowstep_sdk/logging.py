import logging

from core.settings import get_engine_settings

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured: set[str] = set()


def get_logger(name: str) -> logging.Logger:
    """
    Logger utility used across the engine.

    Attaches a single stream handler the first time a name is requested and
    takes the level from ``EngineSettings.log_level``.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(_FORMAT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(_resolve_level(get_engine_settings().log_level))
        _configured.add(name)
    return logger


def configure_logging(level: str | int) -> None:
    """Reset the level of every logger handed out by ``get_logger``."""
    resolved = _resolve_level(level)
    for name in _configured:
        logging.getLogger(name).setLevel(resolved)


def _resolve_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)
