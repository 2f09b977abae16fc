import logging
import os

PACKAGE_LOGGER = "vinfo"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def configure_logging(default_level: int = logging.INFO) -> logging.Logger:
    """Send vinfo's log records to stderr, leaving the root logger alone.

    Respects VINFO_LOG_LEVEL env var if present.  Calling it again only
    updates the level.
    """
    level_name = os.getenv("VINFO_LOG_LEVEL")
    level = default_level
    if level_name:
        level = getattr(logging, level_name.upper(), default_level)
        if not isinstance(level, int):
            level = default_level

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    if not any(getattr(h, "_vinfo_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._vinfo_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
