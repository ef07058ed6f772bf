"""Logging configuration for the command-line interface.

`setup_logging` configures the root logger through `logging.config.dictConfig`
with a single `rich.logging.RichHandler` writing to stderr, so stdout stays
free for results. The `GENEANALYZER_LOG_LEVEL` environment variable overrides
the requested level; it accepts level names ("debug") or numbers ("10").
"""

from __future__ import annotations

import logging
import logging.config
import os

from rich.console import Console

LOG_LEVEL_ENV = "GENEANALYZER_LOG_LEVEL"


def resolve_level(level: int | str) -> int:
    """Resolve a level name or number, honouring the environment override.

    Invalid values fall back to WARNING.
    """
    raw = os.getenv(LOG_LEVEL_ENV, str(level)).strip()
    try:
        return int(raw)
    except ValueError:
        resolved = getattr(logging, raw.upper(), None)
        if not isinstance(resolved, int):
            return logging.WARNING
        return resolved


def setup_logging(level: int | str = logging.WARNING) -> int:
    """Configure the root logger and return the effective level."""
    eff_level = resolve_level(level)
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "rich": {"format": "%(name)s: %(message)s", "datefmt": "[%X]"},
        },
        "handlers": {
            "console": {
                "class": "rich.logging.RichHandler",
                "formatter": "rich",
                "level": eff_level,
                "console": Console(stderr=True),
                "show_path": False,
            }
        },
        "root": {"level": eff_level, "handlers": ["console"]},
    }
    logging.config.dictConfig(config)
    logging.getLogger(__name__).debug(
        "Logging configured with level %s", logging.getLevelName(eff_level)
    )
    return eff_level
