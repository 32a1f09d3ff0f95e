"""Logging setup for entry points.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by whoever owns the process (the CLI).
"""

from __future__ import annotations

import logging.config


def configure_logging(level: str = "WARNING") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                    "stream": "ext://sys.stderr",
                },
            },
            "loggers": {
                "variants": {"handlers": ["stderr"], "level": level, "propagate": False},
            },
        }
    )
