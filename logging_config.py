from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Iterable, Sequence

from settings import get_settings

_DEFAULT_EXTRA_KEYS = (
    "device_id",
    "has_data",
    "state",
    "reason",
    "status_code",
    "elapsed_s",
)

_configured = False


class ContextualFormatter(logging.Formatter):
    """Append selected ``extra=`` attributes as ``key=value`` pairs."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._extra_keys: Sequence[str] = tuple(extra_keys or _DEFAULT_EXTRA_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = " ".join(
            f"{key}={_render_value(getattr(record, key))}"
            for key in self._extra_keys
            if getattr(record, key, None) is not None
        )
        if context:
            return f"{message} | {context}"
        return message


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


def configure_logging(
    level: str | int | None = None,
    stream: str = "ext://sys.stderr",
    force: bool = False,
) -> None:
    """Configure root logging once for the API process or the CLI.

    ``force`` reapplies the configuration, which the CLI uses when a verbosity
    flag overrides an earlier setup.
    """
    global _configured
    if _configured and not force:
        return

    log_level = level if level is not None else get_settings().log_level
    if isinstance(log_level, str):
        log_level = log_level.upper()

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "style": "%",
                    "extra_keys": list(_DEFAULT_EXTRA_KEYS),
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "contextual",
                    "stream": stream,
                }
            },
            "root": {"handlers": ["default"], "level": log_level},
        }
    )

    _configured = True
