"""Root logger configuration for the CLI entry point.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
installed here, once, by :func:`configure_logging` when a command starts.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

from star_registry.config import LoggingSettings

_FORMATS = {
    "simple": "%(levelname)s %(message)s",
    "detailed": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
}


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(settings: LoggingSettings) -> None:
    """Install a stream handler on the root logger according to ``settings``.

    Calling this more than once replaces the previously installed handler
    rather than stacking duplicates.

    Args:
        settings: Level name (``"DEBUG"``, ``"INFO"``...) and output format.
    """
    handler = logging.StreamHandler()
    if settings.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(_FORMATS[settings.format]))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_star_registry", False):
            root.removeHandler(existing)
    handler._star_registry = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.level.upper(), logging.INFO))
