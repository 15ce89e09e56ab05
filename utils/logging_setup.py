from __future__ import annotations

import logging
import sys
from typing import Any

from config.settings import get_settings


_INITIALIZED: bool = False


class SafeExtraFormatter(logging.Formatter):
    """Formatter that tolerates missing extra fields by injecting defaults."""

    DEFAULTS: dict[str, Any] = {
        "op": "-",
        "attempt": "-",
        "status": "-",
        "duration_ms": "-",
        "provider": "-",
        "error": "-",
        "run_id": "-",
    }

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        for key, value in self.DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return super().format(record)


def init_logging(level: str | None = None) -> None:
    """Configure the root logger once; later calls are no-ops."""
    global _INITIALIZED
    if _INITIALIZED:
        return

    log_level_str = (level or get_settings().log_level).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if not root_logger.handlers:
        # stderr keeps stdout clean for the CLI's JSON output
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(
            SafeExtraFormatter(
                fmt=(
                    "%(asctime)s %(levelname)s %(name)s %(message)s "
                    "op=%(op)s attempt=%(attempt)s status=%(status)s duration_ms=%(duration_ms)s "
                    "provider=%(provider)s error=%(error)s run_id=%(run_id)s"
                )
            )
        )
        root_logger.addHandler(handler)

    # Quiet chatty transport loggers unless debugging
    if log_level > logging.DEBUG:
        for noisy in ("urllib3", "httpx", "openai"):
            logging.getLogger(noisy).setLevel(logging.WARNING)

    _INITIALIZED = True
