"""
Logging helpers for the billing SDK
Library logging setup, token scrubbing and the JSON-lines audit writer
"""

import json
import logging
import re
import threading
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from vendor_billing.client.http_client import HttpAuditEntry


PACKAGE_LOGGER = "vendor_billing"

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_SENSITIVE_PATTERN = re.compile(
    r"(Bearer\s+[\w\.-]+|access_token\"?\s*[:=]\s*\"?[^\"\s,]+\"?)",
    re.IGNORECASE,
)


class SensitiveFilter(logging.Filter):
    """Replace bearer tokens in log messages with a redaction marker"""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        scrubbed = _SENSITIVE_PATTERN.sub("[REDACTED]", message)
        if scrubbed != message:
            record.msg = scrubbed
            record.args = None
        return True


def configure_logging(
    level: Union[int, str] = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Attach a stream handler to the package logger

    Calling this more than once only updates the level.

    Args:
        level: Logging level name or number
        fmt: Log record format

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    if not any(getattr(h, "_billing_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        # Logger filters skip records propagated from child loggers
        handler.addFilter(SensitiveFilter())
        handler._billing_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger


class AuditLogWriter:
    """
    Appends HTTP audit entries to a file, one JSON object per line

    Instances are callable so they can be passed straight to
    HttpClient.set_audit_log_callback.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def write(self, entry: "HttpAuditEntry") -> None:
        """Serialize one entry and append it to the log file"""
        line = json.dumps(asdict(entry), default=str)
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

    def __call__(self, entry: "HttpAuditEntry") -> None:
        self.write(entry)


def audit_writer_for(path: Optional[str]) -> Optional[AuditLogWriter]:
    """Build a writer for a configured path, or None when no path is set"""
    if not path:
        return None
    return AuditLogWriter(path)
