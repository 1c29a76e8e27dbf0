"""Logging setup for the awsbase command line tool.

Log lines pass through ``RedactingFilter`` so resolved key material never
reaches a handler, even when the SDK loggers are turned up to DEBUG.
"""

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path

from awsbase.config import load_settings

_logger = logging.getLogger(__name__)

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Their DEBUG output includes request headers and credential provider chatter.
SDK_LOGGERS = ("botocore", "boto3", "urllib3")

_ACCESS_KEY_ID = re.compile(r"\b((?:AKIA|ASIA)[A-Z0-9]{4})[A-Z0-9]{12}\b")
_SECRET_ASSIGNMENT = re.compile(
    r"(?i)((?:aws_secret_access_key|aws_session_token|secretaccesskey|sessiontoken)"
    r"['\"]?\s*[:=]\s*['\"]?)[^\s'\",}]+"
)


def redact(text: str) -> str:
    """Mask access key ids (keeping an 8 character prefix) and secret assignments."""
    text = _ACCESS_KEY_ID.sub(r"\1***", text)
    return _SECRET_ASSIGNMENT.sub(r"\1***", text)


class RedactingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from settings; ``level`` overrides LOG_LEVEL.

    The SDK loggers stay at WARNING unless DEBUG is requested.
    """
    settings = load_settings()
    level_name = level or settings.logging.level
    resolved_level = getattr(logging, level_name.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if settings.logging.file:
        try:
            Path(settings.logging.file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(settings.logging.file))
        except OSError as exc:
            _logger.warning("Failed to open log file %s: %s", settings.logging.file, exc)

    formatter = logging.Formatter(_FORMAT, datefmt=_DATEFMT)
    redacting = RedactingFilter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(redacting)

    logging.basicConfig(level=resolved_level, handlers=handlers, force=True)

    sdk_level = logging.DEBUG if resolved_level <= logging.DEBUG else logging.WARNING
    for name in SDK_LOGGERS:
        logging.getLogger(name).setLevel(sdk_level)
