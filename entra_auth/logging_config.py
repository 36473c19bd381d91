"""Logging setup for the entra-auth command line and embedding applications.

Levels and the optional log file come from Settings (ENTRA_LOG_LEVEL,
ENTRA_LOG_FILE). Every handler installed here masks credential values, so a
secret that slips into a message or an exception text is not written out.
"""

import logging
import re

from .core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

REDACTED = "[REDACTED]"

# Form fields and JSON keys that carry credentials, longest first
SECRET_FIELDS = (
    "session_key_jwe",
    "request_nonce",
    "refresh_token",
    "access_token",
    "device_code",
    "password",
    "id_token",
    "request",
    "Nonce",
)

_SECRET_FIELD_RE = re.compile(
    r"(?P<key>\b(?:" + "|".join(SECRET_FIELDS) + r")\b[\"']?\s*[=:]\s*[\"']?)"
    r"(?P<value>[^&\"'\s,}]+)"
)

# Compact JWS/JWE values: base64url JSON header "eyJ..." followed by segments
_COMPACT_TOKEN_RE = re.compile(r"\beyJ[A-Za-z0-9_-]*(?:\.[A-Za-z0-9_-]*)+")


def redact_secrets(text: str) -> str:
    """Mask credential values in ``text``.

    Replaces the value of known secret fields (``password=...``,
    ``"refresh_token": "..."``) and any compact JWT or JWE.
    """
    text = _COMPACT_TOKEN_RE.sub(REDACTED, text)
    return _SECRET_FIELD_RE.sub(lambda m: f"{m.group('key')}{REDACTED}", text)


class RedactSecretsFilter(logging.Filter):
    """Handler filter that rewrites records with credentials masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_secrets(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    settings: Settings | None = None,
    level: str | None = None,
    name: str = "entra_auth",
) -> logging.Logger:
    """Configure root logging for entra-auth.

    Args:
        settings: Source of log_level and log_file (default: loaded from ENTRA_*)
        level: Overrides settings.log_level, e.g. from --log-level
        name: Logger name to return

    Returns:
        Configured logger instance
    """
    settings = settings or Settings()
    level = (level or settings.log_level).upper()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file))

    redact_filter = RedactSecretsFilter()
    for handler in handlers:
        handler.addFilter(redact_filter)

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    # httpx logs full request URLs at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger(name)
