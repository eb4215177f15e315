"""
Logging configuration for applications using the Flickr client.

Library modules only create ``logging.getLogger(__name__)`` loggers. Applications
call ``setup_logging`` once; it installs a console handler whose filter masks
OAuth tokens and signatures that might otherwise end up in log messages.
"""

import logging
import re
import sys
import threading
from typing import Optional

from .config import env_str

_config_lock = threading.Lock()
_HANDLER_NAME = "flickr_client.console"
_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_SECRET_PATTERN = re.compile(
    r"(?P<key>oauth_token_secret|oauth_token|oauth_signature|oauth_verifier|api_key|oauth_consumer_key)"
    r"(?P<sep>['\"]?\s*[=:]\s*['\"]?)(?P<value>[^&'\"\s,}]+)"
)


def redact_secrets(text: str) -> str:
    """Mask OAuth token/signature values in ``text``."""
    return _SECRET_PATTERN.sub(lambda match: f"{match.group('key')}{match.group('sep')}***", text)


class CredentialRedactionFilter(logging.Filter):
    """Rewrites records so credentials never reach a handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact_secrets(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def _resolve_level(level: Optional[str]) -> int:
    name = (level or env_str("FLICKR_LOG_LEVEL", or_value="INFO")).upper()
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {name}")
    return resolved


def setup_logging(level: Optional[str] = None, *, logger_name: str = "flickr_client") -> logging.Logger:
    """Attach a redacting console handler to ``logger_name``; safe to call repeatedly."""
    with _config_lock:
        logger = logging.getLogger(logger_name)
        logger.setLevel(_resolve_level(level))
        for handler in logger.handlers:
            if handler.get_name() == _HANDLER_NAME:
                return logger

        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))
        handler.addFilter(CredentialRedactionFilter())
        logger.addHandler(handler)
        return logger


__all__ = ["CredentialRedactionFilter", "redact_secrets", "setup_logging"]
