"""Log sanitization filter that keeps credentials and athlete PII out of logs.

The remote scorer handles an OpenAI key and athlete names/e-mails, and
its error paths log provider messages verbatim. This filter redacts:
- OpenAI API keys and bearer tokens
- Authorization headers and key/token/secret fields
- Email addresses

Usage:
    from workout_scoring.utils.log_sanitizer import install_log_sanitizer

    install_log_sanitizer("workout_scoring")
"""

import logging
import re
from typing import Any


class LogSanitizationFilter(logging.Filter):
    """Logging filter that redacts sensitive values from log records."""

    # More specific patterns come first
    PATTERNS: list[tuple[re.Pattern, str]] = [
        # OpenAI project and user keys (sk-proj-..., sk-...)
        (re.compile(r'\bsk-[a-zA-Z0-9_-]{20,}'), '[REDACTED_OPENAI_KEY]'),

        # Bearer tokens in Authorization headers
        (re.compile(r'Bearer\s+[a-zA-Z0-9_\-\.]+', re.IGNORECASE), 'Bearer [REDACTED_TOKEN]'),

        # Authorization header values (generic)
        (re.compile(r'(Authorization["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),

        # key=value style secrets
        (re.compile(r'(api_key["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(apikey["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(secret["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)[^"\'&\s]+', re.IGNORECASE), r'\1[REDACTED]'),

        # Email addresses
        (re.compile(r'\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b'), '[REDACTED_EMAIL]'),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Sanitize the record in place; never drops it."""
        if record.msg:
            record.msg = self._sanitize(str(record.msg))
        if record.args:
            record.args = self._sanitize_args(record.args)
        return True

    def _sanitize(self, text: str) -> str:
        for pattern, replacement in self.PATTERNS:
            text = pattern.sub(replacement, text)
        return text

    def _sanitize_args(self, args: Any) -> Any:
        """Recursively sanitize log arguments."""
        if isinstance(args, str):
            return self._sanitize(args)
        elif isinstance(args, tuple):
            return tuple(self._sanitize_args(arg) for arg in args)
        elif isinstance(args, list):
            return [self._sanitize_args(arg) for arg in args]
        elif isinstance(args, dict):
            return {k: self._sanitize_args(v) for k, v in args.items()}
        else:
            str_val = str(args)
            sanitized = self._sanitize(str_val)
            # Keep the original object unless something was redacted
            return sanitized if sanitized != str_val else args


def install_log_sanitizer(logger_name: str | None = None) -> LogSanitizationFilter:
    """Install the sanitization filter.

    Args:
        logger_name: Install only on the named logger. If None, install on
            the root logger and its existing handlers.

    Returns:
        The installed filter
    """
    sanitizer = LogSanitizationFilter()

    if logger_name:
        target_logger = logging.getLogger(logger_name)
        if not any(isinstance(f, LogSanitizationFilter) for f in target_logger.filters):
            target_logger.addFilter(sanitizer)
    else:
        root_logger = logging.getLogger()
        root_logger.addFilter(sanitizer)
        for handler in root_logger.handlers:
            handler.addFilter(sanitizer)

    return sanitizer


def sanitize_string(text: str) -> str:
    """Sanitize text outside the logging system (e.g. error messages)."""
    return LogSanitizationFilter()._sanitize(text)
