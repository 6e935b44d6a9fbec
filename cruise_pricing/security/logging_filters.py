"""Logging filters that scrub coupon codes and credentials."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(?P<key>Authorization: Bearer\s+|"
    r"[\"']?(?:entered_coupon_code|required_coupon_code|coupon_code)[\"']?\s*[:=]\s*[\"']?)"
    r"(?P<value>[\w\.-]+)",
    re.IGNORECASE,
)


def redact(message: str) -> str:
    return _SENSITIVE_PATTERN.sub(lambda match: f"{match['key']}**REDACTED**", message)


class SensitiveFilter(logging.Filter):
    """Replace coupon codes and bearer tokens in log messages with a marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str) and record.args:
            try:
                message = record.getMessage()
            except (TypeError, ValueError):
                return True
            record.msg = redact(message)
            record.args = ()
        elif isinstance(record.msg, str):
            record.msg = redact(record.msg)
        return True


_DEFAULT_LOGGERS = ("cruise_pricing", "uvicorn", "uvicorn.access", "uvicorn.error", "")


def _attach(target: logging.Filterer) -> None:
    if not any(isinstance(flt, SensitiveFilter) for flt in target.filters):
        target.addFilter(SensitiveFilter())


def install(logger_names: tuple[str, ...] = _DEFAULT_LOGGERS) -> None:
    """Attach a ``SensitiveFilter`` to each named logger and its handlers.

    Logger filters skip records propagated from child loggers; handler
    filters do not, which is why handlers get one too.
    """
    for name in logger_names:
        target = logging.getLogger(name)
        _attach(target)
        for handler in target.handlers:
            _attach(handler)


__all__ = ["SensitiveFilter", "install", "redact"]
