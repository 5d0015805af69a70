"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+"
    r"|access_token\"\s*:\s*\"[^\"]+\""
    r"|password\"\s*:\s*\"[^\"]+\""
    r"|clientHandle\"\s*:\s*\"[^\"]+\""
    r"|\bpi_\w+_secret_\w+"
    r"|\bsk_(?:live|test)_\w+)",
    re.IGNORECASE,
)

REDACTED = "**REDACTED**"


def scrub(text: str) -> str:
    return _SENSITIVE_PATTERN.sub(REDACTED, text)


class SensitiveFilter(logging.Filter):
    """Replace sensitive tokens in log messages with a redaction marker."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = scrub(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    key: scrub(value) if isinstance(value, str) else value
                    for key, value in record.args.items()
                }
            else:
                record.args = tuple(
                    scrub(arg) if isinstance(arg, str) else arg for arg in record.args
                )
        return True


__all__ = ["REDACTED", "SensitiveFilter", "scrub"]
