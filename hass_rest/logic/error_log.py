"""Parsing of the plain-text Home Assistant error log."""

from __future__ import annotations

import re
from datetime import datetime

from hass_rest.services.models import ErrorLogEntry

# 2024-05-01 10:00:00.123 ERROR (MainThread) [homeassistant.core] Message
_HEADER_PATTERN = re.compile(
    r"^(?P<timestamp>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}(?:\.\d+)?)\s+"
    r"(?P<level>[A-Z]+)\s+"
    r"(?:\((?P<source>[^)]*)\)\s+)?"
    r"(?:\[(?P<logger>[^\]]+)\]\s*)?"
    r"(?P<message>.*)$"
)


def _parse_timestamp(raw: str) -> datetime | None:
    for fmt in ("%Y-%m-%d %H:%M:%S.%f", "%Y-%m-%d %H:%M:%S"):
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    return None


def parse_error_log(text: str) -> list[ErrorLogEntry]:
    """Split a raw error log into entries.

    Lines that do not start with a timestamped header (tracebacks, wrapped
    messages) belong to the entry above them. Anything before the first
    header becomes an entry of its own without metadata.
    """

    entries: list[ErrorLogEntry] = []
    current: dict | None = None
    lines: list[str] = []

    def _flush() -> None:
        if current is None:
            return
        message = "\n".join(lines).rstrip()
        entries.append(ErrorLogEntry(**current, message=message))

    for line in (text or "").splitlines():
        match = _HEADER_PATTERN.match(line)
        if match:
            _flush()
            current = {
                "timestamp": _parse_timestamp(match.group("timestamp")),
                "level": match.group("level"),
                "source": match.group("source"),
                "logger": match.group("logger"),
            }
            lines = [match.group("message")]
            continue

        if current is None:
            if not line.strip():
                continue
            current = {}
            lines = []
        lines.append(line)

    _flush()
    return entries
