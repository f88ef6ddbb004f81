"""Diagnostic severity levels and parsing of their names."""

from __future__ import annotations

from enum import Enum

from .errors import DeriveError

__all__ = ["Severity", "parse_severity"]


class Severity(Enum):
    """How serious a diagnostic is."""

    ERROR = "Error"
    WARNING = "Warning"
    ADVICE = "Advice"


_ALIASES = {
    "error": Severity.ERROR,
    "err": Severity.ERROR,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "advice": Severity.ADVICE,
    "adv": Severity.ADVICE,
    "info": Severity.ADVICE,
}


def parse_severity(name: str | Severity) -> Severity:
    """Return the severity for ``name``, case-insensitively, accepting short aliases."""
    if isinstance(name, Severity):
        return name
    try:
        return _ALIASES[name.lower()]
    except KeyError:
        raise DeriveError(
            "Invalid severity level. Only Error, Warning, and Advice are supported."
        ) from None