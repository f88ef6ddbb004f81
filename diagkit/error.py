"""Errors reported by the library's own operations."""

from __future__ import annotations

from dataclasses import dataclass

from .args import DOCS_RS
from .derive import Diagnostic, diagnostic

__all__ = ["MietteError", "IoError", "OutOfBounds"]


@diagnostic
class MietteError(Diagnostic, Exception):
    """Base of the errors raised by the library's own operations."""


@diagnostic(code="diagkit::io_error", url=DOCS_RS, crate_name="diagkit")
@dataclass(eq=False)
class IoError(MietteError):
    """Something went wrong while reading source code."""

    error: OSError

    def __str__(self) -> str:
        return str(self.error)


@diagnostic(
    code="diagkit::span_out_of_bounds",
    help="Double-check your spans. Do you have an off-by-one error?",
    url=DOCS_RS,
    crate_name="diagkit",
)
class OutOfBounds(MietteError):
    """A span extends beyond the bounds of its source code."""

    def __init__(self) -> None:
        super().__init__("The given offset is outside the bounds of its Source")