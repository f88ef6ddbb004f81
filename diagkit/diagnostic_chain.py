"""Iteration over a diagnostic, the diagnostic it came from, and so on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional

__all__ = ["DiagnosticChain"]


def _source(error: Any) -> Optional[BaseException]:
    if not isinstance(error, BaseException):
        return None
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


@dataclass(frozen=True)
class _Link:
    error: Any
    is_diagnostic: bool

    def nested(self) -> Optional[_Link]:
        if self.is_diagnostic:
            inner = self.error.diagnostic_source()
            if inner is not None:
                return _Link(inner, True)
        cause = _source(self.error)
        return None if cause is None else _Link(cause, False)


class DiagnosticChain:
    """Iterates a diagnostic and its causes.

    From a diagnostic, its ``diagnostic_source()`` is followed first and its
    exception cause otherwise. Once on a plain exception, only exception
    causes are followed. A chain made with no head is empty.
    """

    def __init__(self) -> None:
        self._state: Optional[_Link] = None

    @classmethod
    def from_diagnostic(cls, head: Any) -> DiagnosticChain:
        """Start a chain at the diagnostic ``head``."""
        chain = cls()
        chain._state = _Link(head, True)
        return chain

    @classmethod
    def from_exception(cls, head: BaseException) -> DiagnosticChain:
        """Start a chain at ``head``, following exception causes only."""
        chain = cls()
        chain._state = _Link(head, False)
        return chain

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        link = self._state
        if link is None:
            raise StopIteration
        self._state = link.nested()
        return link.error

    def __len__(self) -> int:
        count = 0
        link = self._state
        while link is not None:
            count += 1
            link = link.nested()
        return count