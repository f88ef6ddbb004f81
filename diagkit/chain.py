"""Iteration over chains of exception causes."""

from __future__ import annotations

from collections import deque
from typing import Iterator, Optional

__all__ = ["Chain"]


def _source(error: BaseException) -> Optional[BaseException]:
    if error.__cause__ is not None:
        return error.__cause__
    if error.__suppress_context__:
        return None
    return error.__context__


class Chain:
    """Iterates an exception followed by each of its causes in turn.

    The explicit ``__cause__`` is followed first; otherwise the implicit
    ``__context__`` unless it was suppressed. Items can also be taken from
    the back with :meth:`next_back`.
    """

    def __init__(self, head: Optional[BaseException] = None) -> None:
        self._next: Optional[BaseException] = head
        self._rest: Optional[deque[BaseException]] = None if head is not None else deque()

    def __iter__(self) -> Iterator[BaseException]:
        return self

    def __next__(self) -> BaseException:
        if self._rest is not None:
            if not self._rest:
                raise StopIteration
            return self._rest.popleft()
        error = self._next
        if error is None:
            raise StopIteration
        self._next = _source(error)
        return error

    def __len__(self) -> int:
        if self._rest is not None:
            return len(self._rest)
        count = 0
        cause = self._next
        while cause is not None:
            count += 1
            cause = _source(cause)
        return count

    def next_back(self) -> Optional[BaseException]:
        """Remove and return the deepest remaining cause, or ``None`` when empty."""
        if self._rest is None:
            rest: deque[BaseException] = deque()
            cause = self._next
            while cause is not None:
                rest.append(cause)
                cause = _source(cause)
            self._rest = rest
            self._next = None
        return self._rest.pop() if self._rest else None

    def __reversed__(self) -> Iterator[BaseException]:
        while (item := self.next_back()) is not None:
            yield item