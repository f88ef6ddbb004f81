"""Errors raised while building diagnostic definitions."""

from __future__ import annotations

__all__ = ["DeriveError"]


class DeriveError(Exception):
    """An error in a diagnostic definition. Several errors can be combined into one."""

    def __init__(self, *args: object) -> None:
        super().__init__(*args)
        self.messages: list[str] = [str(arg) for arg in args]

    def combine(self, other: DeriveError) -> DeriveError:
        """Append the messages of ``other`` to this error and return it."""
        self.messages.extend(other.messages)
        self.args = tuple(self.messages)
        return self

    def __str__(self) -> str:
        return "\n".join(self.messages)