"""Forwarding of diagnostic methods to a field of the object.

Field layouts are given as ``None`` for a unit type, an ``int`` count for
positional fields, or an iterable of names for named fields.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Union

from .errors import DeriveError

__all__ = ["WhichFn", "Forward"]


class WhichFn(Enum):
    """The diagnostic methods that can be generated or forwarded."""

    CODE = "code"
    HELP = "help"
    URL = "url"
    SEVERITY = "severity"
    LABELS = "labels"
    SOURCE_CODE = "source_code"
    RELATED = "related"
    DIAGNOSTIC_SOURCE = "diagnostic_source"

    @property
    def method_name(self) -> str:
        return self.value


_EXACTLY_ONE = "you can only use diagnostic(transparent) with exactly one field"
_UNIT = "you cannot use diagnostic(transparent) with a unit struct or a unit variant"


@dataclass(frozen=True)
class Forward:
    """Delegates diagnostic methods to the field ``field`` (a name or an index)."""

    field: Union[int, str]

    @classmethod
    def for_transparent_field(cls, fields: Union[None, int, Iterable[str]]) -> Forward:
        """Build the forward for a type that must have exactly one field."""
        if fields is None:
            raise DeriveError(_UNIT)
        if isinstance(fields, int):
            if fields != 1:
                raise DeriveError(_EXACTLY_ONE)
            return cls(0)
        names = list(fields)
        if len(names) != 1:
            raise DeriveError(_EXACTLY_ONE)
        return cls(names[0])

    def target(self, obj: Any) -> Any:
        """Return the field of ``obj`` that calls are forwarded to."""
        if isinstance(self.field, int):
            if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
                return getattr(obj, dataclasses.fields(obj)[self.field].name)
            return obj[self.field]
        return getattr(obj, self.field)

    def call(self, obj: Any, which_fn: WhichFn) -> Any:
        """Call the method ``which_fn`` on the forwarded field of ``obj``."""
        return getattr(self.target(obj), which_fn.method_name)()