"""Diagnostic data carried by the fields of a dataclass.

Fields are marked with :func:`label`, :func:`help_field`, :func:`related`,
:func:`source_code` and :func:`diagnostic_source`. :class:`FieldSpecs`
collects those markers from a dataclass and reads the marked values from
its instances.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, Optional

from .errors import DeriveError
from .fmt import Display

__all__ = [
    "LabeledSpan",
    "FieldSpecs",
    "label",
    "help_field",
    "related",
    "source_code",
    "diagnostic_source",
]

_METADATA_KEY = "diagkit"


@dataclass(frozen=True)
class LabeledSpan:
    """A span of source text, given as offset and length, with an optional label."""

    label: Optional[str]
    offset: int
    length: int = 0

    @classmethod
    def new_with_span(cls, label: Optional[str], span: Any) -> LabeledSpan:
        """Build a labelled span from a span-like value.

        Accepted spans: an ``int`` offset (length 0), an ``(offset, length)``
        pair, a ``range`` with step 1, or any object with ``offset`` and
        ``length`` attributes.
        """
        offset, length = _to_span(span)
        return cls(label, offset, length)

    @property
    def end(self) -> int:
        """The offset just past the end of the span."""
        return self.offset + self.length


def _to_span(span: Any) -> tuple[int, int]:
    if isinstance(span, bool):
        raise TypeError(f"not a span: {span!r}")
    if isinstance(span, int):
        return span, 0
    if isinstance(span, range):
        if span.step != 1:
            raise TypeError("a span range must have a step of 1")
        return span.start, span.stop - span.start
    if isinstance(span, (tuple, list)) and len(span) == 2:
        offset, length = span
        if all(isinstance(v, int) and not isinstance(v, bool) for v in (offset, length)):
            return offset, length
        raise TypeError(f"not a span: {span!r}")
    if hasattr(span, "offset") and hasattr(span, "length"):
        return int(span.offset), int(span.length)
    raise TypeError(f"not a span: {span!r}")


class _Role(Enum):
    HELP = "help"
    RELATED = "related"
    SOURCE_CODE = "source_code"
    DIAGNOSTIC_SOURCE = "diagnostic_source"


@dataclass(frozen=True)
class _LabelMarker:
    display: Optional[Display]


def _marked_field(marker: Any, kwargs: dict[str, Any]) -> Any:
    user_metadata: Mapping[str, Any] = kwargs.pop("metadata", None) or {}
    markers = (*user_metadata.get(_METADATA_KEY, ()), marker)
    metadata = {**user_metadata, _METADATA_KEY: markers}
    return dataclasses.field(metadata=metadata, **kwargs)


def label(text: Optional[str] = None, *args: Any, **kwargs: Any) -> Any:
    """Mark a dataclass field as a labelled span.

    ``text`` is a format string that may name other fields, as in
    ``"expected {expected}"``; ``args`` are extra positional format
    arguments, called with the object if callable. ``kwargs`` go to
    :func:`dataclasses.field`. A field value of ``None`` yields no label.
    """
    if text is None:
        if args:
            raise DeriveError(
                "Invalid argument to label() attribute. "
                "The first argument must be a literal string."
            )
        display = None
    elif isinstance(text, str):
        display = Display(text, tuple(args))
    else:
        raise DeriveError(
            "Invalid argument to label() attribute. "
            "The first argument must be a literal string."
        )
    return _marked_field(_LabelMarker(display), kwargs)


def help_field(**kwargs: Any) -> Any:
    """Mark a dataclass field as holding the help text."""
    return _marked_field(_Role.HELP, kwargs)


def related(**kwargs: Any) -> Any:
    """Mark a dataclass field as holding related diagnostics."""
    return _marked_field(_Role.RELATED, kwargs)


def source_code(**kwargs: Any) -> Any:
    """Mark a dataclass field as holding the source code."""
    return _marked_field(_Role.SOURCE_CODE, kwargs)


def diagnostic_source(**kwargs: Any) -> Any:
    """Mark a dataclass field as holding the diagnostic this one is caused by."""
    return _marked_field(_Role.DIAGNOSTIC_SOURCE, kwargs)


@dataclass(frozen=True)
class _LabelField:
    name: str
    display: Optional[Display]


def _dataclass_fields(fields: Any) -> tuple[dataclasses.Field, ...]:
    if dataclasses.is_dataclass(fields):
        return dataclasses.fields(fields)
    if isinstance(fields, type):
        return ()
    return tuple(fields)


@dataclass(frozen=True)
class FieldSpecs:
    """The diagnostic roles found on the fields of one dataclass."""

    members: frozenset[str] = frozenset()
    label_fields: tuple[_LabelField, ...] = ()
    help_member: Optional[str] = None
    related_member: Optional[str] = None
    source_code_member: Optional[str] = None
    diagnostic_source_member: Optional[str] = None

    @classmethod
    def from_fields(cls, fields: Any) -> FieldSpecs:
        """Collect markers from a dataclass, an instance of one, or its fields.

        A class that is not a dataclass has no fields. For every role but
        labels only the first marked field counts.
        """
        field_list = _dataclass_fields(fields)
        labels: list[_LabelField] = []
        roles: dict[_Role, str] = {}
        for fld in field_list:
            for marker in fld.metadata.get(_METADATA_KEY, ()):
                if isinstance(marker, _LabelMarker):
                    labels.append(_LabelField(fld.name, marker.display))
                elif isinstance(marker, _Role):
                    roles.setdefault(marker, fld.name)
        return cls(
            members=frozenset(fld.name for fld in field_list),
            label_fields=tuple(labels),
            help_member=roles.get(_Role.HELP),
            related_member=roles.get(_Role.RELATED),
            source_code_member=roles.get(_Role.SOURCE_CODE),
            diagnostic_source_member=roles.get(_Role.DIAGNOSTIC_SOURCE),
        )

    def labels(self, obj: Any) -> Optional[Iterator[LabeledSpan]]:
        """Return the labelled spans of ``obj``, or ``None`` if no field is a label."""
        if not self.label_fields:
            return None
        spans: list[LabeledSpan] = []
        for lf in self.label_fields:
            value = getattr(obj, lf.name)
            if value is None:
                continue
            text = None if lf.display is None else lf.display.render(obj, self.members)
            spans.append(LabeledSpan.new_with_span(text, value))
        return iter(spans)

    def help(self, obj: Any) -> Optional[str]:
        """Return the help text held by ``obj``, if any."""
        if self.help_member is None:
            return None
        value = getattr(obj, self.help_member)
        return None if value is None else str(value)

    def related(self, obj: Any) -> Optional[Iterator[Any]]:
        """Return an iterator over the related diagnostics of ``obj``."""
        if self.related_member is None:
            return None
        value: Optional[Iterable[Any]] = getattr(obj, self.related_member)
        return iter(()) if value is None else iter(value)

    def source_code(self, obj: Any) -> Any:
        """Return the source code held by ``obj``, or ``None`` if no field holds it."""
        if self.source_code_member is None:
            return None
        return getattr(obj, self.source_code_member)

    def diagnostic_source(self, obj: Any) -> Any:
        """Return the diagnostic ``obj`` is caused by, if a field holds it."""
        if self.diagnostic_source_member is None:
            return None
        return getattr(obj, self.diagnostic_source_member)