"""Format strings that refer to fields of the object being described."""

from __future__ import annotations

import dataclasses
import string
from dataclasses import dataclass, field
from typing import Any, Callable, Collection, Mapping, Union

from .errors import DeriveError

__all__ = ["Display", "expand_shorthand"]

Member = Union[int, str]

_DIGITS = frozenset(string.digits)
_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_U32_MAX = 2**32 - 1


def _take_int(read: str) -> tuple[str, str]:
    end = 0
    while end < len(read) and read[end] in _DIGITS:
        end += 1
    return read[:end], read[end:]


def _take_ident(read: str) -> tuple[str, bool, str]:
    raw = read.startswith("r#")
    if raw:
        read = read[2:]
    end = 0
    while end < len(read) and read[end] in _IDENT_CHARS:
        end += 1
    return read[:end], raw, read[end:]


def _expand(
    fmt: str, members: Collection[Member], explicit: Collection[str]
) -> tuple[str, dict[str, Member], bool]:
    named = set(explicit)
    out: list[str] = []
    bindings: dict[str, Member] = {}
    bonus = False
    read = fmt

    while (brace := read.find("{")) != -1:
        out.append(read[: brace + 1])
        read = read[brace + 1 :]
        if read.startswith("{"):
            out.append("{")
            read = read[1:]
            continue
        if not read:
            return fmt, {}, False

        first = read[0]
        member: Member
        if first in _DIGITS:
            digits, read = _take_int(read)
            index = int(digits)
            if index > _U32_MAX:
                return fmt, {}, False
            if index not in members:
                out.append(digits)
                continue
            member = index
            formatvar = f"_{index}"
        elif first in _IDENT_START:
            name, raw, read = _take_ident(read)
            member = name
            formatvar = f"r_{name}" if raw else name
        else:
            continue

        if formatvar.startswith("_"):
            formatvar = f"field_{formatvar}"
        out.append(formatvar)
        if formatvar in named:
            continue
        named.add(formatvar)
        bindings[formatvar] = member
        if read.startswith("}") and member in members:
            bonus = True

    out.append(read)
    return "".join(out), bindings, bonus


def expand_shorthand(
    fmt: str, members: Collection[Member]
) -> tuple[str, dict[str, Member]]:
    """Rewrite field references in ``fmt`` into named placeholders.

    ``"{name}"`` stays a named placeholder bound to the field ``name``;
    ``"{0}"`` becomes ``"{field__0}"`` when ``0`` is among ``members`` and is
    otherwise left as a positional placeholder. Returns the new format string
    and the mapping from placeholder name to field.
    """
    new_fmt, bindings, _ = _expand(fmt, members, ())
    return new_fmt, bindings


def _member_value(obj: Any, member: Member, members: Collection[Member]) -> Any:
    if isinstance(member, int):
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return getattr(obj, dataclasses.fields(obj)[member].name)
        return obj[member]
    if member not in members:
        raise DeriveError(f"cannot find value `{member}` in this scope")
    return getattr(obj, member)


def _resolve(obj: Any, value: Any) -> Any:
    return value(obj) if callable(value) else value


@dataclass(frozen=True)
class Display:
    """A format string with extra arguments.

    Arguments that are callables are called with the described object when
    the string is rendered; other arguments are used as they are.
    """

    fmt: str
    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)
    bindings: Mapping[str, Member] = field(default_factory=dict)
    has_bonus_display: bool = False

    def expand_shorthand(self, members: Collection[Member]) -> Display:
        """Return a copy whose field references are bound to ``members``."""
        new_fmt, bindings, bonus = _expand(self.fmt, members, self.kwargs.keys())
        return dataclasses.replace(
            self, fmt=new_fmt, bindings=bindings, has_bonus_display=bonus
        )

    def render(self, obj: Any, members: Collection[Member]) -> str:
        """Format this display against the fields of ``obj``."""
        expanded = self.expand_shorthand(members)
        values = {
            var: _member_value(obj, member, members)
            for var, member in expanded.bindings.items()
        }
        args = [_resolve(obj, arg) for arg in self.args]
        kwargs = {name: _resolve(obj, value) for name, value in self.kwargs.items()}
        return expanded.fmt.format(*args, **kwargs, **values)


_Formatter = Callable[[Any], Any]