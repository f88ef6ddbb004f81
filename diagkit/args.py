"""Options given to a diagnostic definition: code, url, help, severity and forwarding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Collection, Iterable, Mapping, Optional, Union

from .errors import DeriveError
from .fmt import Display, Member
from .forward import Forward
from .severity import Severity, parse_severity

__all__ = [
    "Code",
    "Url",
    "DiagnosticArg",
    "ArgKind",
    "DOCS_RS",
    "parse_diagnostic_args",
]

_CODE_REQUIRED = (
    "diagnostic code is required. Use diagnostic(code=...) with a string "
    "or a sequence of path segments to define one."
)
_BAD_URL = (
    "Invalid argument to url() sub-attribute. "
    "It must be either a string or a plain `docsrs` identifier"
)
_DOCS_RS_TEMPLATE = "https://docs.rs/{crate_name}/{crate_version}/{mod_name}/{item_path}"


class _DocsRs(Enum):
    DOCS_RS = "docsrs"


DOCS_RS = _DocsRs.DOCS_RS
"""Marker asking for a url that points at the item's generated documentation."""


def _to_display(value: Any, error: str) -> Display:
    if isinstance(value, Display):
        return value
    if isinstance(value, str):
        return Display(value)
    if isinstance(value, tuple) and value and isinstance(value[0], str):
        return Display(value[0], tuple(value[1:]))
    raise DeriveError(error)


@dataclass(frozen=True)
class Code:
    """A diagnostic code such as ``my_crate::bad_input``."""

    value: str

    @classmethod
    def parse(cls, value: Any) -> Code:
        """Build a code from a string or from a sequence of path segments."""
        if isinstance(value, Code):
            return value
        if isinstance(value, str):
            return cls(value)
        if isinstance(value, (tuple, list)) and value and all(
            isinstance(segment, str) for segment in value
        ):
            return cls("::".join(value))
        raise DeriveError(_CODE_REQUIRED)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Url:
    """A url for a diagnostic: a format string, or a link to generated docs."""

    display: Optional[Display] = None

    @property
    def is_docs_rs(self) -> bool:
        return self.display is None

    @classmethod
    def parse(cls, value: Any) -> Url:
        """Build a url from a format string, a ``(fmt, *args)`` tuple or :data:`DOCS_RS`."""
        if isinstance(value, Url):
            return value
        if value is DOCS_RS:
            return cls(None)
        return cls(_to_display(value, _BAD_URL))

    def render(
        self,
        obj: Any,
        members: Collection[Member],
        item_path: Optional[str] = None,
        crate_name: Optional[str] = None,
        crate_version: Optional[str] = None,
    ) -> str:
        """Return the url for ``obj``.

        A format string is rendered against the fields of ``obj``. A docs
        link needs ``item_path`` (such as ``"struct.Foo.html"``), the crate
        name and its version; the module name is the crate name with
        dashes turned into underscores.
        """
        if self.display is not None:
            return self.display.render(obj, members)
        if item_path is None or crate_name is None or crate_version is None:
            raise DeriveError(
                "a docs url needs an item path, a crate name and a crate version"
            )
        return _DOCS_RS_TEMPLATE.format(
            crate_name=crate_name,
            crate_version=crate_version,
            mod_name=crate_name.replace("-", "_"),
            item_path=item_path,
        )


class ArgKind(Enum):
    """The kinds of option a diagnostic definition accepts."""

    TRANSPARENT = "transparent"
    FORWARD = "forward"
    CODE = "code"
    SEVERITY = "severity"
    HELP = "help"
    URL = "url"


@dataclass(frozen=True)
class DiagnosticArg:
    """One parsed option: its kind and its parsed value."""

    kind: ArgKind
    value: Union[None, Forward, Code, Severity, Display, Url] = None


def _parse_forward(value: Any) -> Forward:
    if isinstance(value, Forward):
        return value
    if isinstance(value, bool):
        raise DeriveError("forward needs a field name or a field index")
    if isinstance(value, (int, str)):
        return Forward(value)
    raise DeriveError("forward needs a field name or a field index")


def _parse_one(name: str, value: Any) -> Optional[DiagnosticArg]:
    if name == "transparent":
        if value is True:
            return DiagnosticArg(ArgKind.TRANSPARENT)
        if value is False:
            return None
        raise DeriveError("transparent takes True or False")
    if name == "forward":
        return DiagnosticArg(ArgKind.FORWARD, _parse_forward(value))
    if name == "code":
        return DiagnosticArg(ArgKind.CODE, Code.parse(value))
    if name == "severity":
        return DiagnosticArg(ArgKind.SEVERITY, parse_severity(value))
    if name == "help":
        return DiagnosticArg(ArgKind.HELP, _to_display(value, "help must be a format string"))
    if name == "url":
        return DiagnosticArg(ArgKind.URL, Url.parse(value))
    raise DeriveError("Unrecognized diagnostic option")


def parse_diagnostic_args(
    options: Union[Mapping[str, Any], Iterable[tuple[str, Any]]],
) -> list[DiagnosticArg]:
    """Parse options, given as a mapping or as ``(name, value)`` pairs, in order."""
    items = options.items() if isinstance(options, Mapping) else options
    parsed = (_parse_one(name, value) for name, value in items)
    return [arg for arg in parsed if arg is not None]