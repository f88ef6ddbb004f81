"""A class decorator that gives a class its diagnostic methods.

Options are given as keyword arguments (``code``, ``help``, ``severity``,
``url``, ``forward``, ``transparent``). Dataclass fields marked with the
helpers in :mod:`diagkit.fields` supply labels, help text, related
diagnostics, source code and the diagnostic source.

A decorated subclass of a decorated class is treated as a variant of it: it
receives the options of its decorated ancestors followed by its own, and its
documentation url points at the variant.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from functools import reduce
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Union

from .args import ArgKind, Code, DiagnosticArg, Url, parse_diagnostic_args
from .errors import DeriveError
from .fields import FieldSpecs, LabeledSpan
from .fmt import Display
from .forward import Forward, WhichFn
from .severity import Severity

__all__ = ["Diagnostic", "ConcreteArgs", "diagnostic"]

_ATTRS = "_diagnostic_attrs"
_IMPLS = "_diagnostic_impls"
_METHOD_NAMES = frozenset(which.method_name for which in WhichFn)
_TRANSPARENT_MIXED = "diagnostic(transparent) not allowed in combination with other args"

_Impl = Callable[[Any], Any]


def _nothing(obj: Any) -> None:
    return None


class Diagnostic:
    """Base for objects that describe a problem. Every part is optional.

    Each method looks up the implementation recorded for the instance's class
    by :func:`diagnostic`; a part with no implementation is ``None``.
    """

    _diagnostic_impls: Mapping[WhichFn, _Impl] = MappingProxyType({})

    def _dispatch(self, which: WhichFn) -> Any:
        impls: Mapping[WhichFn, _Impl] = getattr(type(self), _IMPLS, {})
        return impls.get(which, _nothing)(self)

    def code(self) -> Optional[str]:
        """A short identifier for the kind of problem."""
        return self._dispatch(WhichFn.CODE)

    def help(self) -> Optional[str]:
        """Advice on how to fix the problem."""
        return self._dispatch(WhichFn.HELP)

    def url(self) -> Optional[str]:
        """A link to more information."""
        return self._dispatch(WhichFn.URL)

    def severity(self) -> Optional[Severity]:
        """How serious the problem is."""
        return self._dispatch(WhichFn.SEVERITY)

    def labels(self) -> Optional[Iterator[LabeledSpan]]:
        """Labelled spans of the source code."""
        return self._dispatch(WhichFn.LABELS)

    def source_code(self) -> Any:
        """The source code the labels refer to."""
        return self._dispatch(WhichFn.SOURCE_CODE)

    def related(self) -> Optional[Iterator[Any]]:
        """Other diagnostics reported together with this one."""
        return self._dispatch(WhichFn.RELATED)

    def diagnostic_source(self) -> Any:
        """The diagnostic that caused this one."""
        return self._dispatch(WhichFn.DIAGNOSTIC_SOURCE)


@dataclass(frozen=True)
class _DocsContext:
    item_path: str
    crate_name: str
    crate_version: str


def _forwarding(forward: Forward, which: WhichFn) -> _Impl:
    return lambda obj: forward.call(obj, which)


_SINGLE_OPTIONS = {
    ArgKind.FORWARD: "forward",
    ArgKind.CODE: "code",
    ArgKind.SEVERITY: "severity",
    ArgKind.HELP: "help",
    ArgKind.URL: "url",
}


@dataclass
class ConcreteArgs:
    """The options and field markers of one diagnostic definition."""

    specs: FieldSpecs = field(default_factory=FieldSpecs)
    code: Optional[Code] = None
    severity: Optional[Severity] = None
    help: Optional[Display] = None
    url: Optional[Url] = None
    forward: Optional[Forward] = None

    @classmethod
    def for_fields(cls, fields: Any) -> ConcreteArgs:
        """Start from the field markers of a dataclass."""
        return cls(specs=FieldSpecs.from_fields(fields))

    def add_args(self, args: Iterable[DiagnosticArg], errors: list[DeriveError]) -> None:
        """Record ``args``, appending an error to ``errors`` for each repeated option."""
        for arg in args:
            if arg.kind is ArgKind.TRANSPARENT:
                errors.append(DeriveError("transparent not allowed"))
                continue
            name = _SINGLE_OPTIONS[arg.kind]
            taken = getattr(self, name) is not None
            if arg.kind is ArgKind.HELP:
                taken = taken or self.specs.help_member is not None
            if taken:
                errors.append(DeriveError(f"{name} has already been specified"))
            setattr(self, name, arg.value)

    def _own(self, which: WhichFn, context: _DocsContext) -> Optional[_Impl]:
        specs = self.specs
        if which is WhichFn.CODE and self.code is not None:
            code = str(self.code)
            return lambda obj: code
        if which is WhichFn.HELP:
            if self.help is not None:
                display = self.help
                return lambda obj: display.render(obj, specs.members)
            if specs.help_member is not None:
                return specs.help
        if which is WhichFn.SEVERITY and self.severity is not None:
            severity = self.severity
            return lambda obj: severity
        if which is WhichFn.URL and self.url is not None:
            url = self.url
            return lambda obj: url.render(
                obj,
                specs.members,
                item_path=context.item_path,
                crate_name=context.crate_name,
                crate_version=context.crate_version,
            )
        if which is WhichFn.LABELS and specs.label_fields:
            return specs.labels
        if which is WhichFn.RELATED and specs.related_member is not None:
            return specs.related
        if which is WhichFn.SOURCE_CODE and specs.source_code_member is not None:
            return specs.source_code
        if which is WhichFn.DIAGNOSTIC_SOURCE and specs.diagnostic_source_member is not None:
            return specs.diagnostic_source
        return None

    def implementation(self, which: WhichFn, context: _DocsContext) -> _Impl:
        """Return what the method ``which`` does: its own rule, a forward, or nothing."""
        own = self._own(which, context)
        if own is not None:
            return own
        if self.forward is not None:
            return _forwarding(self.forward, which)
        return _nothing


def _layout(cls: type) -> Optional[list[str]]:
    if dataclasses.is_dataclass(cls):
        return [fld.name for fld in dataclasses.fields(cls)]
    return None


def _parse_def_args(
    cls: type, layout: Optional[list[str]], attrs: tuple[Mapping[str, Any], ...]
) -> Union[Forward, ConcreteArgs]:
    if len(attrs) == 1:
        try:
            first = parse_diagnostic_args(attrs[0])
        except DeriveError:
            first = []
        if first and first[0].kind is ArgKind.TRANSPARENT:
            return Forward.for_transparent_field(layout)

    errors: list[DeriveError] = []
    concrete = ConcreteArgs.for_fields(cls)
    for attr in attrs:
        try:
            args = parse_diagnostic_args(attr)
        except DeriveError as error:
            errors.append(error)
            continue
        if any(arg.kind is ArgKind.TRANSPARENT for arg in args):
            errors.append(DeriveError(_TRANSPARENT_MIXED))
        concrete.add_args(
            (arg for arg in args if arg.kind is not ArgKind.TRANSPARENT), errors
        )

    if errors:
        raise reduce(lambda lhs, rhs: lhs.combine(rhs), errors)
    return concrete


def _decorated_base(cls: type) -> Optional[type]:
    return next((base for base in cls.__mro__[1:] if _ATTRS in vars(base)), None)


def _make_method(cls: type, which: WhichFn, impl: _Impl) -> Callable[[Any], Any]:
    def method(self: Any) -> Any:
        return impl(self)

    method.__name__ = which.method_name
    method.__qualname__ = f"{cls.__qualname__}.{which.method_name}"
    method.__doc__ = getattr(Diagnostic, which.method_name).__doc__
    return method


def _derive(cls: type, options: dict[str, Any]) -> type:
    if not isinstance(cls, type):
        raise DeriveError("diagnostic can only be applied to a class")
    crate_name = options.pop("crate_name", None) or cls.__module__.partition(".")[0]
    crate_version = options.pop("crate_version", None) or "latest"

    layout = _layout(cls)
    clashes = sorted(_METHOD_NAMES.intersection(layout or ()))
    if clashes:
        raise DeriveError(
            f"field `{clashes[0]}` clashes with the diagnostic method of the same name"
        )

    parent = _decorated_base(cls)
    inherited: tuple[Mapping[str, Any], ...] = vars(parent)[_ATTRS] if parent else ()
    attrs = (*inherited, options) if options else inherited

    def_args = _parse_def_args(cls, layout, attrs)
    if parent is not None:
        item_path = f"enum.{parent.__name__}.html#variant.{cls.__name__}"
    else:
        item_path = f"struct.{cls.__name__}.html"
    context = _DocsContext(item_path, crate_name, crate_version)

    impls: dict[WhichFn, _Impl] = {}
    for which in WhichFn:
        if isinstance(def_args, Forward):
            impl = _forwarding(def_args, which)
        else:
            impl = def_args.implementation(which, context)
        impls[which] = impl
        setattr(cls, which.method_name, _make_method(cls, which, impl))
    setattr(cls, _IMPLS, MappingProxyType(impls))
    setattr(cls, _ATTRS, attrs)
    return cls


def diagnostic(cls: Optional[type] = None, **kwargs: Any) -> Any:
    """Give ``cls`` the diagnostic methods described by ``kwargs``.

    Usable as ``@diagnostic`` or ``@diagnostic(code=..., ...)``. Besides the
    diagnostic options, ``crate_name`` and ``crate_version`` set the parts of
    a documentation url; they default to the top-level module name and
    ``"latest"``. Raises :class:`DeriveError` for invalid definitions.
    """
    if cls is None:
        return lambda target: _derive(target, dict(kwargs))
    return _derive(cls, dict(kwargs))