from dataclasses import dataclass

import pytest

from diagkit.args import DOCS_RS, parse_diagnostic_args
from diagkit.derive import ConcreteArgs, Diagnostic, diagnostic
from diagkit.errors import DeriveError
from diagkit.fields import (
    LabeledSpan,
    diagnostic_source,
    help_field,
    label,
    related,
    source_code,
)
from diagkit.severity import Severity, parse_severity


@diagnostic(code="demo::inner", help="inner help", severity="warn", url="https://example.com/inner")
@dataclass
class Inner(Diagnostic):
    pass


@diagnostic(code=("demo", "named"), help="try {name} instead")
@dataclass
class Named(Diagnostic):
    name: str


@diagnostic(code="demo::parse")
@dataclass
class ParseProblem(Diagnostic):
    src: str = source_code()
    span: object = label("expected {expected}")
    other: object = label()
    expected: str = "digit"


@diagnostic(code="demo::hinted")
@dataclass
class Hinted(Diagnostic):
    hint: object = help_field(default=None)


@diagnostic(code="demo::grouped")
@dataclass
class Grouped(Diagnostic):
    others: list = related()
    cause: object = diagnostic_source(default=None)


@diagnostic(transparent=True)
@dataclass
class Wrapper(Diagnostic):
    inner: Inner


@diagnostic(forward="inner", code="demo::outer")
@dataclass
class Partial(Diagnostic):
    inner: Inner


@diagnostic(forward=0)
@dataclass
class ByIndex(Diagnostic):
    inner: Inner


@diagnostic(severity="advice")
class Family(Diagnostic):
    pass


@diagnostic(code="demo::first", url=DOCS_RS, crate_name="my-crate", crate_version="1.2.3")
class First(Family):
    pass


@diagnostic(code="demo::second")
class Second(Family):
    pass


def _all_parts(diag):
    return [
        diag.code(),
        diag.help(),
        diag.url(),
        diag.severity(),
        diag.labels(),
        diag.source_code(),
        diag.related(),
        diag.diagnostic_source(),
    ]


def test_base_diagnostic_has_no_parts():
    assert _all_parts(Diagnostic()) == [None] * 8


def test_options_become_methods():
    inner = Inner()
    assert inner.code() == "demo::inner"
    assert inner.help() == "inner help"
    assert inner.severity() is parse_severity("warn")
    assert inner.url() == "https://example.com/inner"
    assert inner.labels() is None
    assert inner.related() is None


def test_help_refers_to_fields_and_code_joins_path():
    @dataclass
    class Local(Diagnostic):
        name: str

    diagnostic(Local, code=("demo", "local"), help="try {name} instead")
    local = Local("x")
    assert local.help() == "try x instead"
    assert local.code() == "demo::local"


def test_labels_and_source_code_from_fields():
    problem = ParseProblem("abc", (1, 1), None)
    assert list(problem.labels()) == [LabeledSpan("expected digit", 1, 1)]
    assert problem.source_code() == "abc"


def test_unlabelled_span_field():
    problem = ParseProblem("abc", (0, 1), 2)
    spans = list(problem.labels())
    assert spans[1] == LabeledSpan(None, 2, 0)


def test_help_from_field():
    @dataclass
    class LocalHint(Diagnostic):
        hint: object = help_field(default=None)

    diagnostic(LocalHint, code="demo::local_hint")
    assert LocalHint().help() is None
    assert LocalHint("use x").help() == "use x"


def test_related_and_diagnostic_source():
    first, second = Diagnostic(), Diagnostic()
    cause = Diagnostic()
    grouped = Grouped([first, second], cause)
    assert list(grouped.related()) == [first, second]
    assert grouped.diagnostic_source() is cause


def test_transparent_forwards_everything():
    wrapper = Wrapper(Inner())
    assert _all_parts(wrapper) == [
        "demo::inner",
        "inner help",
        "https://example.com/inner",
        parse_severity("warn"),
        None,
        None,
        None,
        None,
    ]


def test_forward_fills_missing_parts_only():
    partial = Partial(Inner())
    assert partial.code() == "demo::outer"
    assert partial.help() == "inner help"
    assert partial.severity() is parse_severity("warning")


def test_forward_by_index():
    by_index = ByIndex(Inner())
    assert by_index.code() == "demo::inner"
    assert by_index.severity() is parse_severity("warn")


def test_variant_inherits_family_options():
    assert First().severity() is parse_severity("advice")
    assert Second().severity() is parse_severity("advice")
    assert First().code() == "demo::first"
    assert Second().url() is None


def test_docs_url_for_variant():
    class Kind(Diagnostic):
        pass

    diagnostic(Kind, severity="advice")

    class Member(Kind):
        pass

    diagnostic(Member, code="demo::member", url=DOCS_RS, crate_name="my-crate", crate_version="1.2.3")
    assert Member().url() == "https://docs.rs/my-crate/1.2.3/my_crate/enum.Kind.html#variant.Member"


def test_docs_url_for_struct():
    class Thing(Diagnostic):
        pass

    diagnostic(Thing, url=DOCS_RS, crate_name="my-crate", crate_version="1.2.3")
    assert Thing().url() == "https://docs.rs/my-crate/1.2.3/my_crate/struct.Thing.html"


def test_docs_url_version_defaults_to_latest():
    class Thing(Diagnostic):
        pass

    diagnostic(Thing, url=DOCS_RS, crate_name="pkg")
    assert "/pkg/latest/pkg/struct.Thing.html" in Thing().url()


def test_transparent_on_unit_type_fails():
    class Unit(Diagnostic):
        pass

    with pytest.raises(DeriveError, match="unit struct"):
        diagnostic(Unit, transparent=True)


def test_transparent_needs_exactly_one_field():
    @dataclass
    class Two(Diagnostic):
        a: int
        b: int

    with pytest.raises(DeriveError, match="exactly one field"):
        diagnostic(Two, transparent=True)


def test_transparent_mixed_with_inherited_options_fails():
    @diagnostic(code="demo::base")
    class Base(Diagnostic):
        pass

    @dataclass
    class Variant(Base):
        inner: Inner

    with pytest.raises(DeriveError, match="not allowed in combination"):
        diagnostic(Variant, transparent=True)


def test_unrecognized_option_fails():
    class Thing(Diagnostic):
        pass

    with pytest.raises(DeriveError, match="Unrecognized diagnostic option"):
        diagnostic(Thing, bogus=1)


def test_help_option_and_help_field_conflict():
    @dataclass
    class Thing(Diagnostic):
        hint: str = help_field(default="x")

    with pytest.raises(DeriveError, match="help has already been specified"):
        diagnostic(Thing, help="other")


def test_repeated_options_are_combined_into_one_error():
    @diagnostic(code="demo::a", severity="error")
    class Base(Diagnostic):
        pass

    class Variant(Base):
        pass

    with pytest.raises(DeriveError) as excinfo:
        diagnostic(Variant, code="demo::b", severity="warning")
    assert excinfo.value.messages == [
        "code has already been specified",
        "severity has already been specified",
    ]


def test_field_named_like_a_method_fails():
    @dataclass
    class Thing(Diagnostic):
        code: str

    with pytest.raises(DeriveError, match="clashes"):
        diagnostic(Thing)


def test_only_classes_can_be_decorated():
    with pytest.raises(DeriveError):
        diagnostic(42)


def test_concrete_args_collect_field_markers():
    concrete = ConcreteArgs.for_fields(ParseProblem)
    assert concrete.specs.source_code_member == "src"
    assert [lf.name for lf in concrete.specs.label_fields] == ["span", "other"]


def test_concrete_args_report_repeats_and_keep_last():
    concrete = ConcreteArgs()
    errors = []
    concrete.add_args(parse_diagnostic_args({"code": "a"}), errors)
    concrete.add_args(parse_diagnostic_args({"code": "b"}), errors)
    assert [str(error) for error in errors] == ["code has already been specified"]
    assert concrete.code.value == "b"


def test_severity_enum_matches_parsed_values():
    class Warned(Diagnostic):
        pass

    diagnostic(Warned, severity="warn")
    assert Warned().severity() is Severity.WARNING
    assert parse_severity("warning") is Severity.WARNING