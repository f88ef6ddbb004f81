from dataclasses import dataclass

from diagkit.derive import Diagnostic, diagnostic
from diagkit.diagnostic_chain import DiagnosticChain
from diagkit.fields import diagnostic_source


@diagnostic(code="t::inner")
@dataclass(eq=False)
class InnerDiag(Diagnostic, Exception):
    message: str = "inner"


@diagnostic(code="t::outer")
@dataclass(eq=False)
class OuterDiag(Diagnostic, Exception):
    inner: InnerDiag = diagnostic_source()


def _caused_chain():
    root = ValueError("root")
    middle = KeyError("middle")
    top = RuntimeError("top")
    middle.__cause__ = root
    top.__cause__ = middle
    return top, middle, root


def test_empty_chain():
    chain = DiagnosticChain()
    assert len(chain) == 0
    assert list(chain) == []


def test_exception_chain_follows_causes():
    top, middle, root = _caused_chain()
    assert list(DiagnosticChain.from_exception(top)) == [top, middle, root]


def test_len_does_not_consume():
    top, middle, root = _caused_chain()
    chain = DiagnosticChain.from_exception(top)
    assert len(chain) == 3
    assert len(chain) == 3
    assert next(chain) is top
    assert len(chain) == 2


def test_diagnostic_chain_follows_diagnostic_source_then_cause():
    root = ValueError("root")
    inner = InnerDiag()
    inner.__cause__ = root
    outer = OuterDiag(inner)
    chain = DiagnosticChain.from_diagnostic(outer)
    assert len(chain) == 3
    assert list(chain) == [outer, inner, root]


def test_exception_head_ignores_diagnostic_source():
    outer = OuterDiag(InnerDiag())
    assert list(DiagnosticChain.from_exception(outer)) == [outer]


def test_suppressed_context_ends_chain():
    try:
        try:
            raise ValueError("first")
        except ValueError:
            raise KeyError("second") from None
    except KeyError as error:
        caught = error
    assert list(DiagnosticChain.from_exception(caught)) == [caught]


def test_implicit_context_is_followed():
    try:
        try:
            raise ValueError("first")
        except ValueError:
            raise KeyError("second")
    except KeyError as error:
        caught = error
    items = list(DiagnosticChain.from_exception(caught))
    assert items[0] is caught
    assert items[1] is caught.__context__
    assert len(items) == 2