# diagkit

diagkit attaches structured diagnostic information to Python error
types. You describe an error type once, using a class decorator and
some field markers. After that, every instance can report the
following:

- a **code**, such as `calc::bad_token`;
- a **severity**: error, warning or advice;
- **help** text and a **url**, both of which can refer to the instance's fields;
- **labels**: spans of source text, each with an optional message;
- the **source code** that the labels point into;
- **related** diagnostics and a nested **diagnostic source**.

diagkit has no runtime dependencies.

## Installation

```
pip install diagkit
```

To install the test requirements too:

```
pip install "diagkit[test]"
```

## Describing an error

```python
from dataclasses import dataclass

from diagkit.derive import Diagnostic, diagnostic
from diagkit.fields import label, source_code


@diagnostic(code="calc::bad_token", severity="warn", help="expected {expected}")
@dataclass
class BadToken(Diagnostic, Exception):
    src: str = source_code()
    span: tuple = label("unexpected {found}")
    found: str = ""
    expected: str = ""


err = BadToken("1 + x", (4, 1), "x", "a number")
err.code()              # 'calc::bad_token'
err.severity()          # Severity.WARNING
err.help()              # 'expected a number'
list(err.labels())      # [LabeledSpan(label='unexpected x', offset=4, length=1)]
err.source_code()       # '1 + x'
err.url()               # None
```

`diagnostic` (in `diagkit.derive`) can be used bare, as `@diagnostic`,
or with keyword options:

- `code`: a string, or a sequence of path segments that are joined with `::`.
- `severity`: a `Severity` or one of the severity names in the table below.
- `help`: a format string, or a `(fmt, *args)` tuple.
- `url`: a format string, a `(fmt, *args)` tuple, or `diagkit.args.DOCS_RS`.
  `DOCS_RS` asks for a documentation link built from the crate name, the
  crate version and the item path. Set the first two with `crate_name` and
  `crate_version`. They default to the top-level module name and `"latest"`.
- `forward`: a field name or index. Each method the type does not define
  itself is delegated to that field.
- `transparent=True`: forwards everything to the single field of a
  one-field dataclass, and allows no other options.

Markers for individual fields are in `diagkit.fields`. Each one passes
extra keyword arguments on to `dataclasses.field`.

- `label(text=None, *args)`: the field holds a span. A span can be:
  - an `int` offset;
  - an `(offset, length)` pair;
  - a `range` with step 1;
  - an object with `offset` and `length` attributes.

  A value of `None` gives no label.
- `help_field()`: the field holds the help text.
- `related()`: the field holds an iterable of related diagnostics.
- `source_code()`: the field holds the source code.
- `diagnostic_source()`: the field holds the diagnostic that caused this one.

A field may not share its name with a diagnostic method, such as
`help` or `source_code`.

Format strings can name fields directly, as in `"expected {expected}"`.
Positional arguments that are callables are called with the instance.

If a subclass of a decorated class is also decorated, it is treated as a
variant of its parent. It receives the parent's options followed by its
own, and its documentation link points at the variant.

## Severities

| Accepted names          | Severity           |
|-------------------------|--------------------|
| `error`, `err`          | `Severity.ERROR`   |
| `warning`, `warn`       | `Severity.WARNING` |
| `advice`, `adv`, `info` | `Severity.ADVICE`  |

Case does not matter. `diagkit.severity.parse_severity` converts a name
to a `Severity`. Any other name raises `DeriveError`.

## Errors in definitions

`diagkit.errors.DeriveError` reports mistakes in a declaration. For example:

- an option is given twice;
- an option is unknown;
- `transparent` is mixed with other options;
- `transparent` is used on a type that does not have exactly one field.

When several mistakes are found, they are combined into a single error,
with one message per line.

## Forwarding

`diagkit.forward` makes the forwarding mechanism explicit:

- `WhichFn` enumerates the diagnostic methods.
- `Forward(field)` delegates a method to a named or indexed field, through
  `Forward.call(obj, which_fn)`.
- `Forward.for_transparent_field` checks a field layout for a transparent
  type. The layout is `None`, a count, or a list of names.

## Walking cause chains

`diagkit.chain.Chain(exc)` walks an exception and then its causes:

- It follows `__cause__`, or otherwise `__context__` unless that is suppressed.
- It supports `len()`.
- `next_back()` and `reversed()` take items from the innermost cause outward.

```python
from diagkit.chain import Chain

try:
    try:
        raise KeyError("inner")
    except KeyError as exc:
        raise ValueError("outer") from exc
except ValueError as exc:
    [type(e).__name__ for e in Chain(exc)]   # ['ValueError', 'KeyError']
```

`diagkit.diagnostic_chain.DiagnosticChain` walks a chain in a similar way.
From a diagnostic, it follows `diagnostic_source()` first and falls back
to the exception cause. Once it reaches a plain exception, it follows
only exception causes. Create one with
`DiagnosticChain.from_diagnostic(head)` or
`DiagnosticChain.from_exception(head)`.

## Built-in errors

`diagkit.error` defines the package's own error types. `MietteError` is
their base. It is both a `Diagnostic` and an `Exception`.

- `IoError(error)` wraps an `OSError` from reading source code. Its code
  is `diagkit::io_error`.
- `OutOfBounds()` stands for a span that reaches past the end of its
  source. Its code is `diagkit::span_out_of_bounds`, and its help text
  asks you to check for an off-by-one error.

## Formatting helpers

`diagkit.fmt` has two helpers:

- `expand_shorthand(fmt, members)` rewrites field references in a format
  string into named placeholders.
- `Display` holds a format string with its arguments and renders it
  against an object's fields.

## What diagkit does not do

diagkit only collects diagnostic information. It does not print or render
diagnostics, and it has no report handler or terminal output. It does not
read source files or map spans to lines and columns. Nothing in the
package raises `OutOfBounds` or `IoError` by itself.