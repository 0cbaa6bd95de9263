# renderers.py
# Tree-walkers that turn an element tree back into text.
#
# Each renderer is a pure function of the tree: output goes into an explicit
# io.StringIO handed down the recursion and the caller gets its contents.
# Raw string bytes are emitted unchanged (see elements.raw_text).

import io

from elements import (
    ArrayElement,
    BooleanElement,
    Element,
    NullElement,
    NumberElement,
    ObjectElement,
    StringElement,
    kind_of,
    raw_text,
)

INDENT_DEFAULT = 2
AST_INDENT_DEFAULT = 1


def _literal(element: Element) -> str:
    """Text of a scalar exactly as it appears in JSON."""
    if isinstance(element, StringElement):
        return '"' + raw_text(element.raw) + '"'
    if isinstance(element, NumberElement):
        return element.text
    if isinstance(element, BooleanElement):
        return "true" if element.value else "false"
    if isinstance(element, NullElement):
        return "null"
    raise TypeError(f"unknown element kind: {type(element).__name__}")


def _check_indent(indent: int) -> None:
    if indent < 0:
        raise ValueError(f"indent must be >= 0, got {indent}")


# ---------------------------------------------------------------------------
# STRUCTURAL DUMP
# ---------------------------------------------------------------------------
def _dump(element: Element, out: io.StringIO, pad: str, level: int) -> None:
    prefix = pad * level
    kind = kind_of(element)

    if isinstance(element, ObjectElement):
        out.write(f"{prefix}{kind}:\n")
        for pair in element.members:
            out.write(f"{prefix}{pad}key:{raw_text(pair.key)}\n")
            out.write(f"{prefix}{pad}value:\n")
            _dump(pair.value, out, pad, level + 2)
    elif isinstance(element, ArrayElement):
        out.write(f"{prefix}{kind}:\n")
        for item in element.items:
            _dump(item, out, pad, level + 1)
    elif isinstance(element, StringElement):
        out.write(f"{prefix}{kind}:{raw_text(element.raw)}\n")
    else:
        out.write(f"{prefix}{kind}:{_literal(element)}\n")


def dump_tree(element: Element, indent: int = AST_INDENT_DEFAULT) -> str:
    """
    Render the tree one node per line, ``indent`` spaces per nesting level.

    Containers print their kind and then their children one level deeper.
    Object members print ``key:`` and ``value:`` lines, with the value
    itself one level below them. Scalars print ``kind:payload``.
    """
    _check_indent(indent)
    out = io.StringIO()
    _dump(element, out, " " * indent, 0)
    return out.getvalue()


# ---------------------------------------------------------------------------
# MINIFIER
# ---------------------------------------------------------------------------
def _minify(element: Element, out: io.StringIO) -> None:
    if isinstance(element, ObjectElement):
        out.write("{")
        for i, pair in enumerate(element.members):
            if i:
                out.write(",")
            out.write('"' + raw_text(pair.key) + '":')
            _minify(pair.value, out)
        out.write("}")
    elif isinstance(element, ArrayElement):
        out.write("[")
        for i, item in enumerate(element.items):
            if i:
                out.write(",")
            _minify(item, out)
        out.write("]")
    else:
        out.write(_literal(element))


def minify(element: Element) -> str:
    """Canonical compact form: no whitespace, stored payloads emitted verbatim."""
    out = io.StringIO()
    _minify(element, out)
    return out.getvalue()


# ---------------------------------------------------------------------------
# PRETTY PRINTER
# ---------------------------------------------------------------------------
def _pretty(element: Element, out: io.StringIO, pad: str, level: int) -> None:
    # The caller has already placed the cursor: either at the start of an
    # indented line or right after a member's "key": prefix.
    if isinstance(element, ObjectElement):
        if not element.members:
            out.write("{}")
            return
        out.write("{\n")
        last = len(element.members) - 1
        for i, pair in enumerate(element.members):
            out.write(pad * (level + 1) + '"' + raw_text(pair.key) + '": ')
            _pretty(pair.value, out, pad, level + 1)
            out.write(",\n" if i != last else "\n")
        out.write(pad * level + "}")
    elif isinstance(element, ArrayElement):
        if not element.items:
            out.write("[]")
            return
        out.write("[\n")
        last = len(element.items) - 1
        for i, item in enumerate(element.items):
            out.write(pad * (level + 1))
            _pretty(item, out, pad, level + 1)
            out.write(",\n" if i != last else "\n")
        out.write(pad * level + "]")
    else:
        out.write(_literal(element))


def pretty(element: Element, indent: int = INDENT_DEFAULT) -> str:
    """
    Indented form with one child per line and ``indent`` spaces per level.

    Empty containers stay on one line as ``{}`` / ``[]``. A member value
    starts on the key's line; a composite value opens its bracket there and
    continues on the following lines. No trailing newline.
    """
    _check_indent(indent)
    out = io.StringIO()
    _pretty(element, out, " " * indent, 0)
    return out.getvalue()
