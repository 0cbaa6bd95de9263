# json_parser.py
# Hand-rolled JSON parser and renderer front end for jsontree
#
# =============================================================================
#  PARSER IMPLEMENTATION: RECURSIVE DESCENT OVER A SCALAR CURSOR
# =============================================================================
#
# One function per RFC 8259 grammar rule, driven directly by the Scanner in
# scanner.py. There is no separate token stream: each rule peeks or reads
# scalars and builds its element on the way back up.
#
# Strings and numbers are validated but never converted. A string keeps the
# raw bytes between its quotes, escapes included; a number keeps the exact
# text consumed.
#
# The first violation raises JSONSyntaxError with the cursor's line and
# column. Nothing is recovered and no partial tree is returned.
#
# Nesting is bounded by max_depth (DEPTH_LIMIT_DEFAULT unless overridden);
# going past it raises NestingDepthError.
#
# =============================================================================
#  REFERENCES
# =============================================================================
# [1] RFC 8259 - The JavaScript Object Notation (JSON) Data Interchange Format
# [2] json.org - JSON_checker test suite
# =============================================================================

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, Union

from elements import (
    ArrayElement,
    BooleanElement,
    Element,
    NullElement,
    NumberElement,
    ObjectElement,
    Pair,
    StringElement,
)
from renderers import AST_INDENT_DEFAULT, INDENT_DEFAULT, dump_tree, minify, pretty
from scanner import Scanner, scan

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
DEPTH_LIMIT_DEFAULT = 256    # Container nesting; 3 frames per level stays under the recursion limit

_WHITESPACE = " \t\n\r"
_DIGITS     = "0123456789"
_HEX_DIGITS = "0123456789abcdefABCDEF"
_ESCAPES    = '"\\/bfnrt'

# ---------------------------------------------------------------------------
# ERRORS
# ---------------------------------------------------------------------------
class JSONSyntaxError(SyntaxError):
    """
    Grammar violation at a known source position.

    Subclasses the builtin so callers catching plain SyntaxError still work.
    ``line`` is 1-based, ``column`` 0-based, as tracked by the Scanner.
    """

    def __init__(self, description: str, line: int, column: int):
        self.description = description
        self.line = line
        self.column = column
        super().__init__(
            f"syntax error in JSON at line {line}, column {column}: {description}"
        )


class NestingDepthError(JSONSyntaxError):
    """Input nests deeper than the configured maximum."""


class InvalidModeError(ValueError):
    """Unrecognized output mode selector."""


def _syntax_error(scanner: Scanner, description: str) -> JSONSyntaxError:
    return JSONSyntaxError(description, scanner.line, scanner.column)


def _expected_error(scanner: Scanner, expected: str, found: str) -> JSONSyntaxError:
    return _syntax_error(
        scanner, f'expected: "{expected}", but got: "{found or "eof"}"'
    )


def _skip_whitespace(scanner: Scanner) -> None:
    while not scanner.at_end():
        ch, _ = scanner.peek()
        if ch not in _WHITESPACE:
            break
        scanner.read()

# ---------------------------------------------------------------------------
# CORE VALUE PARSER
# ---------------------------------------------------------------------------
def _parse_value(scanner: Scanner, depth: int, max_depth: int) -> Element:
    """Dispatch on the first scalar of the value, which is consumed here."""
    ch = scanner.read()
    if ch == "{":
        return _parse_object(scanner, depth + 1, max_depth)
    if ch == "[":
        return _parse_array(scanner, depth + 1, max_depth)
    if ch == '"':
        return StringElement(_parse_raw_string(scanner))
    if ch == "-" or (ch and ch in _DIGITS):
        return _parse_number(scanner, ch)
    if ch in ("t", "f"):
        return _parse_bool(scanner, ch)
    if ch == "n":
        return _parse_null(scanner)
    raise _syntax_error(scanner, f"unexpected token: {ch or 'eof'!r}")


def _enter(scanner: Scanner, depth: int, max_depth: int) -> None:
    if depth > max_depth:
        raise NestingDepthError(
            f"nesting too deep: maximum depth is {max_depth}",
            scanner.line,
            scanner.column,
        )

# ---------------------------------------------------------------------------
# OBJECT PARSER
# ---------------------------------------------------------------------------
def _parse_object(scanner: Scanner, depth: int, max_depth: int) -> ObjectElement:
    """
    Parse the members of an object whose '{' was already consumed.

    Duplicate keys are kept in source order; a comma directly followed by
    '}' is rejected as a missing member.
    """
    _enter(scanner, depth, max_depth)
    _skip_whitespace(scanner)

    members: List[Pair] = []
    while not scanner.at_end():
        ch, _ = scanner.peek()
        if ch == "}":
            break

        if members:
            ch = scanner.read()
            if ch != ",":
                raise _expected_error(scanner, ",", ch)
            _skip_whitespace(scanner)

        member = _parse_member(scanner, depth, max_depth)
        if member is None:
            if members:
                raise _syntax_error(scanner, "expected object member")
            break
        members.append(member)

    ch = scanner.read()
    if ch != "}":
        raise _expected_error(scanner, "}", ch)
    return ObjectElement(tuple(members))


def _parse_member(scanner: Scanner, depth: int, max_depth: int) -> Optional[Pair]:
    """Parse ``"key" : value``; None when the next scalar cannot start a key."""
    ch, _ = scanner.peek()
    if ch != '"':
        return None
    scanner.read()

    key = _parse_raw_string(scanner)
    _skip_whitespace(scanner)

    ch = scanner.read()
    if ch != ":":
        raise _expected_error(scanner, ":", ch)
    _skip_whitespace(scanner)

    value = _parse_value(scanner, depth, max_depth)
    _skip_whitespace(scanner)
    return Pair(key, value)

# ---------------------------------------------------------------------------
# ARRAY PARSER
# ---------------------------------------------------------------------------
def _parse_array(scanner: Scanner, depth: int, max_depth: int) -> ArrayElement:
    """Parse the elements of an array whose '[' was already consumed."""
    _enter(scanner, depth, max_depth)
    _skip_whitespace(scanner)

    items: List[Element] = []
    while not scanner.at_end():
        ch, _ = scanner.peek()
        if ch == "]":
            break

        if items:
            ch = scanner.read()
            if ch != ",":
                raise _expected_error(scanner, ",", ch)
            _skip_whitespace(scanner)

        items.append(_parse_value(scanner, depth, max_depth))
        _skip_whitespace(scanner)

    _skip_whitespace(scanner)
    ch = scanner.read()
    if ch != "]":
        raise _expected_error(scanner, "]", ch)
    return ArrayElement(tuple(items))

# ---------------------------------------------------------------------------
# STRING VALIDATION
# ---------------------------------------------------------------------------
def _parse_raw_string(scanner: Scanner) -> bytes:
    """
    Consume a string body up to its closing quote; the opening quote is gone.

    Rejects unescaped control characters (U+0000..U+001F) and any escape
    other than \\" \\\\ \\/ \\b \\f \\n \\r \\t \\uXXXX. Returns the bytes
    between the quotes with escapes left undecoded.
    """
    start = scanner.offset
    escape = False
    while True:
        end = scanner.offset
        ch = scanner.read()
        if not ch:
            raise _expected_error(scanner, '"', ch)

        if escape:
            if ch == "u":
                for _ in range(4):
                    digit = scanner.read()
                    if not digit or digit not in _HEX_DIGITS:
                        raise _expected_error(scanner, "hexadecimal digit", digit)
            elif ch not in _ESCAPES:
                raise _syntax_error(scanner, f"invalid escape character {ch!r}")
            escape = False
            continue

        if ch == '"':
            return scanner.data[start:end]
        if ord(ch) <= 31:
            raise _syntax_error(scanner, f"unescaped special character {ch!r}")
        escape = ch == "\\"

# ---------------------------------------------------------------------------
# NUMBER PARSER
# ---------------------------------------------------------------------------
def _take_digits(scanner: Scanner, text: List[str]) -> bool:
    """Append consecutive digits to ``text``; True if there was at least one."""
    found = False
    while not scanner.at_end():
        ch, _ = scanner.peek()
        if ch not in _DIGITS:
            break
        text.append(scanner.read())
        found = True
    return found


def _parse_number(scanner: Scanner, first: str) -> NumberElement:
    """
    ``-? (0 | [1-9][0-9]*) (. [0-9]+)? ([eE] [+-]? [0-9]+)?``

    ``first`` is the already consumed '-' or digit. The element keeps the
    consumed text as-is.
    """
    text = [first]

    # integer part
    lead = first
    if first == "-":
        lead = scanner.read()
        if lead == "0":
            text.append(lead)
        elif lead and lead in "123456789":
            text.append(lead)
        else:
            raise _expected_error(scanner, "digit '1-9'", lead)
    if lead != "0":
        _take_digits(scanner, text)

    # fraction
    ch, _ = scanner.peek()
    if ch == ".":
        text.append(scanner.read())
        if not _take_digits(scanner, text):
            raise _syntax_error(scanner, "expected: digit after fraction '.'")

    # exponent
    ch, _ = scanner.peek()
    if ch in ("e", "E"):
        text.append(scanner.read())
        ch, _ = scanner.peek()
        if ch in ("+", "-"):
            text.append(scanner.read())
        if not _take_digits(scanner, text):
            raise _syntax_error(scanner, "expected: digit after exponent")

    return NumberElement("".join(text))

# ---------------------------------------------------------------------------
# LITERALS
# ---------------------------------------------------------------------------
def _match(scanner: Scanner, rest: str) -> None:
    """Read ``rest`` one scalar at a time, failing on the first mismatch."""
    for expected in rest:
        ch = scanner.read()
        if ch != expected:
            raise _expected_error(scanner, expected, ch)


def _parse_bool(scanner: Scanner, first: str) -> BooleanElement:
    if first == "t":
        _match(scanner, "rue")
        return BooleanElement(True)
    _match(scanner, "alse")
    return BooleanElement(False)


def _parse_null(scanner: Scanner) -> NullElement:
    _match(scanner, "ull")
    return NullElement()

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
# Every renderer is called as renderer(root, indent); None means its own default.
MODES: Dict[str, Callable[[Element, Optional[int]], str]] = {
    "ast": lambda root, indent: dump_tree(root, AST_INDENT_DEFAULT if indent is None else indent),
    "pretty": lambda root, indent: pretty(root, INDENT_DEFAULT if indent is None else indent),
    "minify": lambda root, indent: minify(root),
}


def parse_root(scanner: Scanner, max_depth: int = DEPTH_LIMIT_DEFAULT) -> Element:
    """
    Parse exactly one JSON text from ``scanner``.

    Leading and trailing whitespace is allowed; anything else after the value
    is an error, so on success the scanner is at end of input.
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be >= 1, got {max_depth}")
    _skip_whitespace(scanner)
    try:
        root = _parse_value(scanner, 0, max_depth)
    except RecursionError:
        raise NestingDepthError(
            f"nesting too deep: interpreter stack exhausted below max_depth {max_depth}",
            scanner.line,
            scanner.column,
        ) from None
    _skip_whitespace(scanner)
    if not scanner.at_end():
        raise _expected_error(scanner, "eof", scanner.read())
    return root


def parse(data: Union[bytes, str], *, max_depth: int = DEPTH_LIMIT_DEFAULT) -> Element:
    """Parse JSON text (bytes, or str encoded as UTF-8) into an element tree."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        return parse_root(Scanner(data), max_depth)
    except JSONSyntaxError as exc:
        logger.debug("parse failed after %d bytes: %s", len(data), exc.description)
        raise


def render(
    data: Union[bytes, str],
    mode: str,
    *,
    indent: Optional[int] = None,
    max_depth: int = DEPTH_LIMIT_DEFAULT,
) -> str:
    """
    Parse ``data`` and render it in ``mode`` ("ast", "pretty" or "minify").

    The mode is checked before parsing. ``indent`` applies to "ast" and
    "pretty"; None keeps each renderer's default (1 and 2 spaces).
    """
    try:
        renderer = MODES[mode]
    except KeyError:
        valid = ", ".join(sorted(MODES))
        raise InvalidModeError(f"unsupported mode: {mode!r} (expected one of: {valid})") from None

    root = parse(data, max_depth=max_depth)
    logger.debug("rendering %s element as %s", root.kind, mode)
    return renderer(root, indent)

# ---------------------------------------------------------------------------
# CLI ENTRYPOINT
# ---------------------------------------------------------------------------
def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as fh:
        return fh.read()


def _emit(text: str, stream) -> None:
    """Write ``text`` newline-terminated, restoring raw bytes kept as surrogates."""
    if not text.endswith("\n"):
        text += "\n"
    data = text.encode("utf-8", "surrogateescape")
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        stream.write(data.decode("utf-8", "replace"))
        return
    stream.flush()
    buffer.write(data)
    buffer.flush()


def _cli(argv: List[str]) -> int:
    """
    Command-line interface: render a JSON file in one of the output modes.

    Exit codes: 0 on success, 1 on a syntax or read error, 2 on an unknown
    mode (argparse uses 2 for its own usage errors too).
    """
    ap = argparse.ArgumentParser(description="Parse a JSON file and render it")
    ap.add_argument("file", help="JSON file to render ('-' reads stdin)")
    ap.add_argument("--mode", default="ast", help="one of ast|pretty|minify (default: ast)")
    ap.add_argument("--indent", type=int, default=None, help="spaces per level (default: 1 for ast, 2 for pretty)")
    ap.add_argument("--max-depth", type=int, default=DEPTH_LIMIT_DEFAULT)
    ap.add_argument("--debug", action="store_true", help="dump the scanner's scalar stream and exit")
    ap.add_argument("--verbose", action="store_true", help="log debug details to stderr")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    try:
        data = _read_input(args.file)
    except OSError as exc:
        print(f"OSError: {exc}", file=sys.stderr)
        return 1
    logger.debug("read %d bytes from %s", len(data), args.file)

    if args.debug:
        for scalar, pos in scan(data):
            print((scalar, pos))
        return 0

    try:
        text = render(data, args.mode, indent=args.indent, max_depth=args.max_depth)
    except InvalidModeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except SyntaxError as exc:
        print(f"SyntaxError: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    _emit(text, sys.stdout)
    return 0


def main() -> int:
    return _cli(sys.argv[1:])

# ---------------------------------------------------------------------------
# MAIN GUARD
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    sys.exit(main())
