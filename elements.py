"""
elements.py - Immutable element tree produced by the parser.

String payloads and object keys are the raw bytes found between the quotes,
escapes left as written. Numbers keep the exact text the number grammar
consumed. Object members stay in source order and duplicate keys are kept.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import ClassVar, Tuple, Union


class ElementKind(StrEnum):
    """The six JSON value kinds; values are the lowercase kind names."""

    OBJECT = auto()
    ARRAY = auto()
    STRING = auto()
    NUMBER = auto()
    BOOLEAN = auto()
    NULL = auto()


@dataclass(frozen=True, slots=True)
class Pair:
    """One object member."""

    key: bytes
    value: Element


@dataclass(frozen=True, slots=True)
class ObjectElement:
    members: Tuple[Pair, ...] = ()
    kind: ClassVar[ElementKind] = ElementKind.OBJECT


@dataclass(frozen=True, slots=True)
class ArrayElement:
    items: Tuple[Element, ...] = ()
    kind: ClassVar[ElementKind] = ElementKind.ARRAY


@dataclass(frozen=True, slots=True)
class StringElement:
    raw: bytes
    kind: ClassVar[ElementKind] = ElementKind.STRING


@dataclass(frozen=True, slots=True)
class NumberElement:
    text: str
    kind: ClassVar[ElementKind] = ElementKind.NUMBER


@dataclass(frozen=True, slots=True)
class BooleanElement:
    value: bool
    kind: ClassVar[ElementKind] = ElementKind.BOOLEAN


@dataclass(frozen=True, slots=True)
class NullElement:
    kind: ClassVar[ElementKind] = ElementKind.NULL


Element = Union[
    ObjectElement,
    ArrayElement,
    StringElement,
    NumberElement,
    BooleanElement,
    NullElement,
]

ELEMENT_TYPES = (
    ObjectElement,
    ArrayElement,
    StringElement,
    NumberElement,
    BooleanElement,
    NullElement,
)


def kind_of(element: Element) -> ElementKind:
    """
    Return the kind of ``element``.

    Raises TypeError for anything outside the six variants; that only
    happens when a tree was built by something other than the parser.
    """
    if not isinstance(element, ELEMENT_TYPES):
        raise TypeError(f"unknown element kind: {type(element).__name__}")
    return element.kind


def raw_text(raw: bytes) -> str:
    """Text form of raw string bytes; encoding back with surrogateescape restores them."""
    return raw.decode("utf-8", "surrogateescape")
