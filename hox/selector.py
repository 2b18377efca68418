"""Parser for the compact ``tag#id.class[attr=value]`` element syntax."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Tuple

from .nodes import Attribute, Element

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when a selector string does not match the grammar."""

    def __init__(self, selector: str, position: int, message: str) -> None:
        self.selector = selector
        self.position = position
        self.message = message
        super().__init__(f"Failed to parse {selector!r}: {message} at position {position}")


def _is_ascii_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_tag_char(ch: str) -> bool:
    return _is_ascii_letter(ch) or _is_digit(ch) or ch == "-"


def _is_name_char(ch: str) -> bool:
    return ch.isalpha() or _is_digit(ch) or ch == "-"


def _is_class_char(ch: str) -> bool:
    return not ch.isspace() and ch not in "[.#"


def _is_id_char(ch: str) -> bool:
    return ch not in "#.["


class _SelectorReader:
    """Single pass reader producing the tag name and ordered (name, value) pairs."""

    __slots__ = ("length", "pos", "selector")

    def __init__(self, selector: str) -> None:
        self.selector = selector
        self.pos = 0
        self.length = len(selector)

    def _peek(self) -> str:
        if self.pos < self.length:
            return self.selector[self.pos]
        return ""

    def _fail(self, message: str) -> ParseError:
        return ParseError(self.selector, self.pos, message)

    def _skip_whitespace(self) -> None:
        while self.pos < self.length and self.selector[self.pos].isspace():
            self.pos += 1

    def _read_while(self, predicate: Callable[[str], bool]) -> str:
        start = self.pos
        while self.pos < self.length and predicate(self.selector[self.pos]):
            self.pos += 1
        return self.selector[start : self.pos]

    def _expect(self, ch: str) -> None:
        found = self._peek()
        if found != ch:
            described = repr(found) if found else "end of input"
            raise self._fail(f"expected {ch!r} but found {described}")
        self.pos += 1

    def read_tag(self) -> str:
        self._skip_whitespace()
        first = self._peek()
        if not first or not _is_ascii_letter(first):
            raise self._fail("expected a tag name starting with an ASCII letter")
        tag = self._read_while(_is_tag_char)
        self._skip_whitespace()
        return tag

    def read_parts(self) -> List[Tuple[str, str]]:
        parts: List[Tuple[str, str]] = []
        while self.pos < self.length:
            ch = self._peek()
            if ch == "#":
                self.pos += 1
                parts.append(("id", self._read_while(_is_id_char).strip()))
            elif ch == ".":
                self.pos += 1
                parts.append(("class", self._read_while(_is_class_char)))
            elif ch == "[":
                parts.append(self._read_attribute())
            else:
                raise self._fail(f"unexpected character {ch!r}")
            self._skip_whitespace()
        return parts

    def _read_attribute(self) -> Tuple[str, str]:
        self._expect("[")
        name = self._read_while(_is_name_char)
        if not name:
            raise self._fail("expected an attribute name")
        self._expect("=")
        value = self._read_while(lambda c: c != "]")
        self._expect("]")
        if name == "id":
            value = value.strip()
        return name, value


def _merge_attributes(parts: List[Tuple[str, str]]) -> List[Attribute]:
    # dict keeps first-insertion order while values are replaced in place
    values: Dict[str, str] = {}
    for name, value in parts:
        if name == "id" or name not in values:
            values[name] = value
        else:
            values[name] = f"{values[name]} {value}"
    return [Attribute(name=name, value=value) for name, value in values.items()]


def parse_selector(selector: str) -> Element:
    """Parse ``selector`` into an element without children.

    Repeated ``id`` entries keep the last value. Repeated ``class`` or other
    attribute entries are joined with a single space, keeping the position of
    the first occurrence.
    """

    reader = _SelectorReader(selector)
    try:
        tag = reader.read_tag()
        parts = reader.read_parts()
    except ParseError as exc:
        logger.debug("Selector rejected: %s", exc)
        raise
    return Element(tag=tag, attributes=_merge_attributes(parts))


__all__ = ["ParseError", "parse_selector"]
