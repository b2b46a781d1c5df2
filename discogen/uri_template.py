"""Parser for the URI template syntax of RFC 6570.

Every ``parse_*`` function takes the input text and returns a pair of
``(remaining_text, value)``. It raises :class:`ParseError` when the input
does not start with what it parses. :func:`ast_nodes` parses a whole
template. It returns ``None`` when the template is not valid.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple, Union

_MAX_PREFIX = 0xFFFF
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DEC_DIGITS = frozenset("0123456789")


class ParseError(ValueError):
    """Raised when the input does not match the expected grammar rule."""

    def __init__(self, message: str, remaining: str) -> None:
        super().__init__(f"{message} at {remaining!r}")
        self.remaining = remaining


class Operator(enum.Enum):
    """Expression operator, valued by its prefix character."""

    SIMPLE = ""
    RESERVED = "+"
    FRAGMENT = "#"
    LABEL = "."
    PATH_SEGMENT = "/"
    PATH_PARAMETER = ";"
    QUERY_EXPANSION = "?"
    QUERY_CONTINUATION = "&"


class ModifierKind(enum.Enum):
    NONE = "none"
    PREFIX = "prefix"
    EXPLODE = "explode"


@dataclass(frozen=True)
class Modifier:
    """A value modifier; ``length`` is set only for prefix modifiers."""

    kind: ModifierKind = ModifierKind.NONE
    length: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is ModifierKind.PREFIX:
            if self.length is None or not 0 <= self.length <= _MAX_PREFIX:
                raise ValueError(
                    f"prefix length must be between 0 and {_MAX_PREFIX}"
                )
        elif self.length is not None:
            raise ValueError("only prefix modifiers carry a length")


@dataclass(frozen=True)
class VarSpec:
    var_name: str
    modifier: Modifier = field(default_factory=Modifier)


@dataclass(frozen=True)
class Expression:
    operator: Operator
    var_spec_list: Tuple[VarSpec, ...]


@dataclass(frozen=True)
class Literal:
    text: str


AstNode = Union[Literal, Expression]


def _take_while(text: str, predicate: Callable[[str], bool]) -> str:
    end = 0
    for char in text:
        if not predicate(char):
            break
        end += 1
    return text[:end]


def _is_valid_varchar(char: str) -> bool:
    return char.isascii() and (char.isalnum() or char in "_.")


def _expect_char(text: str, char: str) -> str:
    if not text.startswith(char):
        raise ParseError(f"expected {char!r}", text)
    return text[1:]


def parse_operator(text: str) -> Tuple[str, Operator]:
    """Parse an optional operator prefix; defaults to ``Operator.SIMPLE``."""
    if text and text[0] != "":
        try:
            operator = Operator(text[0])
        except ValueError:
            return text, Operator.SIMPLE
        if operator is not Operator.SIMPLE:
            return text[1:], operator
    return text, Operator.SIMPLE


def parse_modifier(text: str) -> Tuple[str, Modifier]:
    """Parse an optional ``:<digits>`` prefix or ``*`` explode modifier."""
    if text.startswith(":"):
        digits = _take_while(text[1:], lambda c: c in _DEC_DIGITS)
        if digits and int(digits) <= _MAX_PREFIX:
            return text[1 + len(digits):], Modifier(ModifierKind.PREFIX, int(digits))
    if text.startswith("*"):
        return text[1:], Modifier(ModifierKind.EXPLODE)
    return text, Modifier()


def parse_percent_encoded(text: str) -> Tuple[str, str]:
    """Parse a ``%`` followed by exactly two hex digits."""
    rest = _expect_char(text, "%")
    if len(rest) < 2 or rest[0] not in _HEX_DIGITS or rest[1] not in _HEX_DIGITS:
        raise ParseError("expected two hex digits", rest)
    return rest[2:], text[:3]


def parse_varchar(text: str) -> Tuple[str, str]:
    """Parse a run of variable characters, or one percent-encoded triplet."""
    run = _take_while(text, _is_valid_varchar)
    if run:
        return text[len(run):], run
    return parse_percent_encoded(text)


def parse_var_name(text: str) -> Tuple[str, str]:
    """Parse one or more varchar pieces into a variable name."""
    rest, _ = parse_varchar(text)
    while True:
        try:
            rest, _ = parse_varchar(rest)
        except ParseError:
            break
    return rest, text[: len(text) - len(rest)]


def parse_var_spec(text: str) -> Tuple[str, VarSpec]:
    rest, name = parse_var_name(text)
    rest, modifier = parse_modifier(rest)
    return rest, VarSpec(name, modifier)


def parse_expression(text: str) -> Tuple[str, Expression]:
    """Parse ``{`` operator var-spec (``,`` var-spec)* ``}``."""
    rest = _expect_char(text, "{")
    rest, operator = parse_operator(rest)
    rest, first = parse_var_spec(rest)
    specs = [first]
    while rest.startswith(","):
        try:
            after, spec = parse_var_spec(rest[1:])
        except ParseError:
            break
        specs.append(spec)
        rest = after
    rest = _expect_char(rest, "}")
    return rest, Expression(operator, tuple(specs))


def parse_node(text: str) -> Tuple[str, AstNode]:
    """Parse one literal run or one expression."""
    literal = _take_while(text, lambda c: c != "{")
    if literal:
        return text[len(literal):], Literal(literal)
    return parse_expression(text)


def ast_nodes(text: str) -> Optional[list]:
    """Parse a whole template into nodes, or return ``None`` if it is invalid."""
    nodes = []
    rest = text
    while rest:
        try:
            rest, node = parse_node(rest)
        except ParseError:
            return None
        nodes.append(node)
    return nodes