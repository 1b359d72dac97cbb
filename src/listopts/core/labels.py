"""Label selector parsing.

This module parses the standard label selector grammar into an ordered
sequence of immutable requirements:

    <selector>    ::= <requirement> | <requirement> "," <selector>
    <requirement> ::= ["!"] KEY [ <set-based> | <exact-match> ]
    <set-based>   ::= ("in" | "notin") "(" VALUE {"," VALUE} ")"
    <exact-match> ::= ("=" | "==" | "!=" | ">" | "<") VALUE

Whitespace separates tokens. Keys are qualified names with an optional DNS
subdomain prefix, values are empty or qualified-name shaped. Requirements
are returned in the order they appear in the selector.

Example:
    >>> reqs = parse_requirements("env=prod, tier in (web,api), !debug")
    >>> [str(r) for r in reqs]
    ['env=prod', 'tier in (api,web)', '!debug']
"""

from __future__ import annotations

import re
from enum import Enum, auto
from typing import Iterable, Mapping

from pydantic import BaseModel, ConfigDict

from listopts.core.literals import parse_int


class Operator(str, Enum):
    """Label selector operators."""

    EQUALS = "="
    DOUBLE_EQUALS = "=="
    NOT_EQUALS = "!="
    IN = "in"
    NOT_IN = "notin"
    EXISTS = "exists"
    DOES_NOT_EXIST = "!"
    GREATER_THAN = "gt"
    LESS_THAN = "lt"


class Requirement(BaseModel):
    """
    A single parsed label constraint.

    Attributes:
        key: Label key the requirement applies to.
        operator: How the label value is compared.
        values: Sorted values relevant to the operator. Empty for the
            presence operators.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    operator: Operator
    values: tuple[str, ...] = ()

    def __str__(self) -> str:
        if self.operator is Operator.EXISTS:
            return self.key
        if self.operator is Operator.DOES_NOT_EXIST:
            return f"!{self.key}"
        if self.operator in (Operator.IN, Operator.NOT_IN):
            return f"{self.key} {self.operator.value} ({','.join(self.values)})"
        symbol = {Operator.GREATER_THAN: ">", Operator.LESS_THAN: "<"}.get(
            self.operator, self.operator.value
        )
        return f"{self.key}{symbol}{''.join(self.values)}"

    def matches(self, labels: Mapping[str, str]) -> bool:
        """Check whether a label set satisfies this requirement."""
        if self.operator is Operator.EXISTS:
            return self.key in labels
        if self.operator is Operator.DOES_NOT_EXIST:
            return self.key not in labels
        if self.operator in (Operator.EQUALS, Operator.DOUBLE_EQUALS, Operator.IN):
            return self.key in labels and labels[self.key] in self.values
        if self.operator in (Operator.NOT_EQUALS, Operator.NOT_IN):
            return self.key not in labels or labels[self.key] not in self.values

        if self.key not in labels:
            return False
        try:
            actual = int(labels[self.key])
        except ValueError:
            return False
        expected = int(self.values[0])
        if self.operator is Operator.GREATER_THAN:
            return actual > expected
        return actual < expected


def matches_all(requirements: Iterable[Requirement], labels: Mapping[str, str]) -> bool:
    """Check whether a label set satisfies every requirement."""
    return all(r.matches(labels) for r in requirements)


# ==== Key / value validation ====

_QNAME_MAX_LEN = 63
_DNS_SUBDOMAIN_MAX_LEN = 253

_QNAME = re.compile(r"([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]")
_DNS_SUBDOMAIN = re.compile(
    r"[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*"
)

_QNAME_HINT = (
    "must consist of alphanumeric characters, '-', '_' or '.', "
    "and must start and end with an alphanumeric character"
)


def _key_errors(key: str) -> list[str]:
    parts = key.split("/")
    if len(parts) > 2:
        return [f"a qualified name {_QNAME_HINT} with an optional DNS subdomain prefix and '/'"]

    errors: list[str] = []
    name = parts[-1]
    if len(parts) == 2:
        prefix = parts[0]
        if not prefix:
            errors.append("prefix part must be non-empty")
        elif len(prefix) > _DNS_SUBDOMAIN_MAX_LEN:
            errors.append(f"prefix part must be no more than {_DNS_SUBDOMAIN_MAX_LEN} characters")
        elif not _DNS_SUBDOMAIN.fullmatch(prefix):
            errors.append("prefix part must be a lowercase RFC 1123 subdomain")

    if not name:
        errors.append("name part must be non-empty")
    elif len(name) > _QNAME_MAX_LEN:
        errors.append(f"name part must be no more than {_QNAME_MAX_LEN} characters")
    elif not _QNAME.fullmatch(name):
        errors.append(f"name part {_QNAME_HINT}")
    return errors


def _value_errors(value: str) -> list[str]:
    if not value:
        return []
    if len(value) > _QNAME_MAX_LEN:
        return [f"must be no more than {_QNAME_MAX_LEN} characters"]
    if not _QNAME.fullmatch(value):
        return [f"a valid label must be an empty string or {_QNAME_HINT}"]
    return []


def _validate_key(key: str) -> None:
    errors = _key_errors(key)
    if errors:
        raise ValueError(f'key: Invalid value: "{key}": {"; ".join(errors)}')


def _validate_values(values: Iterable[str]) -> None:
    for i, value in enumerate(values):
        errors = _value_errors(value)
        if errors:
            raise ValueError(f'values[{i}]: Invalid value: "{value}": {"; ".join(errors)}')


# ==== Lexer ====


class Token(Enum):
    ERROR = auto()
    END_OF_STRING = auto()
    IDENTIFIER = auto()
    OPEN_PAR = auto()
    CLOSED_PAR = auto()
    COMMA = auto()
    DOES_NOT_EXIST = auto()
    EQUALS = auto()
    DOUBLE_EQUALS = auto()
    NOT_EQUALS = auto()
    GREATER_THAN = auto()
    LESS_THAN = auto()
    IN = auto()
    NOT_IN = auto()


_STRING_TO_TOKEN = {
    "(": Token.OPEN_PAR,
    ")": Token.CLOSED_PAR,
    ",": Token.COMMA,
    "!": Token.DOES_NOT_EXIST,
    "=": Token.EQUALS,
    "==": Token.DOUBLE_EQUALS,
    "!=": Token.NOT_EQUALS,
    ">": Token.GREATER_THAN,
    "<": Token.LESS_THAN,
    "in": Token.IN,
    "notin": Token.NOT_IN,
}

_WHITESPACE = frozenset(" \t\r\n")
_SPECIAL_SYMBOLS = frozenset("=!(),><")


def lex(selector: str) -> list[tuple[Token, str]]:
    """Split a selector string into (token, literal) pairs."""
    tokens: list[tuple[Token, str]] = []
    pos, length = 0, len(selector)

    while pos < length:
        ch = selector[pos]
        if ch in _WHITESPACE:
            pos += 1
            continue

        if ch in _SPECIAL_SYMBOLS:
            # longest run of symbols that still forms a known token
            end = pos
            matched: tuple[Token, str] | None = None
            while end < length and selector[end] in _SPECIAL_SYMBOLS:
                candidate = selector[pos : end + 1]
                if candidate in _STRING_TO_TOKEN:
                    matched = (_STRING_TO_TOKEN[candidate], candidate)
                elif matched is not None:
                    break
                end += 1
            if matched is None:
                tokens.append(
                    (Token.ERROR, f"error expected: keyword found '{selector[pos:end]}'")
                )
                pos = end
            else:
                tokens.append(matched)
                pos += len(matched[1])
            continue

        start = pos
        while (
            pos < length
            and selector[pos] not in _WHITESPACE
            and selector[pos] not in _SPECIAL_SYMBOLS
        ):
            pos += 1
        literal = selector[start:pos]
        tokens.append((_STRING_TO_TOKEN.get(literal, Token.IDENTIFIER), literal))

    tokens.append((Token.END_OF_STRING, ""))
    return tokens


# ==== Parser ====

_BINARY_OPERATORS = {
    Token.IN: Operator.IN,
    Token.NOT_IN: Operator.NOT_IN,
    Token.EQUALS: Operator.EQUALS,
    Token.DOUBLE_EQUALS: Operator.DOUBLE_EQUALS,
    Token.NOT_EQUALS: Operator.NOT_EQUALS,
    Token.GREATER_THAN: Operator.GREATER_THAN,
    Token.LESS_THAN: Operator.LESS_THAN,
}

# "in" and "notin" are plain identifiers wherever a key or value is expected
_IDENTIFIER_TOKENS = frozenset({Token.IDENTIFIER, Token.IN, Token.NOT_IN})
_REQUIREMENT_START = _IDENTIFIER_TOKENS | {Token.DOES_NOT_EXIST}


class _Parser:
    def __init__(self, selector: str):
        self.tokens = lex(selector)
        self.pos = 0

    def lookahead(self) -> tuple[Token, str]:
        return self.tokens[self.pos]

    def consume(self) -> tuple[Token, str]:
        token = self.tokens[self.pos]
        if token[0] is not Token.END_OF_STRING:
            self.pos += 1
        return token

    def parse(self) -> list[Requirement]:
        requirements: list[Requirement] = []
        while True:
            token, literal = self.lookahead()
            if token is Token.END_OF_STRING:
                return requirements
            if token not in _REQUIREMENT_START:
                raise ValueError(
                    f"found '{literal}', expected: !, identifier, or 'end of string'"
                )

            try:
                requirements.append(self.parse_requirement())
            except ValueError as exc:
                raise ValueError(f"unable to parse requirement: {exc}") from exc

            token, literal = self.consume()
            if token is Token.END_OF_STRING:
                return requirements
            if token is not Token.COMMA:
                raise ValueError(f"found '{literal}', expected: ',' or 'end of string'")
            next_token, next_literal = self.lookahead()
            if next_token not in _REQUIREMENT_START:
                raise ValueError(f"found '{next_literal}', expected: identifier after ','")

    def parse_requirement(self) -> Requirement:
        key, operator = self.parse_key_and_infer_operator()
        if operator is not None:
            return Requirement(key=key, operator=operator)

        operator = self.parse_operator()
        if operator in (Operator.IN, Operator.NOT_IN):
            values = self.parse_values()
        else:
            values = self.parse_exact_value()
        return _new_requirement(key, operator, values)

    def parse_key_and_infer_operator(self) -> tuple[str, Operator | None]:
        operator = None
        token, literal = self.consume()
        if token is Token.DOES_NOT_EXIST:
            operator = Operator.DOES_NOT_EXIST
            token, literal = self.consume()
        if token not in _IDENTIFIER_TOKENS:
            raise ValueError(f"found '{literal}', expected: identifier")
        _validate_key(literal)

        next_token, _ = self.lookahead()
        if next_token in (Token.END_OF_STRING, Token.COMMA) and operator is None:
            operator = Operator.EXISTS
        return literal, operator

    def parse_operator(self) -> Operator:
        token, literal = self.consume()
        operator = _BINARY_OPERATORS.get(token)
        if operator is None:
            expected = ", ".join(op.value for op in _BINARY_OPERATORS.values())
            raise ValueError(f"found '{literal}', expected: {expected}")
        return operator

    def parse_values(self) -> set[str]:
        token, literal = self.consume()
        if token is not Token.OPEN_PAR:
            raise ValueError(f"found '{literal}' expected: '('")

        token, literal = self.lookahead()
        if token is Token.CLOSED_PAR:
            self.consume()
            return {""}
        if token not in _IDENTIFIER_TOKENS and token is not Token.COMMA:
            raise ValueError(f"found '{literal}', expected: ',', ')' or identifier")

        values = self.parse_identifiers_list()
        token, literal = self.consume()
        if token is not Token.CLOSED_PAR:
            raise ValueError(f"found '{literal}', expected: ')'")
        return values

    def parse_identifiers_list(self) -> set[str]:
        values: set[str] = set()
        while True:
            token, literal = self.consume()
            if token in _IDENTIFIER_TOKENS:
                values.add(literal)
                next_token, next_literal = self.lookahead()
                if next_token is Token.CLOSED_PAR:
                    return values
                if next_token is not Token.COMMA:
                    raise ValueError(f"found '{next_literal}', expected: ',' or ')'")
            elif token is Token.COMMA:
                if not values:
                    values.add("")
                next_token, _ = self.lookahead()
                if next_token is Token.CLOSED_PAR:
                    values.add("")
                    return values
                if next_token is Token.COMMA:
                    self.consume()
                    values.add("")
            else:
                raise ValueError(f"found '{literal}', expected: ',', or identifier")

    def parse_exact_value(self) -> set[str]:
        token, _ = self.lookahead()
        if token in (Token.END_OF_STRING, Token.COMMA):
            return {""}
        token, literal = self.consume()
        if token not in _IDENTIFIER_TOKENS:
            raise ValueError(f"found '{literal}', expected: identifier")
        return {literal}


def _new_requirement(key: str, operator: Operator, values: set[str]) -> Requirement:
    ordered = tuple(sorted(values))
    if operator in (Operator.GREATER_THAN, Operator.LESS_THAN):
        try:
            parse_int(ordered[0])
        except ValueError as exc:
            raise ValueError(
                f"values[0]: Invalid value: \"{ordered[0]}\": "
                "for 'Gt', 'Lt' operators, the value must be an integer"
            ) from exc
    else:
        _validate_values(ordered)
    return Requirement(key=key, operator=operator, values=ordered)


def parse_requirements(selector: str) -> tuple[Requirement, ...]:
    """
    Parse a label selector string.

    Args:
        selector: Selector such as `app=web,env in (prod,staging),!canary`.

    Returns:
        The requirements in the order they appear in `selector`. An empty or
        whitespace-only selector yields no requirements.

    Raises:
        ValueError: If the selector does not follow the grammar.
    """
    return tuple(_Parser(selector).parse())
