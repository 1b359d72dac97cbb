"""Field selector interpretation.

A field selector is a comma-separated list of `key<op>value` terms. Each term
is matched against an explicit table of FieldRule entries; a rule names the
key, the operators it accepts and a pure handler that returns an updated
ListOptions. Terms that no rule accepts are rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from listopts.core.errors import StatusCode, ValidationError, to_status_error
from listopts.core.literals import parse_bool, parse_rfc3339, quote
from listopts.core.models import ListOptions

logger = logging.getLogger(__name__)

DEFAULT_OPERATORS: tuple[str, ...] = ("==", "!=", "=")
FIELD_OPERATORS: tuple[str, ...] = ("==", "!=", "=", "<", ">")

UNSUPPORTED_REQUIREMENT = "unsupported requirement {term}"

_KEY_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-"
)

FieldHandler = Callable[[ListOptions, str, str], ListOptions]


def split_term(
    term: str, operators: Sequence[str] = DEFAULT_OPERATORS
) -> tuple[str, str, bool]:
    """
    Find the first operator in a selector term.

    The term is scanned left to right; at each position the operators are
    tried in the given order, so `==` wins over `=` when both start at the
    same character. Only the first match is consumed.

    Args:
        term: Term such as `metadata.name=foo`.
        operators: Operators to look for, in priority order.

    Returns:
        `(operator, right_hand_side, found)`. When no operator occurs,
        `("", "", False)`.
    """
    for pos in range(len(term)):
        for op in operators:
            if term.startswith(op, pos):
                return op, term[pos + len(op) :], True
    return "", "", False


@dataclass(frozen=True)
class FieldRule:
    """
    A recognised field selector key.

    Attributes:
        key: Field path, e.g. `metadata.name`.
        operators: Operators accepted for this key.
        handler: Pure function applying `(options, operator, value)`.
        rejection: Message template used when the key matches but the
            operator does not. `{term}` is replaced by the raw term.
    """

    key: str
    operators: frozenset[str]
    handler: FieldHandler
    rejection: str = UNSUPPORTED_REQUIREMENT

    def claims(self, term: str) -> bool:
        """Return True if the term starts with this rule's full key."""
        if not term.startswith(self.key):
            return False
        rest = term[len(self.key) :]
        return not rest or rest[0] not in _KEY_CHARS


def _set_namespace(options: ListOptions, _: str, value: str) -> ListOptions:
    if options.namespace and options.namespace != value:
        raise ValidationError(
            f"'namespace' query param ({quote(options.namespace)}) and "
            f"fieldselector 'metadata.namespace' ({quote(value)}) "
            "are both specified and contradict each other"
        )
    return options.with_namespace(value)


def _set_name(options: ListOptions, operator: str, value: str) -> ListOptions:
    return options.with_name(value, operator)


def _set_started_at(options: ListOptions, operator: str, value: str) -> ListOptions:
    try:
        started_at = parse_rfc3339(value)
    except ValueError as exc:
        raise to_status_error(exc, StatusCode.INTERNAL) from exc
    if operator == "<":
        return options.with_max_started_at(started_at)
    return options.with_min_started_at(started_at)


def _set_show_remaining_item_count(
    options: ListOptions, _: str, value: str
) -> ListOptions:
    try:
        show = parse_bool(value)
    except ValueError as exc:
        raise to_status_error(exc, StatusCode.INTERNAL) from exc
    return options.with_show_remaining_item_count(show)


def default_field_rules() -> tuple[FieldRule, ...]:
    """Return the field selector keys understood by the listing API."""
    return (
        FieldRule("metadata.namespace", frozenset({"="}), _set_namespace),
        FieldRule(
            "metadata.name",
            frozenset({"="}),
            _set_name,
            rejection="unsupported fieldselector 'metadata.name' {term}",
        ),
        FieldRule("spec.startedAt", frozenset({"<", ">"}), _set_started_at),
        FieldRule(
            "ext.showRemainingItemCount",
            frozenset({"="}),
            _set_show_remaining_item_count,
        ),
    )


def apply_term(
    options: ListOptions, term: str, rules: Sequence[FieldRule]
) -> ListOptions:
    """
    Apply a single field selector term.

    Raises:
        ValidationError: If no rule accepts the key and operator.
        LiteralDecodeError: If the value cannot be decoded.
    """
    rule = next((r for r in rules if r.claims(term)), None)
    if rule is None:
        logger.debug("rejecting field selector term %r: unknown key", term)
        raise ValidationError(UNSUPPORTED_REQUIREMENT.format(term=term))

    rest = term[len(rule.key) :]
    operator, value, found = split_term(rest, FIELD_OPERATORS)
    # the operator has to follow the key directly
    if not found or rest != operator + value or operator not in rule.operators:
        logger.debug("rejecting field selector term %r: bad operator", term)
        raise ValidationError(rule.rejection.format(term=term))

    return rule.handler(options, operator, value)


def apply_field_selector(
    options: ListOptions,
    selector: str,
    rules: Sequence[FieldRule] | None = None,
) -> ListOptions:
    """
    Apply every term of a field selector to the given options.

    Terms are processed in order and processing stops at the first failing
    term. Empty terms, such as the one left by a trailing comma, are skipped.

    Args:
        options: Options carrying the caller-supplied namespace, if any.
        selector: Comma-separated field selector.
        rules: Recognised keys. Defaults to `default_field_rules()`.

    Returns:
        A new ListOptions with the selector applied.

    Raises:
        ValidationError: For unknown keys, misused operators or a namespace
            contradicting the caller's.
        LiteralDecodeError: For timestamps or booleans that fail to decode.
    """
    if rules is None:
        rules = default_field_rules()

    for term in selector.split(","):
        if not term:
            continue
        options = apply_term(options, term, rules)
    return options
