"""List options construction.

This module turns a raw list request into a validated ListOptions
descriptor. It decodes the continue token, merges the caller-supplied
namespace and name prefix, applies the field selector and parses the label
selector, failing on the first error. No partial descriptor is ever
returned.
"""

from __future__ import annotations

import logging

from listopts.core.errors import StatusCode, ValidationError, to_status_error
from listopts.core.field_selector import apply_field_selector
from listopts.core.labels import Requirement, parse_requirements
from listopts.core.literals import parse_int
from listopts.core.models import ListOptions, RawListOptions

logger = logging.getLogger(__name__)


def parse_continue(token: str) -> int:
    """
    Decode a continue token into an item offset.

    Args:
        token: Decimal offset, or an empty string for the first page.

    Returns:
        The non-negative offset.

    Raises:
        ValidationError: If the token is not an integer or is negative.
    """
    if token == "":
        return 0
    try:
        offset = parse_int(token)
    except ValueError as exc:
        raise ValidationError("listOptions.continue must be int") from exc
    if offset < 0:
        raise ValidationError("listOptions.continue must >= 0")
    return offset


def parse_label_selector(selector: str) -> tuple[Requirement, ...]:
    """
    Parse a label selector, classifying syntax errors as invalid arguments.

    The parser's message is forwarded unchanged.
    """
    try:
        return parse_requirements(selector)
    except ValueError as exc:
        raise to_status_error(exc, StatusCode.INVALID_ARGUMENT) from exc


def build_list_options(
    raw: RawListOptions,
    namespace: str = "",
    name_prefix: str = "",
) -> ListOptions:
    """
    Build a validated ListOptions from a raw list request.

    Args:
        raw: Request parameters as received by the transport layer.
        namespace: Namespace given by the request path or query, if any.
        name_prefix: Name prefix given by the caller, if any.

    Returns:
        The fully populated descriptor.

    Raises:
        ValidationError: For malformed or contradicting input.
        LiteralDecodeError: For field selector values that fail to decode.
    """
    offset = parse_continue(raw.continue_token)

    options = ListOptions(
        namespace=namespace,
        name_prefix=name_prefix,
        limit=raw.limit,
        offset=offset,
    )

    if raw.field_selector:
        options = apply_field_selector(options, raw.field_selector)

    if raw.label_selector:
        options = options.with_label_requirements(
            parse_label_selector(raw.label_selector)
        )

    logger.debug("built list options: %s", options)
    return options
