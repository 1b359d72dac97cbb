"""Commands for building and inspecting list queries."""

from __future__ import annotations

from dataclasses import fields
from typing import Any

import typer

from listopts.cli.common.exits import exit_from_status_error
from listopts.cli.common.options import (
    ContinueOpt,
    FieldSelectorOpt,
    JsonOpt,
    LabelSelectorOpt,
    LimitOpt,
    NamePrefixOpt,
    NamespaceOpt,
)
from listopts.cli.common.output import out
from listopts.core.builder import build_list_options, parse_label_selector
from listopts.core.errors import StatusError
from listopts.core.field_selector import split_term
from listopts.core.models import ListOptions, RawListOptions


def _options_to_dict(options: ListOptions) -> dict[str, Any]:
    """Convert ListOptions into JSON-friendly primitives."""
    data: dict[str, Any] = {}
    for f in fields(options):
        value = getattr(options, f.name)
        if f.name == "label_requirements":
            value = [r.model_dump(mode="json") for r in value]
        elif hasattr(value, "isoformat"):
            value = value.isoformat()
        data[f.name] = value
    return data


def build(
    continue_token: str = ContinueOpt,
    limit: int = LimitOpt,
    field_selector: str = FieldSelectorOpt,
    label_selector: str = LabelSelectorOpt,
    namespace: str = NamespaceOpt,
    name_prefix: str = NamePrefixOpt,
    as_json: bool = JsonOpt,
):
    """
    Build validated list options from raw request parameters.
    """
    raw = RawListOptions(
        continue_token=continue_token,
        limit=limit,
        field_selector=field_selector,
        label_selector=label_selector,
    )

    try:
        options = build_list_options(raw, namespace, name_prefix)
    except StatusError as e:
        exit_from_status_error(e)

    if as_json:
        out.json(_options_to_dict(options))
        return

    out.success("List options are valid")
    out.options_table(options)


def labels(
    selector: str = typer.Argument(..., help="Label selector to parse"),
    as_json: bool = JsonOpt,
):
    """
    Parse a label selector and show its requirements.
    """
    try:
        requirements = parse_label_selector(selector)
    except StatusError as e:
        exit_from_status_error(e)

    if as_json:
        out.json([r.model_dump(mode="json") for r in requirements])
        return

    if not requirements:
        out.warn("Selector has no requirements")
        return

    out.requirements_table(requirements)


def split(term: str = typer.Argument(..., help="Selector term, e.g. a==b")):
    """
    Show how a selector term is split into operator and value.
    """
    result = split_term(term)
    out.split_table(term, result)
    if not result[2]:
        raise typer.Exit(1)
