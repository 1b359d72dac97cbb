"""Core models for list-query options.

This module defines the raw list request as it arrives from the transport
layer and the validated descriptor handed to the paginated listing API.
Both are immutable; the descriptor exposes small `with_*` helpers that
return a modified copy instead of mutating the receiver.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from listopts.core.labels import Requirement


@dataclass(frozen=True)
class RawListOptions:
    """
    Loosely-typed list request parameters.

    Attributes:
        continue_token: Pagination cursor, a decimal offset or empty.
        limit: Maximum number of items requested. Passed through unvalidated.
        field_selector: Comma-separated `key<op>value` terms.
        label_selector: Standard label selector expression.
    """

    continue_token: str = ""
    limit: int = 0
    field_selector: str = ""
    label_selector: str = ""


@dataclass(frozen=True)
class ListOptions:
    """
    Validated list query descriptor.

    Attributes:
        namespace: Namespace to list from, empty for all namespaces.
        name_prefix: Only include items whose name starts with this prefix.
        name: Exact name filter selected through the field selector.
        name_operator: Operator used for `name` (currently only "=").
        limit: Maximum number of items to return.
        offset: Number of items to skip, decoded from the continue token.
        max_started_at: Upper bound on the start time, if any.
        min_started_at: Lower bound on the start time, if any.
        started_at_ascending: Sort by start time ascending instead of descending.
        show_remaining_item_count: Ask the listing API to report how many
            items remain after this page.
        label_requirements: Parsed label selector requirements, in input order.
    """

    namespace: str = ""
    name_prefix: str = ""
    name: str = ""
    name_operator: str = ""
    limit: int = 0
    offset: int = 0
    max_started_at: datetime | None = None
    min_started_at: datetime | None = None
    started_at_ascending: bool = False
    show_remaining_item_count: bool = False
    label_requirements: tuple[Requirement, ...] = ()

    def with_namespace(self, namespace: str) -> ListOptions:
        return replace(self, namespace=namespace)

    def with_name(self, name: str, operator: str) -> ListOptions:
        return replace(self, name=name, name_operator=operator)

    def with_limit(self, limit: int) -> ListOptions:
        return replace(self, limit=limit)

    def with_offset(self, offset: int) -> ListOptions:
        return replace(self, offset=offset)

    def with_show_remaining_item_count(self, show: bool) -> ListOptions:
        return replace(self, show_remaining_item_count=show)

    def with_max_started_at(self, max_started_at: datetime) -> ListOptions:
        return replace(self, max_started_at=max_started_at)

    def with_min_started_at(self, min_started_at: datetime) -> ListOptions:
        return replace(self, min_started_at=min_started_at)

    def with_started_at_ascending(self, ascending: bool) -> ListOptions:
        return replace(self, started_at_ascending=ascending)

    def with_label_requirements(
        self, requirements: tuple[Requirement, ...]
    ) -> ListOptions:
        return replace(self, label_requirements=tuple(requirements))
