from datetime import datetime, timezone

import pytest

from listopts.core.errors import LiteralDecodeError, StatusCode, ValidationError
from listopts.core.field_selector import (
    FieldRule,
    apply_field_selector,
    apply_term,
    default_field_rules,
    split_term,
)
from listopts.core.models import ListOptions


@pytest.mark.parametrize(
    ("term", "expected"),
    [
        ("field!=value", ("!=", "value", True)),
        ("field==value", ("==", "value", True)),
        ("field=value", ("=", "value", True)),
        ("fieldvalue", ("", "", False)),
        ("field:value", ("", "", False)),
        ("field=", ("=", "", True)),
        ("field==value!=othervalue", ("==", "value!=othervalue", True)),
        ("pre!=post=value", ("!=", "post=value", True)),
        ("", ("", "", False)),
    ],
)
def test_split_term(term: str, expected: tuple[str, str, bool]):
    assert split_term(term) == expected


def test_split_term_prefers_earliest_position_over_operator_priority():
    assert split_term("a=b==c") == ("=", "b==c", True)


def test_split_term_with_custom_operators():
    assert split_term("spec.startedAt<2024", ("=", "<")) == ("<", "2024", True)
    assert split_term("spec.startedAt<2024") == ("", "", False)


def test_namespace_from_field_selector():
    result = apply_field_selector(ListOptions(), "metadata.namespace=test")

    assert result.namespace == "test"


def test_namespace_matching_caller_namespace_is_accepted():
    result = apply_field_selector(
        ListOptions(namespace="test"), "metadata.namespace=test"
    )

    assert result.namespace == "test"


def test_namespace_contradiction_names_both_values():
    with pytest.raises(ValidationError) as exc_info:
        apply_field_selector(ListOptions(namespace="x"), "metadata.namespace=y")

    assert exc_info.value.code is StatusCode.INVALID_ARGUMENT
    assert exc_info.value.message == (
        "'namespace' query param (\"x\") and fieldselector 'metadata.namespace' "
        "(\"y\") are both specified and contradict each other"
    )


def test_second_namespace_term_must_agree_with_first():
    with pytest.raises(ValidationError, match="contradict"):
        apply_field_selector(
            ListOptions(), "metadata.namespace=a,metadata.namespace=b"
        )


def test_namespace_key_is_not_claimed_by_name_rule():
    result = apply_field_selector(ListOptions(), "metadata.namespace=ns")

    assert result.name == ""
    assert result.name_operator == ""


def test_name_sets_value_and_operator():
    result = apply_field_selector(ListOptions(), "metadata.name=a=b")

    assert result.name == "a=b"
    assert result.name_operator == "="


@pytest.mark.parametrize(
    "term",
    ["metadata.name:invalid", "metadata.name!=x", "metadata.name==x", "metadata.name"],
)
def test_name_with_unsupported_operator(term: str):
    with pytest.raises(ValidationError) as exc_info:
        apply_field_selector(ListOptions(), term)

    assert exc_info.value.message == f"unsupported fieldselector 'metadata.name' {term}"


def test_started_at_bounds():
    result = apply_field_selector(
        ListOptions(),
        "spec.startedAt>2023-01-01T00:00:00Z,spec.startedAt<2023-12-31T23:59:59Z",
    )

    assert result.min_started_at == datetime(2023, 1, 1, tzinfo=timezone.utc)
    assert result.max_started_at == datetime(2023, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


def test_started_at_bounds_are_not_cross_validated():
    result = apply_field_selector(
        ListOptions(),
        "spec.startedAt>2024-01-01T00:00:00Z,spec.startedAt<2023-01-01T00:00:00Z",
    )

    assert result.min_started_at > result.max_started_at


@pytest.mark.parametrize("term", ["spec.startedAt<invalid", "spec.startedAt>invalid"])
def test_started_at_decode_failure_is_internal(term: str):
    with pytest.raises(LiteralDecodeError) as exc_info:
        apply_field_selector(ListOptions(), term)

    assert exc_info.value.code is StatusCode.INTERNAL
    assert 'parsing time "invalid" as RFC3339' in exc_info.value.message


def test_started_at_with_equals_is_unsupported():
    with pytest.raises(ValidationError, match="unsupported requirement"):
        apply_field_selector(ListOptions(), "spec.startedAt=2023-01-01T00:00:00Z")


def test_show_remaining_item_count():
    result = apply_field_selector(ListOptions(), "ext.showRemainingItemCount=true")

    assert result.show_remaining_item_count is True


def test_show_remaining_item_count_decode_failure_is_internal():
    with pytest.raises(LiteralDecodeError) as exc_info:
        apply_field_selector(ListOptions(), "ext.showRemainingItemCount=maybe")

    assert exc_info.value.message == 'parsing "maybe": invalid syntax'


@pytest.mark.parametrize("term", ["unsupported=value", "metadata.labels=x", "novalue"])
def test_unknown_key_is_rejected(term: str):
    with pytest.raises(ValidationError) as exc_info:
        apply_field_selector(ListOptions(), term)

    assert exc_info.value.message == f"unsupported requirement {term}"


def test_processing_stops_at_first_failing_term():
    with pytest.raises(ValidationError, match="unsupported requirement bad=1"):
        apply_field_selector(ListOptions(), "bad=1,spec.startedAt<invalid")


def test_empty_terms_are_skipped():
    result = apply_field_selector(ListOptions(), "metadata.name=foo,,")

    assert result.name == "foo"


def test_custom_rule_table():
    rules = (
        FieldRule(
            "spec.ascending",
            frozenset({"="}),
            lambda options, _, value: options.with_started_at_ascending(value == "yes"),
        ),
    )

    result = apply_term(ListOptions(), "spec.ascending=yes", rules)

    assert result.started_at_ascending is True
    with pytest.raises(ValidationError):
        apply_term(ListOptions(), "metadata.name=foo", rules)


def test_default_rules_are_keyed_by_field_path():
    assert [r.key for r in default_field_rules()] == [
        "metadata.namespace",
        "metadata.name",
        "spec.startedAt",
        "ext.showRemainingItemCount",
    ]
