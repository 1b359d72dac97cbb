import pytest
from pydantic import ValidationError

from listopts.core.labels import (
    Operator,
    Requirement,
    Token,
    lex,
    matches_all,
    parse_requirements,
)


def test_parse_keeps_input_order():
    reqs = parse_requirements("app=myapp,env=prod,label==mylabel")

    assert [(r.key, r.operator, r.values) for r in reqs] == [
        ("app", Operator.EQUALS, ("myapp",)),
        ("env", Operator.EQUALS, ("prod",)),
        ("label", Operator.DOUBLE_EQUALS, ("mylabel",)),
    ]


def test_parse_all_operator_kinds():
    reqs = parse_requirements(
        "a!=1, b in (y,x), c notin (z), d, !e, f>3, g<-2, example.com/h=v"
    )

    assert [(r.key, r.operator) for r in reqs] == [
        ("a", Operator.NOT_EQUALS),
        ("b", Operator.IN),
        ("c", Operator.NOT_IN),
        ("d", Operator.EXISTS),
        ("e", Operator.DOES_NOT_EXIST),
        ("f", Operator.GREATER_THAN),
        ("g", Operator.LESS_THAN),
        ("example.com/h", Operator.EQUALS),
    ]
    assert reqs[1].values == ("x", "y")


@pytest.mark.parametrize("selector", ["", "   "])
def test_empty_selector_has_no_requirements(selector: str):
    assert parse_requirements(selector) == ()


def test_empty_values():
    assert parse_requirements("a=")[0].values == ("",)
    assert parse_requirements("a in ()")[0].values == ("",)
    assert parse_requirements("a in (x,)")[0].values == ("", "x")


def test_in_keyword_can_be_a_key():
    assert parse_requirements("in=x")[0].key == "in"


@pytest.mark.parametrize(
    ("selector", "message"),
    [
        ("app=myapp,", "found '', expected: identifier after ','"),
        ("a=b c", "found 'c', expected: ',' or 'end of string'"),
        (",a", "found ',', expected: !, identifier, or 'end of string'"),
        (
            "a b",
            "unable to parse requirement: found 'b', expected: in, notin, =, ==, !=, gt, lt",
        ),
        ("a in x", "unable to parse requirement: found 'x' expected: '('"),
        ("a in (x y)", "unable to parse requirement: found 'y', expected: ',' or ')'"),
        ("! =x", "unable to parse requirement: found '=', expected: identifier"),
    ],
)
def test_syntax_errors(selector: str, message: str):
    with pytest.raises(ValueError) as exc_info:
        parse_requirements(selector)

    assert str(exc_info.value) == message


def test_invalid_key_is_rejected():
    with pytest.raises(ValueError, match='key: Invalid value: "-bad"'):
        parse_requirements("-bad=x")


def test_invalid_value_is_rejected():
    with pytest.raises(ValueError, match='values\\[0\\]: Invalid value: "-x"'):
        parse_requirements("a=-x")


def test_gt_requires_integer():
    with pytest.raises(ValueError, match="must be an integer"):
        parse_requirements("a>b")


def test_lex_prefers_longest_operator():
    assert [t for t, _ in lex("a==b!=c")] == [
        Token.IDENTIFIER,
        Token.DOUBLE_EQUALS,
        Token.IDENTIFIER,
        Token.NOT_EQUALS,
        Token.IDENTIFIER,
        Token.END_OF_STRING,
    ]


def test_requirement_str():
    reqs = parse_requirements("env=prod, tier in (web,api), !debug, ready, n>1")

    assert [str(r) for r in reqs] == [
        "env=prod",
        "tier in (api,web)",
        "!debug",
        "ready",
        "n>1",
    ]


def test_requirements_match_labels():
    reqs = parse_requirements("env in (prod,staging),!canary,replicas>2")

    assert matches_all(reqs, {"env": "prod", "replicas": "3"}) is True
    assert matches_all(reqs, {"env": "prod", "replicas": "3", "canary": "1"}) is False
    assert matches_all(reqs, {"env": "dev", "replicas": "3"}) is False
    assert matches_all(reqs, {"env": "prod", "replicas": "x"}) is False


def test_requirement_is_immutable():
    req = Requirement(key="a", operator=Operator.EXISTS)

    with pytest.raises(ValidationError):
        req.key = "b"
