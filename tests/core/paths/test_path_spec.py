# tests/core/paths/test_path_spec.py
"""
Testes da sintaxe de paths (`parse_path` / `PathSpec`).

Valida:
- campos simples, citados, índices e wildcard
- path raiz `()`
- render/parse como inversos
- erros tipados com coluna e motivo
"""

import pytest

from ion_hive_serde.core.exceptions import MalformedPathError
from ion_hive_serde.core.paths import PathSpec, PathStep, StepKind, parse_path


def test_parse_mixed_steps():
    path = parse_path("(items * 0 'field name' \"*\")")

    assert path.steps == (
        PathStep.field("items"),
        PathStep.wildcard(),
        PathStep.at(0),
        PathStep.field("field name"),
        PathStep.field("*"),
    )
    assert path.has_wildcard
    assert not path.is_field_only


def test_root_path_has_no_steps():
    root = parse_path("  ( )  ")

    assert root.steps == ()
    assert not root.is_field_only
    assert root.render() == "()"


def test_default_path_for_column():
    path = PathSpec.for_column("price")

    assert path == parse_path("(price)")
    assert path.is_field_only


def test_quoted_step_escapes():
    path = parse_path(r"('it\'s')")

    assert path.steps[0].name == "it's"


@pytest.mark.parametrize(
    "expression",
    ["(a b)", "(a * 1)", "('has space' x)", "('0' 'a-b')", "()"],
)
def test_render_parses_back_to_same_path(expression):
    path = parse_path(expression)

    assert parse_path(path.render()) == path


def test_split_at_last_wildcard():
    prefix, rest = parse_path("(a * b * c d)").split_at_last_wildcard()

    assert prefix == parse_path("(a * b *)")
    assert rest == parse_path("(c d)")
    assert parse_path("(a b)").last_wildcard() == -1


def test_structural_key_honours_case_rule():
    upper = parse_path("(Name)")
    lower = parse_path("(name)")

    assert upper.structural_key(False) == lower.structural_key(False)
    assert upper.structural_key(True) != lower.structural_key(True)


@pytest.mark.parametrize(
    "expression, reason",
    [
        ("", "empty expression"),
        ("a b", "must be enclosed in parentheses"),
        ("(a (b))", "nested or unbalanced parentheses"),
        ("('abc)", "unterminated quoted step"),
        ("(a -1)", "negative index -1"),
        ("(a.b)", "invalid step 'a.b'"),
    ],
)
def test_malformed_expressions(expression, reason):
    with pytest.raises(MalformedPathError) as exc:
        parse_path(expression, column="c")

    assert exc.value.details["column"] == "c"
    assert exc.value.details["reason"] == reason


def test_non_string_expression():
    with pytest.raises(MalformedPathError):
        parse_path(None)


def test_step_kinds():
    assert PathStep.at(3).kind is StepKind.INDEX
    assert PathStep.wildcard().render() == "*"
