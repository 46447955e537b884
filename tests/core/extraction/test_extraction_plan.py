# tests/core/extraction/test_extraction_plan.py
"""
Testes do plano de extração (documento → linhas).

Valida:
- uma linha por documento sem wildcards
- zero ocorrências → uma linha com nulls
- N ocorrências de wildcard → N linhas
- colunas correlacionadas sob o mesmo prefixo
- eixos independentes → produto cartesiano
- aliasing lendo o mesmo valor
- contagem de ocorrências por coluna
"""

from ion_hive_serde.core.extraction import build_extraction_plan
from ion_hive_serde.core.paths import parse_path


def _plan(columns, case_sensitive=False):
    names = [name for name, _ in columns]
    paths = [parse_path(expr) for _, expr in columns]
    return build_extraction_plan(names, paths, case_sensitive=case_sensitive)


def test_plain_fields_produce_one_row():
    plan = _plan([("a", "(a)"), ("b", "(nested b)")])

    outcome = plan.evaluate({"a": 1, "nested": {"b": "x"}})

    assert outcome.rows == ((1, "x"),)
    assert outcome.match_counts == (1, 1)
    assert len(outcome) == 1


def test_missing_paths_produce_one_null_row():
    plan = _plan([("a", "(a)"), ("items", "(items * sku)")])

    outcome = plan.evaluate({})

    assert outcome.rows == ((None, None),)
    assert outcome.match_counts == (0, 0)


def test_wildcard_produces_one_row_per_match():
    plan = _plan([("order", "(id)"), ("sku", "(items * sku)")])

    outcome = plan.evaluate({"id": 9, "items": [{"sku": "a"}, {"sku": "b"}, {"sku": "c"}]})

    assert outcome.rows == ((9, "a"), (9, "b"), (9, "c"))
    assert outcome.match_counts == (1, 3)


def test_columns_under_same_wildcard_are_correlated():
    plan = _plan([("sku", "(items * sku)"), ("qty", "(items * qty)")])

    outcome = plan.evaluate({"items": [{"sku": "a", "qty": 1}, {"sku": "b"}]})

    assert outcome.rows == (("a", 1), ("b", None))


def test_independent_wildcards_form_a_cartesian_product():
    plan = _plan([("x", "(xs *)"), ("y", "(ys *)")])

    outcome = plan.evaluate({"xs": [1, 2], "ys": ["p", "q"]})

    assert outcome.rows == ((1, "p"), (1, "q"), (2, "p"), (2, "q"))


def test_empty_wildcard_axis_does_not_drop_other_columns():
    plan = _plan([("id", "(id)"), ("tag", "(tags *)")])

    outcome = plan.evaluate({"id": 1, "tags": []})

    assert outcome.rows == ((1, None),)


def test_aliased_columns_read_the_same_value():
    plan = _plan([("a", "(v)"), ("b", "(v)")])

    outcome = plan.evaluate({"v": 42})

    assert outcome.rows == ((42, 42),)
    assert outcome.match_counts == (1, 1)


def test_root_path_binds_whole_document():
    plan = _plan([("doc", "()")])
    document = {"k": 1}

    assert plan.evaluate(document).rows == ((document,),)


def test_case_rule_is_applied():
    doc = {"Name": "ann"}

    assert _plan([("name", "(name)")]).evaluate(doc).rows == (("ann",),)
    assert _plan([("name", "(name)")], case_sensitive=True).evaluate(doc).rows == ((None,),)


def test_plan_is_reusable_across_documents():
    plan = _plan([("sku", "(items * sku)")])

    first = plan.evaluate({"items": [{"sku": "a"}]})
    second = plan.evaluate({"items": [{"sku": "b"}, {"sku": "c"}]})

    assert first.rows == (("a",),)
    assert second.rows == (("b",), ("c",))
    assert plan.column_count == 1
    assert plan.path_for(0) == parse_path("(items * sku)")
