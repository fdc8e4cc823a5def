"""Unit tests for TemplateParser and compile_template."""

from __future__ import annotations

import re

import pytest

from fragql.compile.parser import TemplateParser, compile_template
from fragql.errors import TemplateSyntaxError, UnknownTypeError
from fragql.schema.fragments import (
    LiteralFragment,
    ReflectionFragment,
    SubstitutionFragment,
)
from fragql.schema.sql_types import SqlType, TypeMappings


def _parse(template: str, types: dict[str, str] | None = None):
    return TemplateParser().parse(template, types)


def _render_markers(template) -> str:
    return "".join(
        f.text if isinstance(f, LiteralFragment) else "?" for f in template.fragments
    )


# ---------------------------------------------------------------------------
# Fragment sequences
# ---------------------------------------------------------------------------


def test_single_placeholder():
    t = _parse("SELECT * FROM {tableName}")
    assert t.fragments == (
        LiteralFragment("SELECT * FROM "),
        ReflectionFragment(path=("tableName",)),
    )
    assert t.param_count == 1


def test_dotted_placeholder_splits_into_qualifiers():
    t = _parse("{addr.city}")
    assert t.fragments == (ReflectionFragment(path=("addr", "city")),)
    assert t.fragments[0].parameter_name == "addr"
    assert t.fragments[0].expression == "addr.city"


def test_whitespace_inside_braces_is_ignored():
    t = _parse("WHERE id = { emp.emp_id }")
    assert t.reflection_fragments[0].path == ("emp", "emp_id")


def test_unicode_identifiers_are_accepted():
    t = _parse("SELECT * FROM emp WHERE city = {città.nome}")
    assert t.reflection_fragments[0].path == ("città", "nome")


def test_no_placeholders_yields_one_literal():
    t = _parse("SELECT 1")
    assert t.fragments == (LiteralFragment("SELECT 1"),)
    assert t.param_count == 0


def test_empty_template_yields_no_fragments():
    assert _parse("").fragments == ()


def test_adjacent_placeholders_do_not_produce_empty_literals():
    t = _parse("{a}{b}")
    assert t.fragments == (
        ReflectionFragment(path=("a",)),
        ReflectionFragment(path=("b",)),
    )


def test_fragment_order_matches_template_order():
    t = _parse("UPDATE emp SET name = {name}, city = {addr.city} WHERE id = {id}")
    assert [f.expression for f in t.reflection_fragments] == ["name", "addr.city", "id"]
    assert t.parameter_names == ["name", "addr", "id"]


def test_parameter_names_are_distinct():
    t = _parse("SELECT {a.x}, {a.y}, {b}")
    assert t.parameter_names == ["a", "b"]


@pytest.mark.parametrize(
    "template",
    [
        "SELECT * FROM {tableName}",
        "{a}",
        "SELECT {a}, {b.c} FROM t WHERE x = {d.e.f} AND y IS NULL",
        "INSERT INTO t VALUES ({a}, {b}, {c})",
    ],
)
def test_markers_reconstruct_placeholder_positions(template: str):
    t = _parse(template)
    assert _render_markers(t) == re.sub(r"\{[^{}]*\}", "?", template)


# ---------------------------------------------------------------------------
# Substitution and escape sequences
# ---------------------------------------------------------------------------


def test_sql_prefix_produces_substitution_fragment():
    t = _parse("SELECT * FROM emp ORDER BY {sql: sort.column}")
    assert t.fragments[-1] == SubstitutionFragment(path=("sort", "column"))
    assert t.param_count == 0
    assert t.parameter_names == ["sort"]


def test_sql_prefix_is_case_insensitive():
    t = _parse("ORDER BY {SQL:col}")
    assert isinstance(t.fragments[-1], SubstitutionFragment)


def test_function_escape_is_kept_verbatim():
    t = _parse("SELECT {fn UCASE(name)} FROM emp WHERE id = {id}")
    assert t.fragments == (
        LiteralFragment("SELECT {fn UCASE(name)} FROM emp WHERE id = "),
        ReflectionFragment(path=("id",)),
    )


def test_date_escape_is_kept_verbatim():
    t = _parse("SELECT * FROM emp WHERE hired > {d '2004-01-01'}")
    assert t.fragments == (LiteralFragment("SELECT * FROM emp WHERE hired > {d '2004-01-01'}"),)


def test_placeholders_inside_call_escape_are_compiled():
    t = _parse("{call update_emp({emp.emp_id}, {emp.first_name})}")
    assert t.fragments == (
        LiteralFragment("{call update_emp("),
        ReflectionFragment(path=("emp", "emp_id")),
        LiteralFragment(", "),
        ReflectionFragment(path=("emp", "first_name")),
        LiteralFragment(")}"),
    )


def test_return_value_call_escape():
    t = _parse("{?= call next_id({seq})}")
    assert _render_markers(t) == "{?= call next_id(?)}"


def test_escape_keyword_alone_is_a_parameter_name():
    t = _parse("SELECT {d}, {call}")
    assert [f.expression for f in t.reflection_fragments] == ["d", "call"]


# ---------------------------------------------------------------------------
# Syntax errors
# ---------------------------------------------------------------------------


def test_unclosed_brace_raises():
    with pytest.raises(TemplateSyntaxError) as exc_info:
        _parse("SELECT * FROM {table")
    assert exc_info.value.position == 14
    assert exc_info.value.template == "SELECT * FROM {table"


def test_unmatched_closing_brace_raises():
    with pytest.raises(TemplateSyntaxError) as exc_info:
        _parse("SELECT } FROM t")
    assert exc_info.value.position == 7


def test_nested_brace_raises():
    with pytest.raises(TemplateSyntaxError, match="Nested"):
        _parse("SELECT {a{b}}")


def test_unclosed_escape_raises():
    with pytest.raises(TemplateSyntaxError, match="escape"):
        _parse("{call proc({id})")


@pytest.mark.parametrize("template", ["SELECT {}", "SELECT {   }"])
def test_empty_placeholder_raises(template: str):
    with pytest.raises(TemplateSyntaxError, match="Empty"):
        _parse(template)


@pytest.mark.parametrize(
    "template",
    ["{a..b}", "{1abc}", "{a.}", "{.a}", "{a-b}", "{sql:}", "{a b}"],
)
def test_malformed_path_raises(template: str):
    with pytest.raises(TemplateSyntaxError):
        _parse(template)


# ---------------------------------------------------------------------------
# Declared types
# ---------------------------------------------------------------------------


def test_declared_type_attaches_to_matching_fragment():
    t = _parse("SELECT * FROM emp WHERE id = {emp.emp_id} AND city = {city}", {"emp.emp_id": "integer"})
    by_expr = {f.expression: f.sql_type for f in t.reflection_fragments}
    assert by_expr == {"emp.emp_id": SqlType.INTEGER, "city": SqlType.UNKNOWN}


def test_declared_type_applies_to_every_occurrence():
    t = _parse("{a} = {a}", {"a": "VARCHAR(20)"})
    assert [f.sql_type for f in t.reflection_fragments] == [SqlType.VARCHAR, SqlType.VARCHAR]


def test_declared_type_for_absent_placeholder_is_ignored():
    t = _parse("{a}", {"b": "INTEGER"})
    assert t.reflection_fragments[0].sql_type is SqlType.UNKNOWN


def test_unknown_declared_type_raises():
    with pytest.raises(UnknownTypeError) as exc_info:
        _parse("{a}", {"a": "NOT_A_TYPE"})
    assert exc_info.value.type_name == "NOT_A_TYPE"


def test_custom_type_mappings_are_used():
    mappings = TypeMappings({"MONEY": SqlType.DECIMAL})
    t = TemplateParser(mappings).parse("{amount}", {"amount": "money"})
    assert t.reflection_fragments[0].sql_type is SqlType.DECIMAL


# ---------------------------------------------------------------------------
# compile_template
# ---------------------------------------------------------------------------


def test_compile_template_is_idempotent(cache):
    first = compile_template("SELECT * FROM {t}", cache=cache)
    second = compile_template("SELECT * FROM {t}", cache=cache)
    assert first is second
    assert first == TemplateParser().parse("SELECT * FROM {t}")


def test_compile_template_keys_on_declared_types(cache):
    plain = compile_template("{a}", cache=cache)
    typed = compile_template("{a}", {"a": "INTEGER"}, cache=cache)
    assert plain is not typed
    assert typed.reflection_fragments[0].sql_type is SqlType.INTEGER


def test_compile_template_keys_on_type_mappings(cache):
    custom = TemplateParser(TypeMappings({"INT": SqlType.BIGINT}))
    default = compile_template("{a}", {"a": "INT"}, cache=cache)
    widened = compile_template("{a}", {"a": "INT"}, cache=cache, parser=custom)
    assert default.reflection_fragments[0].sql_type is SqlType.INTEGER
    assert widened.reflection_fragments[0].sql_type is SqlType.BIGINT
    assert compile_template("{a}", {"a": "INT"}, cache=cache, parser=custom) is widened
    assert len(cache) == 2


def test_failed_compilation_is_not_cached(cache):
    with pytest.raises(TemplateSyntaxError):
        compile_template("{broken", cache=cache)
    assert len(cache) == 0


def test_str_round_trips_template_text():
    source = "SELECT {fn UCASE(name)} FROM emp WHERE id = {emp.emp_id} ORDER BY {sql: col}"
    assert str(_parse(source)) == source
