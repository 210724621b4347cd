import json

import pytest

from fabric_ci.variable_library import (
    VARIABLES_SCHEMA_URL,
    build_variables,
    escape_json_value,
    filter_variables,
    make_variable,
    merge_stats,
    merge_variables,
    read_existing_variables,
    strip_prefix,
    write_variable_library,
)


def _var(name, value):
    return make_variable(name, value)


def test_make_variable_shape():
    assert make_variable("A", "1") == {"name": "A", "note": "", "type": "String", "value": "1"}


def test_filter_keeps_only_matching_environment_and_strips():
    fetched = [
        {"name": "vt_dev_FOO", "value": "a"},
        {"name": "vt_prod_FOO", "value": "b"},
        {"name": "OTHER", "value": "c"},
    ]
    assert filter_variables(fetched, "vt", "dev") == [{"name": "FOO", "value": "a"}]


def test_strip_prefix_removes_it_once():
    assert strip_prefix("vt_dev_vt_dev_X", "vt", "dev") == "vt_dev_X"
    assert strip_prefix("unrelated", "vt", "dev") == "unrelated"


def test_filter_is_case_sensitive_prefix_test():
    fetched = [{"name": "VT_DEV_FOO", "value": "a"}, {"name": "xvt_dev_FOO", "value": "b"}]
    assert filter_variables(fetched, "vt", "dev") == []


@pytest.mark.parametrize("value", [
    'plain',
    'back\\slash',
    'say "hi"',
    'line1\nline2',
    '\\"\n mixed \\\\ "quoted" \n',
])
def test_escape_json_value_parses_back_to_original(value):
    assert json.loads('"' + escape_json_value(value) + '"') == value


def test_escape_json_value_escapes_backslashes_before_quotes():
    assert escape_json_value('a"b') == 'a\\"b'
    assert escape_json_value('a\\"b') == 'a\\\\\\"b'
    assert escape_json_value('a\nb') == 'a\\nb'


def test_build_variables_escapes_only_on_request(capsys):
    filtered = [{"name": "X", "value": 'C:\\dir "q"'}]

    assert build_variables(filtered)[0]["value"] == 'C:\\dir "q"'
    assert build_variables(filtered, escape_values=True)[0]["value"] == 'C:\\\\dir \\"q\\"'
    assert "Processing: X" in capsys.readouterr().out


def test_merge_scenario_update_and_add():
    existing = [_var("A", "1")]
    fetched = [_var("A", "2"), _var("B", "3")]

    merged = merge_variables(existing, fetched)

    assert merged == [_var("A", "2"), _var("B", "3")]
    assert merge_stats(existing, fetched, merged) == {"total": 2, "added": 1, "updated": 1, "unchanged": 0}


def test_merge_keeps_unfetched_entries_in_place():
    extra = {"name": "KEEP", "note": "manual", "type": "String", "value": "x", "extra": True}
    existing = [_var("A", "1"), extra, _var("C", "3")]
    fetched = [_var("NEW", "n"), _var("C", "30")]

    merged = merge_variables(existing, fetched)

    assert [v["name"] for v in merged] == ["A", "KEEP", "C", "NEW"]
    assert merged[1] is extra
    assert merged[2]["value"] == "30"


def test_merge_appends_new_entries_in_fetch_order():
    merged = merge_variables([_var("A", "1")], [_var("Z", "z"), _var("B", "b"), _var("M", "m")])
    assert [v["name"] for v in merged] == ["A", "Z", "B", "M"]


def test_merge_with_empty_sides():
    entries = [_var("A", "1"), _var("B", "2")]
    assert merge_variables([], entries) == entries
    assert merge_variables(entries, []) == entries


def test_merge_is_idempotent():
    existing = [_var("A", "1"), _var("B", "2")]
    fetched = [_var("B", "20"), _var("C", "3")]

    once = merge_variables(existing, fetched)
    assert merge_variables(once, fetched) == once


def test_merge_contains_every_name_once():
    existing = [_var("A", "1"), _var("B", "2")]
    fetched = [_var("B", "20"), _var("C", "3"), _var("A", "10")]

    names = [v["name"] for v in merge_variables(existing, fetched)]
    assert sorted(names) == ["A", "B", "C"]


def test_merge_duplicate_fetched_names_last_wins_first_position():
    fetched = [_var("A", "first"), _var("B", "b"), _var("A", "last")]

    merged = merge_variables([], fetched)

    assert merged == [_var("A", "last"), _var("B", "b")]


def test_merge_leaves_existing_duplicates_alone():
    existing = [_var("A", "1"), _var("A", "2")]
    assert merge_variables(existing, []) == existing


def test_merge_stats_never_negative():
    existing = [_var("A", "1")]
    fetched = [_var("A", "2"), _var("A", "3")]
    merged = merge_variables(existing, fetched)

    assert merged == [_var("A", "3")]
    assert merge_stats(existing, fetched, merged) == {"total": 1, "added": 0, "updated": 2, "unchanged": 0}


def test_write_then_read_library(tmp_path, capsys):
    target = tmp_path / "nested" / "dir" / "variables.json"
    variables = [_var("A", "ünï \"q\"")]

    write_variable_library(target, variables)

    document = json.loads(target.read_text(encoding="utf-8"))
    assert document == {"$schema": VARIABLES_SCHEMA_URL, "variables": variables}
    assert target.read_text(encoding="utf-8").endswith("\n")
    assert read_existing_variables(target) == variables
    assert "Creating directory" in capsys.readouterr().out


def test_read_existing_variables_missing_or_invalid(tmp_path):
    assert read_existing_variables(tmp_path / "absent.json") == []

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert read_existing_variables(broken) == []

    no_key = tmp_path / "no_key.json"
    no_key.write_text('{"$schema": "x"}', encoding="utf-8")
    assert read_existing_variables(no_key) == []


@pytest.mark.parametrize("document", [
    ["A"],
    {"variables": {"A": "1"}},
    {"variables": ["A"]},
    {"variables": [{"value": "no-name"}]},
    {"variables": [{"name": 7, "value": "x"}]},
    {"variables": [{"name": "A", "value": "1"}, None]},
])
def test_read_existing_variables_rejects_malformed_library(tmp_path, capsys, document):
    target = tmp_path / "variables.json"
    target.write_text(json.dumps(document), encoding="utf-8")

    assert read_existing_variables(target) == []
    assert "⚠" in capsys.readouterr().out
