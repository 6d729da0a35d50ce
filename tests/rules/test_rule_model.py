from __future__ import annotations
import pytest

from simplifier.rules.model import RuleDoc, ParseError, parse_rules
from simplifier.rules.compiler import compile_rules


def test_parse_two_field_document():
    rule = parse_rules({
        "remove_properties": ["Test", "Debug"],
        "property_simplifiers": {
            "Data": {"remove_properties": ["DataTest", "DataDebug"]},
        },
    })
    assert rule.remove_properties == ["Test", "Debug"]
    assert isinstance(rule.property_simplifiers["Data"], RuleDoc)
    assert rule.property_simplifiers["Data"].remove_properties == ["DataTest", "DataDebug"]

def test_property_rules_alias_at_every_level():
    rule = parse_rules({
        "property_rules": {
            "a": {"property_rules": {"b": {"remove_properties": ["c"]}}},
        },
    })
    assert rule.property_simplifiers["a"].property_simplifiers["b"].remove_properties == ["c"]

def test_empty_and_null_fields_mean_nothing_to_do():
    assert parse_rules({}).is_empty()
    rule = parse_rules({"remove_properties": None, "property_simplifiers": None})
    assert rule.remove_properties == []
    assert rule.property_simplifiers == {}

def test_json_text_and_bytes():
    assert parse_rules('{"remove_properties": ["x"]}').remove_properties == ["x"]
    assert parse_rules(b'{"remove_properties": ["y"]}').remove_properties == ["y"]

def test_duplicates_and_empty_names_are_accepted():
    rule = parse_rules({"remove_properties": ["", "a", "a"]})
    assert rule.remove_properties == ["", "a", "a"]

@pytest.mark.parametrize("doc", [
    "{ This is an invalid JSON string }",
    "[1, 2, 3]",
    42,
    {"remove_properties": "Test"},
    {"remove_properties": [1, 2]},
    {"property_simplifiers": ["Data"]},
])
def test_malformed_documents_raise_parse_error(doc):
    with pytest.raises(ParseError):
        parse_rules(doc)

def test_unrecognized_keys_are_ignored():
    rule = parse_rules({
        "comment": "strip credentials before export",
        "remove_properties": ["a"],
        "property_rules": {"b": {"remove_properties": ["c"], "owner": "security"}},
    })
    assert rule.remove_properties == ["a"]
    assert rule.property_simplifiers["b"].remove_properties == ["c"]
    assert "comment" not in rule.to_dict()
    assert compile_rules({"remove_properties": ["a"], "comment": "x"}).get("a") is not None

def test_parse_error_is_a_value_error():
    with pytest.raises(ValueError):
        parse_rules("not json")

def test_compiled_ruler_gives_back_its_document():
    rule = parse_rules({"remove_properties": ["a"]})
    assert parse_rules(compile_rules(rule)) is rule

def test_rule_doc_is_frozen_and_round_trips_to_dict():
    rule = parse_rules({"remove_properties": ["a"], "property_rules": {"b": {}}})
    with pytest.raises(Exception):
        rule.remove_properties = ["z"]
    assert rule.to_dict() == {
        "remove_properties": ["a"],
        "property_simplifiers": {"b": {"remove_properties": [], "property_simplifiers": {}}},
    }
