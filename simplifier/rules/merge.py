from __future__ import annotations
from typing import Any

from .model import RuleDoc, parse_rules
from ..utils.fp import fold, merge_with, unique_stable


def _merge(base: RuleDoc, ext: RuleDoc) -> RuleDoc:
    children = merge_with(
        lambda rules: fold(_merge, rules[1:], rules[0]),
        base.property_simplifiers,
        ext.property_simplifiers,
    )
    return RuleDoc(
        remove_properties=unique_stable([*base.remove_properties, *ext.remove_properties]),
        property_simplifiers=children,
    )


def merge_rules(base: Any, extension: Any) -> RuleDoc:
    """
    Merge two rule documents (raw or compiled) without touching either:
      - remove_properties: union, first-seen order, no duplicates
      - property_simplifiers: names on one side copy through, names on both merge recursively
    The result can be compiled again.
    """
    return _merge(parse_rules(base), parse_rules(extension))


def merge_many(*rules: Any) -> RuleDoc:
    """Left fold of merge_rules; no arguments gives the empty document."""
    docs = [parse_rules(r) for r in rules]
    return fold(_merge, docs, RuleDoc())
