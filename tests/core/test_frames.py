from __future__ import annotations
from types import SimpleNamespace as NS

import pandas as pd

from simplifier.core.copier import deep_copy
from simplifier.core.engine import simplify

RULES = {
    "remove_properties": ["password"],
    "property_rules": {"profile": {"remove_properties": ["ssn"]}},
}


def _frame() -> pd.DataFrame:
    return pd.DataFrame({
        "id": [1, 2],
        "password": ["a", "b"],
        "profile": [{"ssn": "1", "name": "x"}, None],
    })


def test_removed_names_drop_columns():
    out = simplify(RULES, _frame())
    assert list(out.columns) == ["id", "profile"]
    assert out["id"].tolist() == [1, 2]

def test_descend_applies_to_object_cells():
    out = simplify(RULES, _frame())
    assert out["profile"].iloc[0] == {"name": "x"}
    assert out["profile"].iloc[1] is None

def test_source_frame_is_untouched():
    df = _frame()
    simplify(RULES, df)
    assert list(df.columns) == ["id", "password", "profile"]
    assert df["profile"].iloc[0] == {"ssn": "1", "name": "x"}

def test_copied_cells_are_independent():
    df = _frame()
    out = deep_copy(df)
    assert out["profile"].iloc[0] == df["profile"].iloc[0]
    assert out["profile"].iloc[0] is not df["profile"].iloc[0]

def test_frame_inside_a_record():
    holder = NS(name="batch", rows=_frame())
    out = simplify({"property_rules": {"rows": RULES}}, holder)
    assert list(out.rows.columns) == ["id", "profile"]
    assert list(holder.rows.columns) == ["id", "password", "profile"]

def test_removed_frame_field_becomes_empty_frame():
    out = simplify({"remove_properties": ["rows"]}, NS(rows=_frame()))
    assert isinstance(out.rows, pd.DataFrame)
    assert out.rows.empty

def test_root_pass_through_reaches_cells():
    df = pd.DataFrame({"payload": [{"password": "p", "keep": 1}]})
    out = simplify({"remove_properties": ["password"]}, df, pass_through="root")
    assert out["payload"].iloc[0] == {"keep": 1}
    # without pass-through the cell has no rule of its own
    out = simplify({"remove_properties": ["password"]}, df)
    assert out["payload"].iloc[0] == {"password": "p", "keep": 1}
