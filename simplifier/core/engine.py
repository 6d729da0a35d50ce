from __future__ import annotations
from collections import deque
from typing import Any, Literal

import pandas as pd

from .copier import deep_copy
from .schema import record_schema, shape_of
from ..config_model.model import SimplifierCfg
from ..rules.compiler import Action, Ruler, compile_rules
from ..rules.merge import merge_rules
from ..rules.model import RuleDoc
from ..utils.log import get_logger

PassThrough = Literal["none", "root"]


class SimplifyError(RuntimeError):
    """The value could not be copied or walked (e.g. nesting beyond the recursion limit)."""


# ---- traversal ----

def _key_name(key: Any) -> str:
    return key if isinstance(key, str) else str(key)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, deque))


def _descend(action: Action, value: Any, root: Ruler | None) -> None:
    # a declared scope over a sequence applies to each element, not to the sequence
    if _is_sequence(value):
        for item in value:
            if item is not None:
                _apply(action.child, item, root)
    else:
        _apply(action.child, value, root)


def _pass_through(value: Any, root: Ruler | None) -> None:
    if root is not None:
        # root scope re-applied once; no further pass-through below it
        _apply(root, value, None)


def _apply_record(ruler: Ruler, obj: Any, root: Ruler | None) -> None:
    schema = record_schema(type(obj))
    for name in schema.field_names(obj):
        try:
            current = getattr(obj, name)
        except AttributeError:
            continue
        action = ruler.get(name)
        if action is None:
            _pass_through(current, root)
        elif action.is_remove:
            object.__setattr__(obj, name, schema.spec(name).zero(current))
        else:
            _descend(action, current, root)


def _apply_map(ruler: Ruler, m: Any, root: Ruler | None) -> None:
    # snapshot the keys: entries are deleted while walking
    for key in list(m.keys()):
        action = ruler.get(_key_name(key))
        if action is None:
            _pass_through(m[key], root)
        elif action.is_remove:
            del m[key]
        else:
            _descend(action, m[key], root)


def _apply_frame(ruler: Ruler, df: pd.DataFrame, root: Ruler | None) -> None:
    dropped: list[Any] = []
    # by position: column labels may repeat
    for i, col in enumerate(df.columns):
        action = ruler.get(_key_name(col))
        if action is None and root is None:
            continue
        if action is not None and action.is_remove:
            if col not in dropped:
                dropped.append(col)
            continue
        # object cells are independent clones; mutate them where they sit
        for cell in df.iloc[:, i].tolist():
            if action is None:
                _pass_through(cell, root)
            elif cell is not None:
                _apply(action.child, cell, root)
    if dropped:
        df.drop(columns=dropped, inplace=True)


def _apply(ruler: Ruler, value: Any, root: Ruler | None) -> None:
    shape = shape_of(value)
    if shape == "record":
        _apply_record(ruler, value, root)
    elif shape == "map":
        _apply_map(ruler, value, root)
    elif shape == "frame":
        _apply_frame(ruler, value, root)
    # sequences, scalars, leaves and opaque values outside a named field are inert


def apply_ruler(ruler: Ruler, value: Any, *, pass_through: PassThrough = "none") -> None:
    """
    Redact `value` in place according to `ruler`. `value` must already be a
    private clone (see deep_copy): fields are reset to their zero value,
    map entries and DataFrame columns are deleted.

    pass_through="root" re-applies the root scope once to every field/key
    that has no rule of its own.
    """
    if pass_through not in ("none", "root"):
        raise ValueError(f"pass_through must be 'none' or 'root', got {pass_through!r}")
    _apply(ruler, value, ruler if pass_through == "root" else None)


def simplify(ruler: Any, value: Any, *, pass_through: PassThrough = "none") -> Any:
    """Deep-copy `value` and redact the copy; the caller's value is never modified."""
    ruler = compile_rules(ruler)
    try:
        clone = deep_copy(value)
        apply_ruler(ruler, clone, pass_through=pass_through)
    except RecursionError as e:
        raise SimplifyError(f"value nested too deeply (or cyclic): {type(value).__name__}") from e
    return clone


# ---- facade ----

class Simplifier:
    """
    Compiled rule set plus settings. Compile once, call many times:

        s = Simplifier({"remove_properties": ["password"]})
        safe = s.simplify(user)
    """

    def __init__(self, rules: Any = None, settings: Any = None) -> None:
        self.settings = settings if settings is not None else SimplifierCfg()
        self.log = get_logger(
            "simplifier",
            self.settings.logging.level,
            self.settings.logging.structured_json,
        )
        self.ruler = compile_rules(rules if rules is not None else RuleDoc())

    @property
    def rule(self) -> RuleDoc:
        return self.ruler.rule

    @property
    def pass_through(self) -> PassThrough:
        return self.settings.traversal.pass_through

    def simplify(self, value: Any) -> Any:
        return simplify(self.ruler, value, pass_through=self.pass_through)

    __call__ = simplify

    def extend(self, rules: Any) -> "Simplifier":
        """New Simplifier with `rules` merged over this one's; this one is unchanged."""
        return Simplifier(merge_rules(self.ruler, rules), settings=self.settings)

    def __repr__(self) -> str:
        return f"Simplifier(names={sorted(self.ruler)!r}, pass_through={self.pass_through!r})"


def new_simplifier(rules_json: str | bytes, settings: Any = None) -> Simplifier:
    return Simplifier(rules_json, settings=settings)


def extend_simplifier(base: Simplifier, rules_json: str | bytes) -> Simplifier:
    if not isinstance(base, Simplifier):
        raise TypeError(f"base must be a Simplifier, got {type(base).__name__}")
    return base.extend(rules_json)
