"""
Per-type record descriptors.

Only *visible* fields are ever copied or redacted:
  - dataclasses: declared fields whose name has no leading underscore
  - pydantic models: `model_fields`
  - plain objects: public `__slots__` plus public `__dict__` entries

Everything else (private attributes, properties, pydantic private attrs) is
outside the copy/redaction boundary.
"""
from __future__ import annotations
from dataclasses import dataclass, fields as dc_fields, is_dataclass, MISSING
from enum import Enum
from typing import Annotated, Any, Callable, Literal, Union, get_args, get_origin, get_type_hints
from collections import deque
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from fractions import Fraction
from pathlib import PurePath
from uuid import UUID
import collections.abc as cabc
import io
import types

import numpy as np
import pandas as pd
from pydantic import BaseModel

from ..utils.fp import memoize

RecordKind = Literal["dataclass", "pydantic", "object"]
Shape = Literal["null", "scalar", "leaf", "record", "map", "sequence", "frame", "opaque"]

_NONE_TYPE = type(None)

# builtin types whose no-arg constructor is their zero value
_ZERO_CONSTRUCTIBLE: tuple[type, ...] = (
    str, bytes, bytearray, bool, int, float, complex,
    list, dict, tuple, set, frozenset,
)

# generic aliases (List[int], dict[str, X], ...) map to their runtime origin
_ORIGIN_ZERO: dict[Any, Callable[[], Any]] = {
    list: list, cabc.MutableSequence: list, cabc.Sequence: list,
    dict: dict, cabc.MutableMapping: dict, cabc.Mapping: dict,
    tuple: tuple, set: set, cabc.MutableSet: set, cabc.Set: set,
    frozenset: frozenset,
}


@dataclass(frozen=True)
class FieldSpec:
    name: str
    annotation: Any = None

    def zero(self, current: Any) -> Any:
        return zero_value(self.annotation, current)


@dataclass(frozen=True)
class RecordSchema:
    cls: type
    kind: RecordKind
    fields: tuple[FieldSpec, ...]

    def field_names(self, obj: Any) -> list[str]:
        if self.kind == "pydantic":
            return [f.name for f in self.fields]
        # public attributes set outside the declared fields (__init__, __post_init__)
        names = [f.name for f in self.fields]
        seen = set(names)
        for k in getattr(obj, "__dict__", {}):
            if k not in seen and _is_public(k):
                names.append(k)
        return names

    def spec(self, name: str) -> FieldSpec:
        for f in self.fields:
            if f.name == name:
                return f
        return FieldSpec(name, _class_hints(self.cls).get(name))


def _is_public(name: str) -> bool:
    return not name.startswith("_")


def _class_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls)
    except Exception:
        # unresolved forward refs: fall back to the raw annotations
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}) or {})
        return hints


def _slot_names(cls: type) -> list[str]:
    out: list[str] = []
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for s in slots:
            if s not in ("__dict__", "__weakref__") and _is_public(s) and s not in out:
                out.append(s)
    return out


def is_pydantic_model(obj: Any) -> bool:
    return isinstance(obj, BaseModel)


def is_dataclass_instance(obj: Any) -> bool:
    return is_dataclass(obj) and not isinstance(obj, type)


@memoize(maxsize=256)
def record_schema(cls: type) -> RecordSchema:
    """Build (once per class) the visible-field descriptor list for a record type."""
    hints = _class_hints(cls)
    if issubclass(cls, BaseModel):
        specs = tuple(
            FieldSpec(name, info.annotation)
            for name, info in cls.model_fields.items()
        )
        return RecordSchema(cls, "pydantic", specs)
    if is_dataclass(cls):
        specs = tuple(
            FieldSpec(f.name, hints.get(f.name, f.type))
            for f in dc_fields(cls)
            if _is_public(f.name)
        )
        return RecordSchema(cls, "dataclass", specs)
    specs = tuple(FieldSpec(s, hints.get(s)) for s in _slot_names(cls))
    return RecordSchema(cls, "object", specs)


def zero_value(annotation: Any, current: Any = None) -> Any:
    """
    The empty value a cleared field is reset to: from the annotation when there
    is one (Optional/unions with None -> None), else from the current value's type.
    """
    z = _zero_from_annotation(annotation)
    if z is not MISSING:
        return z
    return _zero_from_value(current)


def _zero_from_annotation(ann: Any) -> Any:
    if ann is None or ann is Any or isinstance(ann, str):
        return MISSING
    origin = get_origin(ann)
    if origin is Union or origin is types.UnionType:
        args = get_args(ann)
        if _NONE_TYPE in args:
            return None
        # first member that has a zero wins, e.g. int | str -> 0
        for a in args:
            z = _zero_from_annotation(a)
            if z is not MISSING:
                return z
        return MISSING
    if origin is Literal:
        return MISSING
    if origin is Annotated:
        return _zero_from_annotation(get_args(ann)[0])
    if origin is not None:
        make = _ORIGIN_ZERO.get(origin)
        return make() if make else MISSING
    if ann is _NONE_TYPE:
        return None
    if isinstance(ann, type):
        if issubclass(ann, Enum):
            return MISSING
        for base in _ZERO_CONSTRUCTIBLE:
            if ann is base:
                return base()
        make = _ORIGIN_ZERO.get(ann)
        if make:
            return make()
        # nested records and other classes have no natural empty value
        return None
    return MISSING


def _zero_from_value(current: Any) -> Any:
    if current is None:
        return None
    t = type(current)
    if isinstance(current, Enum):
        return None
    # exact match only: subclasses may need constructor arguments
    for base in _ZERO_CONSTRUCTIBLE:
        if t is base:
            return base()
    if isinstance(current, np.ndarray):
        return np.array([], dtype=current.dtype)
    if isinstance(current, np.generic):
        return current.dtype.type(0) if current.dtype.kind in "biufc" else None
    if isinstance(current, pd.DataFrame):
        return pd.DataFrame()
    if isinstance(current, pd.Series):
        return pd.Series(dtype=current.dtype)
    return None


# immutable leaves: shared between source and clone
_SCALARS: tuple[type, ...] = (
    str, bytes, int, float, complex, bool, Enum, Decimal, Fraction,
    date, time, datetime, timedelta, UUID, PurePath, range, frozenset, np.generic,
)

# mutable leaves: copied wholesale, never traversed
_LEAVES: tuple[type, ...] = (bytearray, set, np.ndarray, pd.Series)

_OPAQUE: tuple[type, ...] = (
    type, types.ModuleType, types.FunctionType, types.BuiltinFunctionType,
    types.MethodType, types.GeneratorType, types.CoroutineType, io.IOBase,
)


def shape_of(value: Any) -> Shape:
    """Structural kind used by both the copier and the traversal."""
    if value is None:
        return "null"
    if isinstance(value, _SCALARS):
        return "scalar"
    if isinstance(value, _LEAVES):
        return "leaf"
    if isinstance(value, pd.DataFrame):
        return "frame"
    if isinstance(value, cabc.MutableMapping):
        return "map"
    if isinstance(value, (list, tuple, deque)):
        return "sequence"
    if is_pydantic_model(value) or is_dataclass_instance(value):
        return "record"
    if isinstance(value, _OPAQUE):
        return "opaque"
    if hasattr(value, "__dict__") or _slot_names(type(value)):
        return "record"
    return "opaque"
