from __future__ import annotations
from collections import deque
from dataclasses import fields as dc_fields, MISSING
from typing import Any
import copy as _copy

import numpy as np
import pandas as pd

from .schema import record_schema, shape_of
from ..utils.log import child_logger

log = child_logger("copy")


class CopyError(TypeError):
    """The value exposes no structure the copier can rebuild."""


def deep_copy(value: Any) -> Any:
    """
    Structural clone of `value`: records, maps and sequences are rebuilt
    all the way down so the clone can be mutated without touching the source.

    Values without introspectable structure are returned as is; they are never
    matched as records/maps during redaction, so sharing them is harmless.
    """
    try:
        return _clone(value)
    except CopyError as e:
        log.debug("passing value through uncopied", extra={"type": type(value).__name__, "reason": str(e)})
        return value


def _clone(value: Any) -> Any:
    shape = shape_of(value)
    if shape in ("null", "scalar"):
        return value
    if shape == "leaf":
        return _copy_leaf(value)
    if shape == "map":
        return _copy_map(value)
    if shape == "sequence":
        return _copy_sequence(value)
    if shape == "frame":
        return _copy_frame(value)
    if shape == "record":
        return _copy_record(value)
    raise CopyError(f"{type(value).__name__} has no visible structure")


def _copy_leaf(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.copy()
    if isinstance(value, pd.Series):
        return value.copy(deep=True)
    # bytearray / set: shallow is enough, members are immutable or hashable
    return type(value)(value)


def _copy_map(m: Any) -> Any:
    if type(m) is dict:
        return {k: deep_copy(v) for k, v in m.items()}
    try:
        if isinstance(m, dict):
            # dict subclasses: keep the type (defaultdict factory, ordering...); storage is always new
            out = _copy.copy(m)
        else:
            # other mappings may keep entries in an attribute that a shallow copy would share
            out = type(m)()
    except Exception as e:
        raise CopyError(f"cannot allocate {type(m).__name__}: {e}") from e
    for k, v in m.items():
        out[k] = deep_copy(v)
    return out


def _copy_sequence(seq: Any) -> Any:
    items = [deep_copy(v) for v in seq]
    t = type(seq)
    if t is list:
        return items
    if t is tuple:
        return tuple(items)
    if isinstance(seq, tuple):
        # namedtuples rebuild from fields
        if hasattr(t, "_make"):
            return t._make(items)
        try:
            return t(items)
        except Exception as e:
            raise CopyError(f"cannot rebuild {t.__name__}: {e}") from e
    if isinstance(seq, deque):
        return deque(items, maxlen=seq.maxlen)
    try:
        out = _copy.copy(seq)
        out[:] = items
    except Exception as e:
        raise CopyError(f"cannot rebuild {t.__name__}: {e}") from e
    return out


def _copy_frame(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy(deep=True)
    # pandas copies object cells by reference; clone them so later redaction stays local
    for i, dtype in enumerate(out.dtypes):
        if dtype == object:
            out.isetitem(i, out.iloc[:, i].map(deep_copy))
    return out


def _copy_record(src: Any) -> Any:
    cls = type(src)
    schema = record_schema(cls)

    if schema.kind == "pydantic":
        values = {name: deep_copy(getattr(src, name)) for name in schema.field_names(src)}
        # model_construct skips validation and resets private attributes to their defaults
        return cls.model_construct(_fields_set=set(src.model_fields_set), **values)

    try:
        out = cls.__new__(cls)
    except Exception as e:
        raise CopyError(f"cannot allocate {cls.__name__}: {e}") from e

    if schema.kind == "dataclass":
        # hidden dataclass fields start from their declared default
        for f in dc_fields(cls):
            if f.name.startswith("_"):
                if f.default is not MISSING:
                    object.__setattr__(out, f.name, f.default)
                elif f.default_factory is not MISSING:
                    object.__setattr__(out, f.name, f.default_factory())

    for name in schema.field_names(src):
        try:
            val = getattr(src, name)
        except AttributeError:
            # unset slot
            continue
        object.__setattr__(out, name, deep_copy(val))
    return out
