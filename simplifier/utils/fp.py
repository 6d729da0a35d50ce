from __future__ import annotations
from functools import lru_cache, reduce
from typing import Any, Callable, Dict, Iterable, List, Mapping, TypeVar

from toolz import merge_with as _merge_with
from more_itertools import unique_everseen as _unique_everseen

A = TypeVar("A")
B = TypeVar("B")

def unique_stable(seq: Iterable[A]) -> List[A]:
    # Delegate to more-itertools; preserves first-seen order
    return list(_unique_everseen(seq))

def merge_with(combine: Callable[[List[B]], B], *dicts: Mapping[A, B]) -> Dict[A, B]:
    """
    Key-wise merge. Keys present in a single dict keep their value untouched;
    keys present in several are folded with `combine(values_in_order)`.
    """
    # toolz calls combine for every key, even singletons; short-circuit those
    return _merge_with(lambda vs: vs[0] if len(vs) == 1 else combine(vs), *dicts)

def fold(fn: Callable[[A, A], A], items: Iterable[A], initial: A) -> A:
    return reduce(fn, items, initial)

def memoize(maxsize: int | None = 128):
    def deco(fn: Callable[..., B]) -> Callable[..., B]:
        return lru_cache(maxsize=maxsize)(fn)  # type: ignore
    return deco

def first_not_none(*vals: Any) -> Any:
    for v in vals:
        if v is not None:
            return v
    return None
