"""Deep-copy-and-redact for nested records, maps and sequences."""
from __future__ import annotations

from .rules import (
    RuleDoc,
    ParseError,
    Ruler,
    REMOVE,
    compile_rules,
    merge_rules,
    merge_many,
    parse_rules,
    load_rules,
    loads_rules,
)
from .core import (
    CopyError,
    Simplifier,
    SimplifyError,
    apply_ruler,
    deep_copy,
    simplify,
    new_simplifier,
    extend_simplifier,
)
from .policy import build_simplifier_from_config

__version__ = "0.1.0"
