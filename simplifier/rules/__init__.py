from __future__ import annotations

# Public API re-exports (keep small & stable)
from .model import RuleDoc, ParseError, parse_rules
from .loader import load_rules, loads_rules
from .merge import merge_rules, merge_many
from .compiler import Action, ActionKind, REMOVE, Ruler, compile_rules
