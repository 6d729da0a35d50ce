from __future__ import annotations
from typing import Any, Iterable

from .config_model.model import SimplifierCfg
from .core.engine import Simplifier
from .rules.loader import load_rules
from .rules.merge import merge_many


def build_simplifier_from_config(
    cfg: SimplifierCfg | None = None,
    extra_rules: Iterable[Any] | None = None,
) -> Simplifier:
    """
    Load every rule file named in cfg.rules.paths, merge them in order
    (then any `extra_rules`: documents, mappings, JSON text or rulers),
    and compile one Simplifier carrying the same settings.
    """
    cfg = cfg if cfg is not None else SimplifierCfg()
    paths = list(getattr(getattr(cfg, "rules", None), "paths", []) or [])
    docs: list[Any] = [load_rules(p) for p in paths]
    if extra_rules:
        docs.extend(extra_rules)
    simplifier = Simplifier(merge_many(*docs), settings=cfg)
    simplifier.log.info(
        "simplifier ready",
        extra={"rule_files": len(paths), "extra_rules": len(docs) - len(paths), "pass_through": simplifier.pass_through},
    )
    return simplifier
