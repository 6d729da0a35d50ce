from __future__ import annotations
from typing import List, Literal, Optional
from pathlib import Path
import os
from pydantic import (
    BaseModel,
    ConfigDict,
    PrivateAttr,
    model_validator,
)

from ..utils.fp import first_not_none

CFG_ENV_VAR = "SIMPLIFIER_CFG"
DEFAULT_CFG_PATH = "config/simplifier.toml"


# ---------- Leaf models ----------

class LoggingCfg(BaseModel):
    level: str = "INFO"
    structured_json: bool = True


class TraversalCfg(BaseModel):
    # "none": only declared scopes are visited
    # "root": unmatched fields/keys get the root scope re-applied once
    pass_through: Literal["none", "root"] = "none"


class RulesCfg(BaseModel):
    # rule documents (.json / .toml), merged in order
    paths: List[str] = []


# ---------- Root ----------

class SimplifierCfg(BaseModel):
    model_config = ConfigDict(extra="ignore")

    logging: LoggingCfg = LoggingCfg()
    traversal: TraversalCfg = TraversalCfg()
    rules: RulesCfg = RulesCfg()

    # Private attribute (not a field); used only to resolve relative paths
    _config_dir: Optional[Path] = PrivateAttr(default=None)

    @model_validator(mode="after")
    def _normalize_paths(self):
        if self._config_dir:
            # A config file in a conventional "config" folder resolves paths against
            # the project root (its parent); anywhere else, against its own folder.
            base_dir = self._config_dir.parent if self._config_dir.name.lower() == "config" else self._config_dir

            def _abs(p: str) -> str:
                pp = Path(p)
                return str(pp if pp.is_absolute() else (base_dir / pp).resolve())

            self.rules.paths = [_abs(p) for p in self.rules.paths]
        return self

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str]) -> "SimplifierCfg":
        try:
            import tomllib  # py>=3.11
        except ImportError:
            import tomli as tomllib

        p = Path(path)
        # utf-8-sig strips a BOM some editors leave at the start
        text = p.read_text(encoding="utf-8-sig")
        try:
            raw = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            snippet = text.strip()[:80].replace("\n", "\\n")
            raise RuntimeError(
                f"Failed to parse TOML at {p}. First chars: {snippet!r}"
            ) from e

        raw.setdefault("logging", {})
        raw.setdefault("traversal", {})
        raw.setdefault("rules", {})

        # shim: a bare top-level `pass_through = ...` means [traversal].pass_through
        if "pass_through" in raw and "pass_through" not in raw["traversal"]:
            raw["traversal"]["pass_through"] = raw.pop("pass_through")

        cfg = cls(
            logging=LoggingCfg(**raw["logging"]),
            traversal=TraversalCfg(**raw["traversal"]),
            rules=RulesCfg(**raw["rules"]),
        )
        cfg._config_dir = p.parent.resolve()
        return cfg._normalize_paths()

    @classmethod
    def load(cls, path: str | None = None) -> "SimplifierCfg":
        explicit = first_not_none(path, os.environ.get(CFG_ENV_VAR))
        final = Path(explicit or DEFAULT_CFG_PATH).resolve()
        if explicit is None and not final.exists():
            # no config anywhere: library defaults
            return cls()
        return cls.from_toml(final)


def load_config(path: str | None = None) -> SimplifierCfg:
    return SimplifierCfg.load(path)
