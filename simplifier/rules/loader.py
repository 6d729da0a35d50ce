from __future__ import annotations
from pathlib import Path
from typing import Literal
import json
import os

try:
    import tomllib  # py>=3.11
except ImportError:  # pragma: no cover
    import tomli as tomllib

from .model import ParseError, RuleDoc, parse_rules
from ..utils.log import child_logger

RuleFormat = Literal["json", "toml"]

_SUFFIX_FORMATS: dict[str, RuleFormat] = {
    ".json": "json",
    ".toml": "toml",
}

log = child_logger("rules")


def _clean_text(text: str) -> str:
    # Paste artifacts: BOM / zero-width chars at the edges, ``` fences around the body
    cleaned = text.strip().lstrip("\ufeff\u200b\u200c\u200d\u2060")
    if cleaned.startswith("```"):
        cleaned = cleaned.split("\n", 1)[1] if "\n" in cleaned else ""
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3]
    return cleaned.strip()


def loads_rules(text: str | bytes, fmt: RuleFormat = "json") -> RuleDoc:
    """Parse rule text (JSON or TOML) into a RuleDoc; malformed text raises ParseError."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8-sig", errors="replace")
    cleaned = _clean_text(text)
    if fmt == "json":
        try:
            raw = json.loads(cleaned)
        except ValueError as e:
            raise ParseError(f"rule document is not valid JSON: {e}") from e
    elif fmt == "toml":
        try:
            raw = tomllib.loads(cleaned)
        except tomllib.TOMLDecodeError as e:
            raise ParseError(f"rule document is not valid TOML: {e}") from e
    else:
        raise ValueError(f"Unknown rule format {fmt!r}; expected 'json' or 'toml'")
    return parse_rules(raw)


def load_rules(path: str | os.PathLike[str], fmt: RuleFormat | None = None) -> RuleDoc:
    """
    Read a rule document from disk. The format follows the file suffix
    (.json / .toml) unless `fmt` is given; unknown suffixes are read as JSON.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"rule file not found: {p}")
    fmt = fmt or _SUFFIX_FORMATS.get(p.suffix.lower(), "json")
    try:
        rule = loads_rules(p.read_bytes(), fmt)
    except ParseError as e:
        raise ParseError(f"{p}: {e}") from e
    log.info("loaded rules", extra={"path": str(p), "format": fmt})
    return rule
