from __future__ import annotations
import argparse, json, sys
from pathlib import Path

from simplifier.config_model.model import load_config
from simplifier.policy import build_simplifier_from_config
from simplifier.rules.loader import load_rules
from simplifier.rules.model import ParseError
from simplifier.utils.log import get_logger


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Redact a JSON document: named fields are removed at the scopes the rules declare.",
    )
    ap.add_argument("input", nargs="?", help="JSON file to redact (default: stdin)")
    ap.add_argument("--rules", action="append", default=[], metavar="PATH",
                    help="rule document (.json/.toml); repeat to merge several, in order")
    ap.add_argument("--config", default=None, help="settings TOML (default: $SIMPLIFIER_CFG or config/simplifier.toml)")
    ap.add_argument("--pass-through", choices=["none", "root"], default=None,
                    help="override [traversal].pass_through")
    ap.add_argument("--indent", type=int, default=2)
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        cfg = load_config(args.config)
        if args.pass_through:
            cfg.traversal.pass_through = args.pass_through
        # stdout carries the redacted document
        get_logger("simplifier", cfg.logging.level, cfg.logging.structured_json, stream=sys.stderr)
        extra = [load_rules(p) for p in args.rules]
        simplifier = build_simplifier_from_config(cfg, extra_rules=extra)
    except (ParseError, ValueError, FileNotFoundError, RuntimeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        if args.input:
            doc = json.loads(Path(args.input).read_text(encoding="utf-8-sig"))
        else:
            doc = json.load(sys.stdin)
    except (OSError, ValueError) as e:
        print(f"error: cannot read input JSON: {e}", file=sys.stderr)
        return 2

    out = simplifier.simplify(doc)
    json.dump(out, sys.stdout, indent=args.indent, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
