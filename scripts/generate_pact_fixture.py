#!/usr/bin/env python3
"""Generate a body/matching-rule fixture from a schema or a matcher tree.

Reads either a type description (``--schema``) or a serialized matcher tree
(``--matchers``) and writes ``{"body": ..., "matchingRules": ...}`` JSON to
``--output`` or stdout. Summary messages go to stderr.

Usage:
    python3 scripts/generate_pact_fixture.py --schema user_schema.json \
      --output fixtures/user.json
    python3 scripts/generate_pact_fixture.py --matchers users_tree.json --verbose
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from pactgen.body_builder import BODY_ROOT, PactBody, build_body
from pactgen.io_utils import load_json, save_pact_body
from pactgen.matchers import matcher_from_json
from pactgen.schema import type_spec_from_json
from pactgen.synthesizer import synthesize

log = logging.getLogger("generate_pact_fixture")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a body/matching-rule fixture."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--schema", type=Path, help="Path to a type description JSON file"
    )
    source.add_argument(
        "--matchers", type=Path, help="Path to a serialized matcher tree JSON file"
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the fixture here instead of stdout",
    )
    parser.add_argument(
        "--root",
        default=BODY_ROOT,
        help=f"JSON-path of the document root (default: {BODY_ROOT})",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose logging"
    )
    return parser


def generate(args: argparse.Namespace) -> PactBody:
    """Load the requested input and build the fixture."""
    source: Path = args.schema if args.schema is not None else args.matchers
    if not source.exists():
        raise FileNotFoundError(f"input not found: {source}")
    payload: Any = load_json(source)

    if args.schema is not None:
        tree = synthesize(type_spec_from_json(payload))
    else:
        tree = matcher_from_json(payload)
    return build_body(tree, root=args.root)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        pact_body = generate(args)
    # ValueError covers bad JSON and annotations, TypeError unsupported kinds
    except (FileNotFoundError, ValueError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.output is not None:
        save_pact_body(pact_body, args.output)
        log.info("wrote fixture to %s", args.output)
    else:
        sys.stdout.buffer.write(
            orjson.dumps(pact_body.to_dict(), option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)
        )
        sys.stdout.buffer.write(b"\n")

    print(
        f"Generated {len(pact_body.matching_rules)} matching rule(s)",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
