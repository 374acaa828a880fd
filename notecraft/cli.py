from __future__ import annotations
import argparse
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from notecraft.batch import BatchProcessor
from notecraft.changelog import write_json, write_txt
from notecraft.config import FEATURES, load_config
from notecraft.drivers import get_driver_class
from notecraft.errors import ConfigurationError
from notecraft.llm.client import ClaudeClient, TextTransformer


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="notecraft",
        description="Punctuate, split into topics, summarize or clean up Markdown notes with Claude"
    )
    ap.add_argument("feature", choices=FEATURES, help="Transform to apply")
    ap.add_argument("files", nargs="+", help="Markdown notes to process (rewritten in place)")
    ap.add_argument("--config", help="Path to a YAML config file")

    llm_group = ap.add_argument_group("LLM Options")
    llm_group.add_argument(
        "--api-key",
        help="Anthropic API key (or set ANTHROPIC_API_KEY env var)"
    )
    llm_group.add_argument(
        "--model",
        help="Claude model to use (default: claude-sonnet-4-20250514)"
    )

    ap.add_argument("--chunk-size", type=int, help="Override the chunk size for this feature")
    ap.add_argument(
        "--backup",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Copy each note before rewriting it (default: from config)"
    )
    ap.add_argument("--debug", action="store_true", help="Write transform debug logs to log_dir")
    ap.add_argument("--report", help="Write a run report (.json, or text for any other extension)")
    ap.add_argument("--verbose", "-v", action="store_true", help="Show progress logging")
    return ap


def main(argv: Optional[List[str]] = None, transformer: Optional[TextTransformer] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        ap.error(str(e))

    if args.api_key:
        config.api_key = args.api_key
    if args.model:
        config.model = args.model
    if args.chunk_size is not None:
        config.feature(args.feature).chunk_size = args.chunk_size
    if args.backup is not None:
        config.backup = args.backup
    if args.debug:
        config.debug = True

    try:
        config.validate(require_api_key=transformer is None)
    except ConfigurationError as e:
        ap.error(str(e))

    if transformer is None:
        transformer = ClaudeClient(config.llm_config())

    driver = get_driver_class(args.feature).from_config(transformer, config)
    processor = BatchProcessor(driver, backup=config.backup, backup_dir=config.backup_dir)

    print(f"Running {args.feature} on {len(args.files)} file(s)")
    result = processor.run(args.files)

    for outcome in result.outcomes:
        if not outcome.result.ok:
            print(f"  {outcome.path}: {outcome.result.message}")
    for error in result.errors:
        print(f"  {error['path']}: {error['message']}")

    output = {
        "feature": args.feature,
        "model": config.model,
        "chunk_size": config.feature(args.feature).chunk_size,
        **result.stats.to_dict(),
    }

    if args.report:
        payload = {
            "timestamp_utc": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "feature": args.feature,
            "stats": result.stats.to_dict(),
            "documents": [o.to_dict() for o in result.outcomes] + [
                {**e, "status": "error", "iterations": 0, "transform_calls": 0, "backup": None}
                for e in result.errors
            ],
        }
        if args.report.endswith(".json"):
            write_json(args.report, payload)
        else:
            write_txt(args.report, payload)
        output["report"] = args.report

    print(json.dumps(output, indent=2))
    return 0 if result.stats.succeeded == result.stats.total else 1


if __name__ == "__main__":
    raise SystemExit(main())
