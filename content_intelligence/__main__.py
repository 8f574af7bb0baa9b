"""
Command-line entry point

    python -m content_intelligence classify sheet.json
    python -m content_intelligence evolve --tenant acme --since 2026-01-01

A sheet document is {"sheetName", "headers", "rows"} with optional
"sheetIndex" and "sourceFileName"; a JSON list of them is also accepted.
"""
import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .classifier import ContentClassifier, to_jsonable
from .observability import configure_logging
from .signals import SignalStore, SignalWindow, WeightEvolutionAnalyzer, compute_accuracy, compute_confidence_trend

logger = logging.getLogger(__name__)


def load_documents(path: str) -> List[Dict[str, Any]]:
    text = sys.stdin.read() if path == "-" else Path(path).read_text(encoding="utf-8")
    payload = json.loads(text)
    return payload if isinstance(payload, list) else [payload]


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def run_classify(args: argparse.Namespace) -> int:
    classifier = ContentClassifier()
    source = Path(args.input).name if args.input != "-" else "stdin"
    results = []
    for index, document in enumerate(load_documents(args.input)):
        outcome = classifier.classify(
            sheet_name=str(document.get("sheetName", f"Sheet{index + 1}")),
            sheet_index=int(document.get("sheetIndex", index)),
            source_file_name=str(document.get("sourceFileName", source)),
            headers=document.get("headers") or [],
            rows=document.get("rows") or [],
        )
        result = outcome.to_dict()
        if not args.with_profile:
            result.pop("profile")
        results.append(result)

    print(json.dumps(results if len(results) != 1 else results[0], indent=2, ensure_ascii=False))
    return 0


def run_evolve(args: argparse.Namespace) -> int:
    store = SignalStore(args.store_url)
    window = SignalWindow(tenant_id=args.tenant, start=_parse_date(args.since), end=_parse_date(args.until))
    signals = store.snapshot(window)

    proposal = WeightEvolutionAnalyzer().analyze(signals, window)
    report = {
        "proposal": to_jsonable(proposal),
        "accuracy": to_jsonable(compute_accuracy(signals)),
        "trend": to_jsonable(compute_confidence_trend(signals)),
    }
    print(json.dumps(report, indent=2, ensure_ascii=False))
    store.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="content_intelligence",
        description="Structural classification of spreadsheet content units",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify = subparsers.add_parser("classify", help="Classify sheet documents")
    classify.add_argument("input", help="JSON file with one or more sheet documents, or - for stdin")
    classify.add_argument("--with-profile", action="store_true", help="Include the full content profile")
    classify.set_defaults(handler=run_classify)

    evolve = subparsers.add_parser("evolve", help="Propose weight changes from captured signals")
    evolve.add_argument("--store-url", default=None, help="Signal store URL (defaults to SIGNAL_STORE_URL)")
    evolve.add_argument("--tenant", default=None, help="Restrict to one tenant")
    evolve.add_argument("--since", default=None, help="Window start (ISO date, inclusive)")
    evolve.add_argument("--until", default=None, help="Window end (ISO date, exclusive)")
    evolve.set_defaults(handler=run_evolve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.handler(args)
    except (OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
