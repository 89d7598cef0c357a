"""Command line interface for the autofill engine."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from .core.config import load_configuration
from .core.page_loader import PageLoadError, load_document
from .core.report import IdentificationReport
from .core.rules import RuleStoreError, default_rule_store, load_rule_store_file
from .fill.orchestrator import autofill_document
from .identify.identifier import FieldIdentifier
from .matching.semantic import infer_semantic_type


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Form field identification and autofill")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    identify = subparsers.add_parser("identify", help="List the fillable fields of a page")
    identify.add_argument("source", help="HTML file path or http(s) URL")
    identify.add_argument("--render", action="store_true", help="Render the URL with Playwright first")
    identify.add_argument("--report", help="Write the identified fields to this JSON file")

    fill = subparsers.add_parser("fill", help="Apply a rule set to a page")
    fill.add_argument("source", help="HTML file path or http(s) URL")
    fill.add_argument("--rules", help="Rule store JSON file (defaults to the sample profile)")
    fill.add_argument("--category", help="Only run rules of this category")
    fill.add_argument("--force", action="store_true", help="Overwrite fields that already hold a value")
    fill.add_argument("--render", action="store_true", help="Render the URL with Playwright first")
    fill.add_argument("--output", help="Write the filled HTML to this file")
    fill.add_argument("--report", help="Write the fill summary to this JSON file")
    return parser.parse_args(argv)


def run_identify(args: argparse.Namespace) -> int:
    config = load_configuration()
    document = load_document(args.source, render=args.render, config=config)

    fields = FieldIdentifier(document, config).identify()
    print(f"[+] {len(fields)} fillable field(s) found")
    for descriptor in fields:
        print(
            f" - {descriptor.identifier} [{descriptor.field_type.value}/"
            f"{infer_semantic_type(descriptor)}] value={descriptor.current_value!r}"
        )

    if args.report:
        report_path = Path(args.report)
        IdentificationReport(url=document.url, fields=fields).save(report_path)
        print(f"[+] Report saved to {report_path}")
    return 0


def run_fill(args: argparse.Namespace) -> int:
    config = load_configuration(force_overwrite=True if args.force else None)
    store = load_rule_store_file(Path(args.rules)) if args.rules else default_rule_store()
    print(f"[*] {len(store.rules)} rule(s) loaded")

    document = load_document(args.source, render=args.render, config=config)
    result = asyncio.run(autofill_document(document, store, category=args.category, config=config))

    print(f"[+] {result.filled} field(s) filled")
    for error in result.errors:
        print(f"[!] {error.field} (rule {error.rule}): {error.message}")

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(str(document.soup), encoding="utf-8")
        print(f"[+] Filled page saved to {output_path}")
    if args.report:
        report_path = Path(args.report)
        result.save(report_path)
        print(f"[+] Report saved to {report_path}")
    return 0


def run_cli(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    handlers = {"identify": run_identify, "fill": run_fill}
    try:
        return handlers[args.command](args)
    except (PageLoadError, RuleStoreError, OSError) as exc:
        print(f"[!] {exc}")
        return 1


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
