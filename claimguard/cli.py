"""
ClaimGuard command-line interface.

Usage:
    claimguard analyze --category medical bill.txt    # Analyze a bill
    claimguard analyze --category rent --demo         # Analyze the sample rent statement
    claimguard statement transactions.csv             # Find recurring price increases
    claimguard fee 125.50                             # Show the fee for recovered savings
    claimguard letter --category utility bill.txt     # Print a dispute letter
    claimguard serve                                  # Run the API server
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from config.env_config import config

from .appeal_letters import generate_appeal_by_category, generate_instructions_by_category
from .categories import DEMO_BILLS
from .exceptions import UnsupportedCategoryError
from .fee_calculator import calculate_smart_fee
from .logging_config import configure_logging
from .router import analyze_by_category, resolve_category
from .statement_analyzer import analyze_statement

logger = structlog.get_logger(__name__)

# argparse's own status for usage errors
EXIT_USAGE = 2


def _read_bill(args: argparse.Namespace) -> str:
    if args.demo:
        return DEMO_BILLS[resolve_category(args.category)]
    if args.file is None:
        raise SystemExit("error: provide a bill FILE or --demo")
    return Path(args.file).read_text(encoding="utf-8")


def _print_json(model) -> None:
    print(json.dumps(model.model_dump(mode="json", by_alias=True), indent=2))


def cmd_analyze(args: argparse.Namespace) -> int:
    result = analyze_by_category(_read_bill(args), args.category)
    fee = calculate_smart_fee(result.potential_savings)
    print(json.dumps({
        "analysis": result.model_dump(mode="json", by_alias=True),
        "fee": fee.model_dump(mode="json", by_alias=True),
    }, indent=2))
    return 0


def cmd_statement(args: argparse.Namespace) -> int:
    csv_text = Path(args.file).read_text(encoding="utf-8")
    _print_json(analyze_statement(csv_text))
    return 0


def cmd_fee(args: argparse.Namespace) -> int:
    _print_json(calculate_smart_fee(args.amount))
    return 0


def cmd_letter(args: argparse.Namespace) -> int:
    result = analyze_by_category(_read_bill(args), args.category)
    print(generate_appeal_by_category(result))
    print(generate_instructions_by_category(result.category, result.provider_name))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from .server import run
    run()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="claimguard",
        description="Find overcharges in medical, auto insurance, rent and utility bills"
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("analyze", cmd_analyze, "Analyze a bill and print the result as JSON"),
        ("letter", cmd_letter, "Analyze a bill and print a dispute letter"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--category", required=True, help="medical, auto, rent or utility")
        sub.add_argument("file", nargs="?", help="Bill text file")
        sub.add_argument("--demo", action="store_true", help="Use the built-in sample bill")
        sub.set_defaults(handler=handler)

    statement = subparsers.add_parser("statement", help="Analyze a CSV bank or card statement")
    statement.add_argument("file", help="CSV export")
    statement.set_defaults(handler=cmd_statement)

    fee = subparsers.add_parser("fee", help="Calculate the fee for recovered savings")
    fee.add_argument("amount", type=float, help="Gross savings in dollars")
    fee.set_defaults(handler=cmd_fee)

    serve = subparsers.add_parser("serve", help="Run the HTTP API server")
    serve.set_defaults(handler=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level or config.log_level, config.log_json)

    try:
        return args.handler(args)
    except UnsupportedCategoryError as e:
        logger.error("Unsupported category", category=e.category)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
