import argparse
import logging
import sys
from typing import List, Optional

from exceptions import PaymentsError
from payments_engine import PaymentsEngine


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="main.py",
        description="Apply a CSV of transactions and print final client balances",
    )
    parser.add_argument("input", help="Path to the transactions CSV file")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level for diagnostics written to stderr (default: WARNING)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_args(argv)
    except SystemExit as e:
        # argparse has already printed usage or help
        return 0 if e.code == 0 else 1

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )

    engine = PaymentsEngine()
    try:
        engine.process_file(args.input)
    except PaymentsError as e:
        print(f"error reading transactions: {e}", file=sys.stderr)
        return 1

    engine.write_report(sys.stdout)

    stats = engine.stats
    print(f"Processed: {stats.processed}, Rejected: {stats.failed}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
