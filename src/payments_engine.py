import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional, TextIO

from account import Account
from exceptions import InputReadError, TransactionParseError
from ledger import Ledger
from models import FOUR_PLACES, AccountSnapshot, ProcessingStats, Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
# Largest single deposit or withdrawal amount accepted from input
MAX_AMOUNT = Decimal("1000000000000000")

REPORT_HEADER = ["client", "available", "held", "total", "locked"]


class PaymentsEngine:
    """
    Feeds a transaction stream, in order, into a single ledger.
    Malformed input aborts the run; well-formed but inapplicable transactions are skipped.
    """

    def __init__(self):
        self._ledger = Ledger()
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, Account]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")
        try:
            with open(filepath, "r", encoding="utf-8", newline="") as f:
                self.process_transactions(self._read_csv(f))
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise InputReadError(f"cannot read {filepath}: {e}") from e

        logger.info(f"Processed: {self._stats.processed}, Rejected: {self._stats.failed}")
        return self._ledger.accounts()

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, Account]:
        """Apply already-parsed transactions in order and return final account states."""
        for transaction in transactions:
            result = self._ledger.try_route(transaction)
            self._stats.record(result)
            if not result.applied:
                logger.debug(f"Discarding {transaction!r}: {result.value}")

        return self._ledger.accounts()

    def snapshot(self) -> List[AccountSnapshot]:
        """Final state of every client, ordered by client id."""
        return self._ledger.snapshot()

    def write_report(self, stream: TextIO) -> None:
        """Write one CSV row per client to the given stream."""
        writer = csv.writer(stream, lineterminator="\n")
        writer.writerow(REPORT_HEADER)
        for row in self.snapshot():
            writer.writerow(row.as_row())

    def _read_csv(self, f: TextIO) -> Iterable[Transaction]:
        """Read CSV rows and yield parsed transactions."""
        reader = csv.DictReader(f, skipinitialspace=True)
        if reader.fieldnames is not None:
            reader.fieldnames = [name.strip() for name in reader.fieldnames]

        for row in reader:
            if not any(value and value.strip() for key, value in row.items() if key is not None):
                continue
            yield parse_csv_row(row, reader.line_num)


def parse_csv_row(row: Dict[Optional[str], Optional[str]], line_number: int = 0) -> Transaction:
    """Parse CSV row into Transaction, raising TransactionParseError if malformed."""
    normalized = {
        k.strip(): v.strip()
        for k, v in row.items()
        if k is not None and v is not None
    }

    try:
        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_bounded_int(normalized["client"], "client", MAX_CLIENT_ID)
        transaction_id = _parse_bounded_int(normalized["tx"], "tx", MAX_TRANSACTION_ID)
        amount = _parse_amount(normalized.get("amount", ""))
    except KeyError as e:
        raise TransactionParseError(line_number, f"missing field {e}") from e
    except ValueError as e:
        raise TransactionParseError(line_number, str(e)) from e

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_bounded_int(value: str, name: str, maximum: int) -> int:
    number = int(value)
    if not 0 <= number <= maximum:
        raise ValueError(f"{name} {number} out of range 0..{maximum}")
    return number


def _parse_amount(value: str) -> Decimal:
    if not value:
        return Decimal("0")
    try:
        amount = Decimal(value)
    except InvalidOperation as e:
        raise ValueError(f"invalid amount {value!r}") from e
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"invalid amount {value!r}")
    if amount > MAX_AMOUNT:
        raise ValueError(f"amount {value!r} exceeds {MAX_AMOUNT}")
    if amount != amount.quantize(FOUR_PLACES):
        raise ValueError(f"amount {value!r} has more than 4 decimal places")
    return amount
