from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal, localcontext
from enum import Enum
from typing import NamedTuple


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    SUCCESS = "success"
    ACCOUNT_LOCKED = "account_locked"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    ZERO_AMOUNT = "zero_amount"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    NOT_DISPUTABLE = "not_disputable"
    NOT_UNDER_DISPUTE = "not_under_dispute"
    NO_ACCOUNT = "no_account"

    @property
    def applied(self) -> bool:
        return self is ProcessingResult.SUCCESS


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Decimal = Decimal("0")

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


class AccountSnapshot(NamedTuple):
    """Final state of one client, decimals already rendered to 4 places."""

    client_id: int
    available: str
    held: str
    total: str
    locked: bool

    def as_row(self) -> list:
        return [self.client_id, self.available, self.held, self.total, str(self.locked).lower()]


FOUR_PLACES = Decimal("0.0001")


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 fractional digits."""
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the 4 fractional ones
        ctx.prec = max(ctx.prec, value.adjusted() + 6)
        quantized = value.quantize(FOUR_PLACES)
    if quantized.is_zero():
        quantized = abs(quantized)
    return f"{quantized:f}"


@dataclass
class ProcessingStats:
    """Counters for tracking processing statistics."""

    processed: int = 0
    rejected: Counter = field(default_factory=Counter)

    def record(self, result: ProcessingResult) -> None:
        if result.applied:
            self.processed += 1
        else:
            self.rejected[result] += 1

    @property
    def failed(self) -> int:
        return sum(self.rejected.values())
