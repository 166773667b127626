"""Exception hierarchy for the payments engine."""


class PaymentsError(Exception):
    """Base exception for all payments engine errors."""


class InputReadError(PaymentsError):
    """Raised when the transaction input cannot be opened or read."""


class TransactionParseError(PaymentsError):
    """Raised when an input row is structurally malformed."""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        super().__init__(f"line {line_number}: {message}")
