import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, assert_never

from models import Transaction, TransactionType, ProcessingResult

logger = logging.getLogger(__name__)


@dataclass
class Account:
    """
    Balances and transaction history for a single client.
    Once locked by a chargeback the account ignores every further transaction.
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False
    accepted: Dict[int, Transaction] = field(default_factory=dict, repr=False)
    active_disputes: Dict[int, Transaction] = field(default_factory=dict, repr=False)

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount

    def apply(self, transaction: Transaction) -> None:
        """Apply a transaction, silently discarding it if it is rejected."""
        self.try_apply(transaction)

    def try_apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction to this account.

        Returns:
            SUCCESS: Balances and history were updated
            any other member: The reason the transaction was discarded
        """
        if self.locked:
            return ProcessingResult.ACCOUNT_LOCKED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)
            case _:
                assert_never(transaction.transaction_type)

    def _check_new_movement(self, transaction: Transaction) -> ProcessingResult:
        # deposits and withdrawals share one tx id space per account
        if transaction.transaction_id in self.accepted:
            logger.debug(f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: already processed, skipping")
            return ProcessingResult.DUPLICATE_TRANSACTION

        if transaction.amount == 0:
            logger.debug(f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: zero amount, skipping")
            return ProcessingResult.ZERO_AMOUNT

        return ProcessingResult.SUCCESS

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        result = self._check_new_movement(transaction)
        if not result.applied:
            return result

        self.credit(transaction.amount)
        self.accepted[transaction.transaction_id] = transaction
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        result = self._check_new_movement(transaction)
        if not result.applied:
            return result

        # No funds check: available is allowed to go negative
        self.debit(transaction.amount)
        self.accepted[transaction.transaction_id] = transaction
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        original = self.accepted.get(transaction.transaction_id)

        if original is None:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: no such transaction for client {self.client_id}")
            return ProcessingResult.UNKNOWN_TRANSACTION

        if original.transaction_type != TransactionType.DEPOSIT:
            logger.debug(f"Dispute for tx {transaction.transaction_id}: only deposits can be disputed (got {original.transaction_type.value})")
            return ProcessingResult.NOT_DISPUTABLE

        # An already open dispute is not guarded: the hold is applied again.
        self.hold(original.amount)
        self.active_disputes[transaction.transaction_id] = original
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        original = self.active_disputes.pop(transaction.transaction_id, None)

        if original is None:
            logger.debug(f"Resolve for tx {transaction.transaction_id}: transaction is not under dispute")
            return ProcessingResult.NOT_UNDER_DISPUTE

        self.release_hold(original.amount)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        original = self.active_disputes.pop(transaction.transaction_id, None)

        if original is None:
            logger.debug(f"Chargeback for tx {transaction.transaction_id}: transaction is not under dispute")
            return ProcessingResult.NOT_UNDER_DISPUTE

        self.remove_held(original.amount)
        self.locked = True
        logger.info(f"Client {self.client_id}: account locked by chargeback of tx {transaction.transaction_id}")
        return ProcessingResult.SUCCESS
