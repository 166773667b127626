import logging
from typing import Dict, List, Optional

from account import Account
from models import AccountSnapshot, ProcessingResult, Transaction, TransactionType, format_decimal

logger = logging.getLogger(__name__)


class Ledger:
    """
    Owns every client account and routes each transaction to exactly one of them.
    Accounts are only opened by a deposit that is actually accepted.
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}

    def __len__(self) -> int:
        return len(self._accounts)

    def route(self, transaction: Transaction) -> None:
        """Route a transaction, silently discarding it if it is rejected."""
        self.try_route(transaction)

    def try_route(self, transaction: Transaction) -> ProcessingResult:
        """Route a transaction to its client's account and return the outcome."""
        account = self._accounts.get(transaction.client_id)

        if account is None:
            if transaction.transaction_type != TransactionType.DEPOSIT:
                logger.debug(f"{transaction!r}: client {transaction.client_id} has no account yet")
                return ProcessingResult.NO_ACCOUNT
            return self._open_account(transaction)

        return account.try_apply(transaction)

    def _open_account(self, deposit: Transaction) -> ProcessingResult:
        account = Account(client_id=deposit.client_id)
        result = account.try_apply(deposit)
        if result.applied:
            self._accounts[deposit.client_id] = account
            logger.debug(f"Opened account for client {deposit.client_id}")
        return result

    def get_account(self, client_id: int) -> Optional[Account]:
        """Retrieve a client's account, or None if it was never opened."""
        return self._accounts.get(client_id)

    def accounts(self) -> Dict[int, Account]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def snapshot(self) -> List[AccountSnapshot]:
        """Render the final state of every account, ordered by client id."""
        return [
            AccountSnapshot(
                client_id=client_id,
                available=format_decimal(account.available),
                held=format_decimal(account.held),
                total=format_decimal(account.total),
                locked=account.locked,
            )
            for client_id, account in sorted(self._accounts.items())
        ]
