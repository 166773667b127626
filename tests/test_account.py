import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from account import Account
from models import Transaction, TransactionType, ProcessingResult


def deposit(tx_id, amount, client_id=1):
    return Transaction(TransactionType.DEPOSIT, client_id, tx_id, Decimal(amount))


def withdrawal(tx_id, amount, client_id=1):
    return Transaction(TransactionType.WITHDRAWAL, client_id, tx_id, Decimal(amount))


def dispute(tx_id, client_id=1):
    return Transaction(TransactionType.DISPUTE, client_id, tx_id)


def resolve(tx_id, client_id=1):
    return Transaction(TransactionType.RESOLVE, client_id, tx_id)


def chargeback(tx_id, client_id=1):
    return Transaction(TransactionType.CHARGEBACK, client_id, tx_id)


class TestAccount:
    def setup_method(self):
        self.account = Account(client_id=1)

    def test_default_values(self):
        assert self.account.available == Decimal("0")
        assert self.account.held == Decimal("0")
        assert self.account.total == Decimal("0")
        assert self.account.locked is False
        assert self.account.accepted == {}
        assert self.account.active_disputes == {}

    def test_total_property(self):
        account = Account(client_id=1, available=Decimal("100"), held=Decimal("50"))
        assert account.total == Decimal("150")

    def test_deposit(self):
        result = self.account.try_apply(deposit(1, "100"))

        assert result == ProcessingResult.SUCCESS
        assert self.account.available == Decimal("100")
        assert self.account.total == Decimal("100")
        assert 1 in self.account.accepted

    def test_deposit_zero_rejected(self):
        result = self.account.try_apply(deposit(1, "0"))

        assert result == ProcessingResult.ZERO_AMOUNT
        assert self.account.available == Decimal("0")
        assert self.account.accepted == {}

    def test_duplicate_deposit_rejected(self):
        self.account.try_apply(deposit(1, "100"))
        result = self.account.try_apply(deposit(1, "70"))

        assert result == ProcessingResult.DUPLICATE_TRANSACTION
        assert self.account.available == Decimal("100")
        assert self.account.accepted[1].amount == Decimal("100")

    def test_withdrawal_success(self):
        self.account.try_apply(deposit(1, "100"))
        result = self.account.try_apply(withdrawal(2, "60"))

        assert result == ProcessingResult.SUCCESS
        assert self.account.available == Decimal("40")

    def test_withdrawal_may_overdraw(self):
        self.account.try_apply(deposit(1, "50"))
        result = self.account.try_apply(withdrawal(2, "100"))

        assert result == ProcessingResult.SUCCESS
        assert self.account.available == Decimal("-50")
        assert self.account.total == Decimal("-50")

    def test_withdrawal_shares_tx_id_space_with_deposits(self):
        self.account.try_apply(deposit(1, "100"))
        result = self.account.try_apply(withdrawal(1, "30"))

        assert result == ProcessingResult.DUPLICATE_TRANSACTION
        assert self.account.available == Decimal("100")

    def test_withdrawal_zero_rejected(self):
        self.account.try_apply(deposit(1, "100"))
        result = self.account.try_apply(withdrawal(2, "0"))

        assert result == ProcessingResult.ZERO_AMOUNT
        assert 2 not in self.account.accepted

    def test_dispute(self):
        self.account.try_apply(deposit(1, "100"))
        result = self.account.try_apply(dispute(1))

        assert result == ProcessingResult.SUCCESS
        assert self.account.available == Decimal("0")
        assert self.account.held == Decimal("100")
        assert self.account.total == Decimal("100")
        assert 1 in self.account.active_disputes

    def test_dispute_tx_not_found(self):
        self.account.try_apply(deposit(1, "100"))
        result = self.account.try_apply(dispute(99))

        assert result == ProcessingResult.UNKNOWN_TRANSACTION
        assert self.account.held == Decimal("0")

    def test_dispute_withdrawal_rejected(self):
        self.account.try_apply(deposit(1, "100"))
        self.account.try_apply(withdrawal(2, "40"))
        result = self.account.try_apply(dispute(2))

        assert result == ProcessingResult.NOT_DISPUTABLE
        assert self.account.available == Decimal("60")
        assert self.account.held == Decimal("0")
        assert self.account.active_disputes == {}

    def test_redispute_open_dispute_holds_again(self):
        self.account.try_apply(deposit(1, "100"))
        self.account.try_apply(dispute(1))
        result = self.account.try_apply(dispute(1))

        assert result == ProcessingResult.SUCCESS
        assert self.account.available == Decimal("-100")
        assert self.account.held == Decimal("200")
        assert self.account.total == Decimal("100")

    def test_resolve(self):
        self.account.try_apply(deposit(1, "100"))
        self.account.try_apply(dispute(1))
        result = self.account.try_apply(resolve(1))

        assert result == ProcessingResult.SUCCESS
        assert self.account.available == Decimal("100")
        assert self.account.held == Decimal("0")
        assert self.account.active_disputes == {}
        assert 1 in self.account.accepted

    def test_resolve_not_disputed(self):
        self.account.try_apply(deposit(1, "100"))
        result = self.account.try_apply(resolve(1))

        assert result == ProcessingResult.NOT_UNDER_DISPUTE
        assert self.account.available == Decimal("100")

    def test_resolve_is_idempotent(self):
        self.account.try_apply(deposit(1, "100"))
        self.account.try_apply(dispute(1))
        first = self.account.try_apply(resolve(1))
        second = self.account.try_apply(resolve(1))

        assert first == ProcessingResult.SUCCESS
        assert second == ProcessingResult.NOT_UNDER_DISPUTE
        assert self.account.available == Decimal("100")
        assert self.account.held == Decimal("0")

    def test_chargeback(self):
        self.account.try_apply(deposit(1, "100"))
        self.account.try_apply(dispute(1))
        result = self.account.try_apply(chargeback(1))

        assert result == ProcessingResult.SUCCESS
        assert self.account.available == Decimal("0")
        assert self.account.held == Decimal("0")
        assert self.account.total == Decimal("0")
        assert self.account.locked is True
        assert self.account.active_disputes == {}

    def test_chargeback_not_disputed(self):
        self.account.try_apply(deposit(1, "100"))
        result = self.account.try_apply(chargeback(1))

        assert result == ProcessingResult.NOT_UNDER_DISPUTE
        assert self.account.locked is False

    def test_frozen_account_rejects_operations(self):
        self.account.try_apply(deposit(1, "100"))
        self.account.try_apply(deposit(2, "30"))
        self.account.try_apply(dispute(1))
        self.account.try_apply(chargeback(1))

        for transaction in [deposit(3, "50"), withdrawal(4, "10"), dispute(2), resolve(2), chargeback(2)]:
            assert self.account.try_apply(transaction) == ProcessingResult.ACCOUNT_LOCKED

        assert self.account.available == Decimal("30")
        assert self.account.held == Decimal("0")
        assert self.account.locked is True

    def test_apply_discards_rejections_silently(self):
        self.account.apply(deposit(1, "10"))
        self.account.apply(deposit(1, "10"))
        self.account.apply(resolve(5))

        assert self.account.available == Decimal("10")
