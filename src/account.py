import dataclasses
import logging
from decimal import Decimal
from typing import Dict

from errors import (
    AccountLocked,
    AlreadyDisputed,
    InsufficientFunds,
    InvalidAmount,
    NotDisputed,
    UnknownTransaction,
    UnrecognizedType,
)
from models import Transaction, TransactionType

logger = logging.getLogger(__name__)


class Account:
    """
    Balances and monetary history for one client.
    Every operation validates before mutating, so a raised LedgerError
    leaves the account exactly as it was.
    """

    def __init__(self, client_id: int):
        self.client_id = client_id
        self.available = Decimal("0")
        self.held = Decimal("0")
        self.locked = False
        self._transactions: Dict[int, Transaction] = {}

    def __repr__(self) -> str:
        return (
            f"Account(client={self.client_id}, available={self.available}, "
            f"held={self.held}, total={self.total}, locked={self.locked})"
        )

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    @property
    def transactions(self) -> Dict[int, Transaction]:
        """Stored deposits and withdrawals, ordered by transaction id."""
        return dict(sorted(self._transactions.items()))

    def deposit(self, amount: Decimal) -> None:
        if amount is None or amount < 0:
            raise InvalidAmount(f"Can't deposit amount {amount}")
        self.available += amount

    def withdraw(self, amount: Decimal) -> None:
        if amount is None:
            raise InvalidAmount("Can't withdraw without an amount")
        # Checked against total, so held funds still count towards the balance.
        if amount > self.total:
            raise InsufficientFunds(f"Can't withdraw {amount}; insufficient funds (total {self.total})")
        self.available -= amount

    def dispute(self, transaction_id: int) -> None:
        original = self._get_original(transaction_id, "dispute")
        if original.disputed:
            raise AlreadyDisputed(f"Can't dispute; transaction {transaction_id} is already disputed")

        self.available -= original.amount
        self.held += original.amount
        original.disputed = True

    def resolve(self, transaction_id: int) -> None:
        original = self._get_disputed(transaction_id, "resolve")

        self.held -= original.amount
        self.available += original.amount
        original.disputed = False

    def charge_back(self, transaction_id: int) -> None:
        original = self._get_disputed(transaction_id, "charge back")

        self.held -= original.amount
        self.locked = True
        original.disputed = False
        logger.info(f"Account {self.client_id} locked after chargeback of tx {transaction_id}")

    def process_transaction(self, transaction: Transaction) -> None:
        """Apply a single transaction, raising a LedgerError if it can't be applied."""
        if self.locked:
            raise AccountLocked(f"Can't process transaction; account {self.client_id} is locked")

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._check_replaceable(transaction.transaction_id)
                self.deposit(transaction.amount)
                self._store(transaction)
            case TransactionType.WITHDRAWAL:
                self._check_replaceable(transaction.transaction_id)
                self.withdraw(transaction.amount)
                self._store(transaction)
            case TransactionType.DISPUTE:
                self.dispute(transaction.transaction_id)
            case TransactionType.RESOLVE:
                self.resolve(transaction.transaction_id)
            case TransactionType.CHARGEBACK:
                self.charge_back(transaction.transaction_id)
            case _:
                raise UnrecognizedType(transaction.raw_type or transaction.transaction_type.value)

    def _check_replaceable(self, transaction_id: int) -> None:
        # A disputed transaction owns the funds in held until it is resolved or charged back.
        stored = self._transactions.get(transaction_id)
        if stored is not None and stored.disputed:
            raise AlreadyDisputed(f"Can't overwrite transaction {transaction_id} while it is disputed")

    def _store(self, transaction: Transaction) -> None:
        # Last write wins on a repeated transaction id.
        self._transactions[transaction.transaction_id] = dataclasses.replace(transaction, disputed=False)

    def _get_original(self, transaction_id: int, action: str) -> Transaction:
        original = self._transactions.get(transaction_id)
        if original is None:
            raise UnknownTransaction(f"Can't {action}; unable to find the original transaction {transaction_id}")
        return original

    def _get_disputed(self, transaction_id: int, action: str) -> Transaction:
        original = self._get_original(transaction_id, action)
        if not original.disputed:
            raise NotDisputed(f"Can't {action}; transaction {transaction_id} is not disputed")
        return original
