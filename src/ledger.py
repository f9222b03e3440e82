import logging
from typing import Dict, Iterable, List, Tuple

from account import Account
from errors import InvalidAmount, LedgerError
from models import FailedRecord, InputRecord, MONETARY_TYPES, Transaction
from reader import read_records

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Applies an ordered stream of records to per-client accounts in a single pass.
    Records that can't be applied are collected as failed records; they never stop the run.
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}
        self._failed_records: List[FailedRecord] = []

    @property
    def accounts(self) -> Dict[int, Account]:
        """Accounts keyed by client id, in ascending client order."""
        return {client_id: self._accounts[client_id] for client_id in sorted(self._accounts)}

    @property
    def failed_records(self) -> List[FailedRecord]:
        return list(self._failed_records)

    def process_file(self, filepath: str) -> Tuple[Dict[int, Account], List[FailedRecord]]:
        """Process CSV file and return final account states and failed records."""
        # Undecodable bytes decode to U+FFFD and fail that row's parse.
        with open(filepath, "r", encoding="utf-8-sig", errors="replace", newline="") as f:
            return self.run(read_records(f))

    def run(self, records: Iterable[InputRecord]) -> Tuple[Dict[int, Account], List[FailedRecord]]:
        logger.info("Starting ledger run")

        for record in records:
            if record.transaction is None:
                self._record_failure(record, record.error or LedgerError("Unparseable record"))
                continue
            try:
                self._apply(record.transaction)
            except LedgerError as e:
                logger.info(f"Rejected {record.transaction}: {e}")
                self._record_failure(record, e)

        logger.info(f"Ledger run complete: {len(self._accounts)} accounts, {len(self._failed_records)} failed records")
        return self.accounts, self.failed_records

    def _apply(self, transaction: Transaction) -> None:
        if transaction.transaction_type in MONETARY_TYPES:
            if transaction.amount is None or transaction.amount <= 0:
                raise InvalidAmount(
                    f"{transaction.transaction_type.value.capitalize()} amount must be greater than zero "
                    f"(got {transaction.amount})"
                )

        # A client's account only joins the ledger once one of its records applies.
        account = self._accounts.get(transaction.client_id)
        if account is None:
            account = Account(transaction.client_id)
            account.process_transaction(transaction)
            self._accounts[transaction.client_id] = account
        else:
            account.process_transaction(transaction)

    def _record_failure(self, record: InputRecord, error: LedgerError) -> None:
        self._failed_records.append(FailedRecord(fields=list(record.fields), reason=str(error)))
