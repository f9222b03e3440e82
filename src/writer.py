import csv
from decimal import Decimal
from typing import Iterable, TextIO

from account import Account
from models import FailedRecord
from reader import COLUMNS

ACCOUNT_COLUMNS = ("client", "available", "held", "total", "locked")


def format_amount(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value:.4f}"


def write_accounts(stream: TextIO, accounts: Iterable[Account]) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(ACCOUNT_COLUMNS)
    for account in accounts:
        writer.writerow([
            account.client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])


def write_failed_records(stream: TextIO, failed_records: Iterable[FailedRecord]) -> None:
    """Write each failed record's original fields followed by the failure reason."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(COLUMNS + ("reason",))
    for record in failed_records:
        writer.writerow(record.fields + [record.reason])
