import csv
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Dict, Iterator, Optional, TextIO

from errors import ParseError
from models import InputRecord, Transaction, TransactionType

logger = logging.getLogger(__name__)

COLUMNS = ("type", "client", "tx", "amount")
MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
AMOUNT_PRECISION = Decimal("0.0001")


def read_records(stream: TextIO) -> Iterator[InputRecord]:
    """
    Read CSV rows (with a header) and yield one InputRecord per data row.
    Rows that can't be parsed are still yielded, carrying the ParseError.
    """
    reader = csv.DictReader(stream, restval="")
    if reader.fieldnames is not None:
        reader.fieldnames = [name.strip().lstrip("\ufeff").strip().lower() for name in reader.fieldnames]

    for row in reader:
        normalized = _normalize(row)
        fields = [normalized.get(column, "") for column in COLUMNS]
        try:
            yield InputRecord(fields=fields, transaction=parse_row(normalized))
        except ParseError as e:
            logger.warning(f"Failed to parse row {fields}: {e}")
            yield InputRecord(fields=fields, error=e)


def parse_row(row: Dict[str, str]) -> Transaction:
    """Parse a normalized CSV row into a Transaction."""
    try:
        raw_type = row["type"]
        client_id = _parse_id(row["client"], "client", MAX_CLIENT_ID)
        transaction_id = _parse_id(row["tx"], "tx", MAX_TRANSACTION_ID)
    except KeyError as e:
        raise ParseError(f"Missing column {e}") from e

    transaction_type = TransactionType.from_token(raw_type)
    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=_parse_amount(row.get("amount", "")),
        raw_type=raw_type if transaction_type is TransactionType.UNKNOWN else None,
    )


def _normalize(row: Dict[Optional[str], Optional[str]]) -> Dict[str, str]:
    # DictReader files surplus fields under the None key.
    return {k: (v or "").strip() for k, v in row.items() if k is not None}


def _parse_id(value: str, name: str, maximum: int) -> int:
    if not (value.isascii() and value.isdigit()):
        raise ParseError(f"Invalid {name} '{value}'")
    try:
        parsed = int(value)
    except ValueError as e:
        raise ParseError(f"Invalid {name} '{value}'") from e
    if not 0 <= parsed <= maximum:
        raise ParseError(f"{name} {parsed} out of range 0..{maximum}")
    return parsed


def _parse_amount(value: str) -> Optional[Decimal]:
    if not value:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation as e:
        raise ParseError(f"Invalid amount '{value}'") from e
    if not amount.is_finite():
        raise ParseError(f"Invalid amount '{value}'")
    try:
        return amount.quantize(AMOUNT_PRECISION, rounding=ROUND_HALF_EVEN)
    except InvalidOperation as e:
        raise ParseError(f"Amount '{value}' exceeds supported precision") from e
