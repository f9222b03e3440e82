from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from errors import LedgerError


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"
    UNKNOWN = "unknown"

    @classmethod
    def from_token(cls, token: str) -> "TransactionType":
        """Case-insensitive lookup; anything unrecognized maps to UNKNOWN."""
        normalized = token.strip().lower()
        for member in cls:
            if member is not cls.UNKNOWN and member.value == normalized:
                return member
        return cls.UNKNOWN


MONETARY_TYPES = (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None
    raw_type: Optional[str] = None
    disputed: bool = False

    def __repr__(self) -> str:
        type_name = self.raw_type if self.transaction_type is TransactionType.UNKNOWN else self.transaction_type.value
        return f"Transaction({type_name}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class InputRecord:
    """One data row from the input: its stripped fields and either a Transaction or the parse error."""

    fields: List[str]
    transaction: Optional[Transaction] = None
    error: Optional[LedgerError] = None


@dataclass
class FailedRecord:
    fields: List[str]
    reason: str
