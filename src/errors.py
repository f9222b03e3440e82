class LedgerError(Exception):
    """Base class for failures that reject a single record without stopping the run."""


class ParseError(LedgerError):
    pass


class InvalidAmount(LedgerError):
    pass


class InsufficientFunds(LedgerError):
    pass


class UnknownTransaction(LedgerError):
    pass


class NotDisputed(LedgerError):
    pass


class AlreadyDisputed(LedgerError):
    pass


class AccountLocked(LedgerError):
    pass


class UnrecognizedType(LedgerError):
    def __init__(self, raw_type: str):
        super().__init__(f"Unrecognized transaction type '{raw_type}'")
        self.raw_type = raw_type
