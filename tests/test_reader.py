import sys
import os
import io
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from errors import ParseError
from models import TransactionType
from reader import parse_row, read_records


def read(text):
    return list(read_records(io.StringIO(text)))


class TestParseRow:
    def test_deposit(self):
        transaction = parse_row({"type": "deposit", "client": "1", "tx": "2", "amount": "1.5"})

        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 2
        assert transaction.amount == Decimal("1.5000")
        assert transaction.raw_type is None

    def test_amount_rounded_to_four_places(self):
        transaction = parse_row({"type": "deposit", "client": "1", "tx": "1", "amount": "0.123456"})
        assert transaction.amount == Decimal("0.1235")

    def test_unknown_type_keeps_raw_token(self):
        transaction = parse_row({"type": "Transfer", "client": "1", "tx": "1", "amount": ""})

        assert transaction.transaction_type == TransactionType.UNKNOWN
        assert transaction.raw_type == "Transfer"
        assert transaction.amount is None

    @pytest.mark.parametrize("row", [
        {"type": "deposit", "client": "x", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "1_0", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "+1", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "1", "tx": " 2", "amount": "1"},
        {"type": "deposit", "client": "1", "tx": "", "amount": "1"},
        {"type": "deposit", "client": "-1", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "65536", "tx": "1", "amount": "1"},
        {"type": "deposit", "client": "1", "tx": "4294967296", "amount": "1"},
        {"type": "deposit", "client": "1", "tx": "1", "amount": "ten"},
        {"type": "deposit", "client": "1", "tx": "1", "amount": "NaN"},
        {"type": "deposit", "client": "1", "tx": "1", "amount": "Infinity"},
        {"client": "1", "tx": "1", "amount": "1"},
    ])
    def test_malformed_rows(self, row):
        with pytest.raises(ParseError):
            parse_row(row)


class TestReadRecords:
    def test_strips_whitespace(self):
        records = read("type , client ,tx, amount\n  deposit ,  1 ,  1 ,  2.0  \n")

        assert len(records) == 1
        assert records[0].fields == ["deposit", "1", "1", "2.0"]
        assert records[0].transaction.amount == Decimal("2")
        assert records[0].error is None

    def test_ragged_rows(self):
        records = read("type,client,tx,amount\ndispute,1,1\nresolve,1,1,,extra\n")

        assert [record.transaction.transaction_type for record in records] == [
            TransactionType.DISPUTE,
            TransactionType.RESOLVE,
        ]
        assert records[0].fields == ["dispute", "1", "1", ""]

    def test_blank_lines_skipped(self):
        records = read("type,client,tx,amount\n\ndeposit,1,1,1\n\n")
        assert len(records) == 1

    def test_parse_failure_yields_record_with_error(self):
        records = read("type,client,tx,amount\ndeposit,one,1,1\ndeposit,1,2,1\n")

        assert records[0].transaction is None
        assert isinstance(records[0].error, ParseError)
        assert records[0].fields == ["deposit", "one", "1", "1"]
        assert records[1].transaction is not None

    def test_empty_input(self):
        assert read("") == []

    def test_byte_order_mark_in_header(self):
        records = read("\ufefftype,client,tx,amount\ndeposit,1,1,5.0\n")

        assert records[0].error is None
        assert records[0].transaction.transaction_type == TransactionType.DEPOSIT
        assert records[0].fields == ["deposit", "1", "1", "5.0"]
