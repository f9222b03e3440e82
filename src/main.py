import logging
import sys

from ledger import LedgerEngine
from writer import write_accounts, write_failed_records

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

DEFAULT_FAILED_PATH = "failed.csv"


def main():
    if len(sys.argv) not in (2, 3):
        print("Usage: ledger <transactions.csv> [failed.csv]", file=sys.stderr)
        sys.exit(1)

    input_path = sys.argv[1]
    failed_path = sys.argv[2] if len(sys.argv) == 3 else DEFAULT_FAILED_PATH

    engine = LedgerEngine()
    try:
        accounts, failed_records = engine.process_file(input_path)
        with open(failed_path, "w", newline="") as f:
            write_failed_records(f, failed_records)
    except OSError as e:
        logger.error(f"Ledger run aborted: {e}")
        sys.exit(1)

    write_accounts(sys.stdout, accounts.values())

    print(f"Accounts: {len(accounts)}, Failed: {len(failed_records)}", file=sys.stderr)


if __name__ == "__main__":
    main()
