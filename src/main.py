import logging
import os
import sys
from decimal import Decimal, localcontext
from typing import Dict

from ledger_engine import LedgerEngine
from models import ClientAccount

DEFAULT_LOG_LEVEL = "WARNING"
OUTPUT_PRECISION = Decimal("0.0001")


def configure_logging() -> None:
    level_name = os.getenv("LEDGER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.getLevelName(DEFAULT_LOG_LEVEL)

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def format_decimal(value: Decimal) -> str:
    """Format decimal with up to 4 decimal places, removing trailing zeros."""
    with localcontext() as ctx:
        # Balances summed from many large amounts can outgrow the default 28 digits.
        ctx.prec = max(ctx.prec, value.adjusted() + 5)
        normalized = value.quantize(OUTPUT_PRECISION).normalize()
    if normalized.is_zero():
        normalized = Decimal("0")
    return f"{normalized:f}"


def write_accounts(accounts: Dict[int, ClientAccount], out=None) -> None:
    out = out if out is not None else sys.stdout
    print("client,available,held,total,locked", file=out)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        print(
            f"{client_id},"
            f"{format_decimal(account.available)},"
            f"{format_decimal(account.held)},"
            f"{format_decimal(account.total)},"
            f"{str(account.locked).lower()}",
            file=out,
        )


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: ledger-replay <input.csv>", file=sys.stderr)
        sys.exit(1)

    configure_logging()

    filepath = argv[0]
    engine = LedgerEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        print(f"Could not read {filepath}: {e}", file=sys.stderr)
        sys.exit(1)

    write_accounts(accounts)

    stats = engine.stats
    print(
        f"Processed: {stats.processed}, "
        f"Rejected: {stats.rejected}, "
        f"Malformed: {stats.malformed}",
        file=sys.stderr,
    )


if __name__ == "__main__":
    main()
