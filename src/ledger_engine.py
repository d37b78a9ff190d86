import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, List, Optional

from models import Transaction, TransactionType, ClientAccount, ProcessingResult, ProcessingStats, RejectedTransaction
from ledger_store import LedgerStore
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Replays a transaction log against a fresh LedgerStore.
    Transactions are applied strictly in input order; rejections are collected, never fatal.
    """

    def __init__(self, store: Optional[LedgerStore] = None):
        self._store = store if store is not None else LedgerStore()
        self._processor = TransactionProcessor(self._store)
        self._stats = ProcessingStats()
        self._rejected: List[RejectedTransaction] = []

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    @property
    def rejected(self) -> List[RejectedTransaction]:
        """Every transaction the processor turned down, in input order."""
        return list(self._rejected)

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Replaying transactions from {filepath}")
        with open(filepath, "r", newline="") as f:
            accounts = self.process_transactions(self._read_transactions(f))
        logger.info(
            f"Replay complete: {self._stats.processed} processed, "
            f"{self._stats.rejected} rejected, {self._stats.malformed} malformed"
        )
        return accounts

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        for transaction in transactions:
            result = self._processor.process_transaction(transaction)

            if result == ProcessingResult.SUCCESS:
                self._stats.record_success()
            else:
                self._stats.record_rejection(result)
                self._rejected.append(RejectedTransaction(transaction, result))

        return self._store.get_all_accounts()

    def _read_transactions(self, lines: Iterable[str]) -> Iterator[Transaction]:
        """Parse CSV rows lazily, skipping the ones that cannot be turned into a Transaction."""
        reader = csv.DictReader(lines)
        for row in reader:
            transaction = self._parse_csv_row(row)
            if transaction is None:
                self._stats.record_malformed()
                continue
            yield transaction

    def _parse_csv_row(self, row: Dict[str, str]) -> Optional[Transaction]:
        """Parse CSV row into Transaction."""
        try:
            # Short rows leave trailing values as None; surplus values land under a None key.
            normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

            transaction_type = TransactionType(normalized["type"].lower())
            client_id = int(normalized["client"])
            transaction_id = int(normalized["tx"])

            amount = None
            amount_str = normalized.get("amount", "")
            if transaction_type.carries_amount and amount_str:
                amount = Decimal(amount_str)

            return Transaction(
                transaction_type=transaction_type,
                client_id=client_id,
                transaction_id=transaction_id,
                amount=amount,
            )
        except (KeyError, ValueError, InvalidOperation) as e:
            logger.warning(f"Failed to parse row {row}: {e}")
            return None
