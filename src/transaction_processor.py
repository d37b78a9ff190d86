import logging

from models import Transaction, TransactionType, TransactionState, TransactionStatus, ProcessingResult
from ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to a LedgerStore, one at a time, in input order.
    Returns ProcessingResult.SUCCESS or the reason the transaction was rejected.
    A rejected transaction leaves balances and history untouched.
    """

    def __init__(self, store: LedgerStore):
        self._store = store

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(transaction)

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        account = self._store.get_or_create_account(transaction.client_id)

        if not self._store.insert_transaction_if_absent(
            transaction.transaction_id, TransactionState.completed(transaction.amount)
        ):
            logger.warning(f"Deposit tx {transaction.transaction_id}: transaction ID already used")
            return ProcessingResult.TRANSACTION_ALREADY_EXISTS

        account.credit(transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        account = self._store.get_or_create_account(transaction.client_id)

        if account.available < transaction.amount:
            logger.warning(
                f"Withdrawal tx {transaction.transaction_id}: insufficient funds "
                f"(available {account.available}, requested {transaction.amount})"
            )
            return ProcessingResult.INSUFFICIENT_FUNDS

        if not self._store.insert_transaction_if_absent(
            transaction.transaction_id, TransactionState.completed(-transaction.amount)
        ):
            logger.warning(f"Withdrawal tx {transaction.transaction_id}: transaction ID already used")
            return ProcessingResult.TRANSACTION_ALREADY_EXISTS

        account.debit(transaction.amount)
        return ProcessingResult.SUCCESS

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        original = self._store.lookup_transaction(transaction.transaction_id)

        if original is None:
            logger.warning(f"Dispute for tx {transaction.transaction_id}: transaction not found")
            return ProcessingResult.TRANSACTION_NOT_FOUND

        # The disputing client's account is the one adjusted; ownership of the original is not checked.
        account = self._store.get_or_create_account(transaction.client_id)

        if original.status != TransactionStatus.COMPLETED:
            logger.warning(f"Dispute for tx {transaction.transaction_id}: transaction is {original.status.value}")
            return ProcessingResult.TRANSACTION_ALREADY_DISPUTED

        original.mark_disputed()
        account.hold(original.amount)
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        original = self._store.lookup_transaction(transaction.transaction_id)

        if original is None:
            logger.warning(f"Resolve for tx {transaction.transaction_id}: transaction not found")
            return ProcessingResult.TRANSACTION_NOT_FOUND

        account = self._store.get_or_create_account(transaction.client_id)

        if original.status != TransactionStatus.DISPUTED:
            logger.warning(f"Resolve for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.TRANSACTION_NOT_DISPUTED

        original.mark_resolved()
        account.release_hold(original.amount)
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        original = self._store.lookup_transaction(transaction.transaction_id)

        if original is None:
            logger.warning(f"Chargeback for tx {transaction.transaction_id}: transaction not found")
            return ProcessingResult.TRANSACTION_NOT_FOUND

        account = self._store.get_or_create_account(transaction.client_id)

        if original.status != TransactionStatus.DISPUTED:
            logger.warning(f"Chargeback for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.TRANSACTION_NOT_DISPUTED

        original.mark_resolved()
        account.remove_held(original.amount)
        account.locked = True
        return ProcessingResult.SUCCESS
