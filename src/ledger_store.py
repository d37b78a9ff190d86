from typing import Dict, Iterator, Optional, Tuple

from models import ClientAccount, TransactionState


class LedgerStore:
    """
    In-memory state for a replay run.
    Owns client accounts and the history of every deposit and withdrawal.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, TransactionState] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create a zeroed one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def lookup_transaction(self, transaction_id: int) -> Optional[TransactionState]:
        """Retrieve the history entry for a transaction ID."""
        return self._transactions.get(transaction_id)

    def insert_transaction_if_absent(self, transaction_id: int, state: TransactionState) -> bool:
        """
        Store a new history entry.
        Returns False, leaving the existing entry untouched, if the ID is already taken.
        """
        if transaction_id in self._transactions:
            return False
        self._transactions[transaction_id] = state
        return True

    def all_accounts(self) -> Iterator[Tuple[int, ClientAccount]]:
        """Yield every known account, ordered by client ID."""
        for client_id in sorted(self._accounts):
            yield client_id, self._accounts[client_id]

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self.all_accounts())
