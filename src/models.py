from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
# 28 significant digits, 4 of them after the decimal point
MAX_AMOUNT_EXPONENT = 23


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class TransactionStatus(Enum):
    COMPLETED = "completed"
    DISPUTED = "disputed"
    RESOLVED = "resolved"


class ProcessingResult(Enum):
    SUCCESS = "success"
    TRANSACTION_ALREADY_EXISTS = "transaction_already_exists"
    TRANSACTION_ALREADY_DISPUTED = "transaction_already_disputed"
    TRANSACTION_NOT_DISPUTED = "transaction_not_disputed"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"


@dataclass
class Transaction:
    """
    A single input record.
    Deposits and withdrawals carry an amount; disputes, resolves and chargebacks never do.
    """

    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __post_init__(self):
        if not 0 <= self.client_id <= MAX_CLIENT_ID:
            raise ValueError(f"client id {self.client_id} out of range")
        if not 0 <= self.transaction_id <= MAX_TRANSACTION_ID:
            raise ValueError(f"transaction id {self.transaction_id} out of range")

        if self.transaction_type.carries_amount:
            if self.amount is None:
                raise ValueError(f"{self.transaction_type.value} requires an amount")
            if not self.amount.is_finite():
                raise ValueError(f"amount {self.amount} is not finite")
            if self.amount.adjusted() > MAX_AMOUNT_EXPONENT:
                raise ValueError(f"amount {self.amount} is too large")
        elif self.amount is not None:
            raise ValueError(f"{self.transaction_type.value} must not carry an amount")

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class TransactionState:
    """
    History entry for a deposit or withdrawal.
    Amount is signed: positive for deposits, negative for withdrawals.
    """

    status: TransactionStatus
    amount: Decimal

    @classmethod
    def completed(cls, amount: Decimal) -> "TransactionState":
        return cls(status=TransactionStatus.COMPLETED, amount=amount)

    def mark_disputed(self) -> None:
        self.status = TransactionStatus.DISPUTED

    def mark_resolved(self) -> None:
        self.status = TransactionStatus.RESOLVED


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        self.available -= amount
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount


@dataclass(frozen=True)
class RejectedTransaction:
    transaction: Transaction
    result: ProcessingResult


@dataclass
class ProcessingStats:
    """Counters for a single replay run."""

    processed: int = 0
    rejected: int = 0
    malformed: int = 0
    rejections_by_result: Counter = field(default_factory=Counter)

    def record_success(self) -> None:
        self.processed += 1

    def record_rejection(self, result: ProcessingResult) -> None:
        self.rejected += 1
        self.rejections_by_result[result] += 1

    def record_malformed(self) -> None:
        self.malformed += 1
