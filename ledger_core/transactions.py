"""
Transaction Record Module

Immutable audit records. Every mutating operation that reaches a valid
account produces exactly one Transaction, successful or not. A Transaction
cannot be constructed in an invalid state and cannot be changed afterwards.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from enum import Enum

from .exceptions import FailureCode
from .money import has_valid_precision


class TransactionType(Enum):
    """Types of ledger transactions"""
    DEPOSIT = "deposit"        # Customer deposit (including the opening deposit)
    WITHDRAWAL = "withdrawal"  # Direct customer withdrawal
    TRANSFER = "transfer"      # One leg of an account-to-account transfer
    FEE = "fee"                # Monthly service fee (system-generated)
    INTEREST = "interest"      # Monthly interest credit (system-generated)


class TransactionStatus(Enum):
    """Outcome of an attempted transaction"""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True, eq=False)
class Transaction:
    """
    One audit record per attempted mutating operation.

    For FAILED transactions balance_before equals balance_after and a
    failure_reason is always present. Identity is the transaction_id.
    """
    transaction_id: str
    account_number: str
    transaction_type: TransactionType
    amount: Decimal
    balance_before: Decimal
    balance_after: Decimal
    status: TransactionStatus = TransactionStatus.SUCCESS
    failure_reason: Optional[str] = None
    failure_code: Optional[FailureCode] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.transaction_id or not self.transaction_id.strip():
            raise ValueError("Transaction ID cannot be empty")

        if not self.account_number or not self.account_number.strip():
            raise ValueError("Account number cannot be empty")

        if not isinstance(self.transaction_type, TransactionType):
            raise ValueError(f"Invalid transaction type: {self.transaction_type!r}")

        if not isinstance(self.status, TransactionStatus):
            raise ValueError(f"Invalid transaction status: {self.status!r}")

        for name in ('amount', 'balance_before', 'balance_after'):
            if not isinstance(getattr(self, name), Decimal):
                raise ValueError(f"Transaction {name} must be a Decimal")

        if self.amount <= Decimal('0'):
            raise ValueError(f"Transaction amount must be positive, got: {self.amount}")

        if not has_valid_precision(self.amount):
            raise ValueError("Transaction amount cannot have more than 2 decimal places")

        if self.status == TransactionStatus.FAILED:
            if not self.failure_reason:
                raise ValueError("Failed transaction must have a failure reason")
            if self.balance_before != self.balance_after:
                raise ValueError("Failed transaction cannot change the balance")
        elif self.failure_reason is not None or self.failure_code is not None:
            raise ValueError("Successful transaction cannot carry a failure reason")

        if self.timestamp.tzinfo is None:
            raise ValueError("Transaction timestamp must be timezone-aware")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Transaction):
            return NotImplemented
        return self.transaction_id == other.transaction_id

    def __hash__(self) -> int:
        return hash(self.transaction_id)

    @property
    def is_successful(self) -> bool:
        return self.status == TransactionStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.status == TransactionStatus.FAILED

    @property
    def balance_change(self) -> Decimal:
        """Signed effect of this transaction on the account balance"""
        return self.balance_after - self.balance_before

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-safe dictionary"""
        return {
            'transaction_id': self.transaction_id,
            'account_number': self.account_number,
            'transaction_type': self.transaction_type.value,
            'amount': str(self.amount),
            'balance_before': str(self.balance_before),
            'balance_after': str(self.balance_after),
            'status': self.status.value,
            'failure_reason': self.failure_reason,
            'failure_code': self.failure_code.value if self.failure_code else None,
            'timestamp': self.timestamp.isoformat()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Transaction':
        """Create Transaction from dictionary produced by to_dict()"""
        failure_code = data.get('failure_code')
        timestamp = data['timestamp']
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)

        return cls(
            transaction_id=data['transaction_id'],
            account_number=data['account_number'],
            transaction_type=TransactionType(data['transaction_type']),
            amount=Decimal(data['amount']),
            balance_before=Decimal(data['balance_before']),
            balance_after=Decimal(data['balance_after']),
            status=TransactionStatus(data['status']),
            failure_reason=data.get('failure_reason'),
            failure_code=FailureCode(failure_code) if failure_code else None,
            timestamp=timestamp
        )
