"""
Account Entity Module

An Account holds its balance, status, monthly counters and its own
append-only transaction history. It performs only mechanical mutations:
business rules (minimum balance, withdrawal caps, fees, interest) live in
the account policies and are applied by the Ledger before calling in here.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum
import threading

from .exceptions import (
    AccountClosedError, FailureCode, InsufficientFundsError, InvalidAmountError
)
from .money import ZERO, has_valid_precision, quantize_cents
from .transactions import Transaction, TransactionStatus, TransactionType


class AccountType(Enum):
    """Account product types, each governed by its own policy"""
    CHECKING = "checking"
    SAVINGS = "savings"


class AccountStatus(Enum):
    """Account lifecycle states. Only ACTIVE -> CLOSED is allowed."""
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(frozen=True)
class AccountSnapshot:
    """Read-only view of an account at one point in time"""
    account_number: str
    customer_name: str
    account_type: AccountType
    balance: Decimal
    status: AccountStatus
    monthly_transaction_count: int
    monthly_withdrawal_count: int
    opened_at: datetime
    transactions: Tuple[Transaction, ...]

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    def to_dict(self, include_transactions: bool = False) -> Dict[str, Any]:
        result = {
            'account_number': self.account_number,
            'customer_name': self.customer_name,
            'account_type': self.account_type.value,
            'balance': str(self.balance),
            'status': self.status.value,
            'monthly_transaction_count': self.monthly_transaction_count,
            'monthly_withdrawal_count': self.monthly_withdrawal_count,
            'opened_at': self.opened_at.isoformat(),
            'transaction_count': len(self.transactions)
        }
        if include_transactions:
            result['transactions'] = [txn.to_dict() for txn in self.transactions]
        return result


class Account:
    """
    Bank account entity identified by its account number.

    Every public mutator takes the account's reentrant lock, so a single
    account is always internally consistent. The Ledger holds the same lock
    (via ``account.lock``) around check-then-act sequences and transfers.
    """

    def __init__(self, account_number: str, customer_name: str, account_type: AccountType):
        if not account_number or not account_number.strip():
            raise ValueError("Account number cannot be empty")
        if not customer_name or not customer_name.strip():
            raise ValueError("Customer name cannot be empty")
        if not isinstance(account_type, AccountType):
            raise ValueError(f"Invalid account type: {account_type!r}")

        self._account_number = account_number
        self._customer_name = customer_name.strip()
        self._account_type = account_type
        self._balance = ZERO
        self._status = AccountStatus.ACTIVE
        self._monthly_transaction_count = 0
        self._monthly_withdrawal_count = 0
        self._history: List[Transaction] = []
        self._opened_at = datetime.now(timezone.utc)
        self._lock = threading.RLock()

    # Read access

    @property
    def account_number(self) -> str:
        return self._account_number

    @property
    def customer_name(self) -> str:
        return self._customer_name

    @property
    def account_type(self) -> AccountType:
        return self._account_type

    @property
    def balance(self) -> Decimal:
        return self._balance

    @property
    def status(self) -> AccountStatus:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status == AccountStatus.ACTIVE

    @property
    def monthly_transaction_count(self) -> int:
        return self._monthly_transaction_count

    @property
    def monthly_withdrawal_count(self) -> int:
        return self._monthly_withdrawal_count

    @property
    def opened_at(self) -> datetime:
        return self._opened_at

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def transaction_history(self) -> Tuple[Transaction, ...]:
        """Chronological history; a tuple so callers cannot append to it"""
        with self._lock:
            return tuple(self._history)

    def snapshot(self) -> AccountSnapshot:
        with self._lock:
            return AccountSnapshot(
                account_number=self._account_number,
                customer_name=self._customer_name,
                account_type=self._account_type,
                balance=self._balance,
                status=self._status,
                monthly_transaction_count=self._monthly_transaction_count,
                monthly_withdrawal_count=self._monthly_withdrawal_count,
                opened_at=self._opened_at,
                transactions=tuple(self._history)
            )

    # Customer-initiated mutations

    def opening_deposit(self, amount: Decimal, transaction_id: str) -> Transaction:
        """Record the initial deposit; allowed only as the first entry and not counted as monthly activity"""
        with self._lock:
            if self._history:
                raise ValueError(f"Account {self._account_number} already has an opening entry")
            self._require_active()
            self._validate_amount(amount)
            return self._apply(TransactionType.DEPOSIT, amount, transaction_id, amount)

    def deposit(self, amount: Decimal, transaction_id: str) -> Transaction:
        """Credit the account. Fails without a history entry on bad input or closed account."""
        with self._lock:
            self._require_active()
            self._validate_amount(amount)
            txn = self._apply(TransactionType.DEPOSIT, amount, transaction_id, amount)
            self._monthly_transaction_count += 1
            return txn

    def withdraw(self, amount: Decimal, transaction_id: str) -> Transaction:
        """
        Debit the account. Policy rules are NOT checked here; the only guard
        is that the balance can never go below zero. The withdrawal count is
        only kept for SAVINGS, the one type with a withdrawal limit.
        """
        with self._lock:
            self._require_active()
            self._validate_amount(amount)
            self._require_funds(amount)
            txn = self._apply(TransactionType.WITHDRAWAL, amount, transaction_id, -amount)
            self._monthly_transaction_count += 1
            if self._account_type == AccountType.SAVINGS:
                self._monthly_withdrawal_count += 1
            return txn

    def transfer_out(self, amount: Decimal, transaction_id: str) -> Transaction:
        """Source leg of a transfer; never counts toward the withdrawal limit"""
        with self._lock:
            self._require_active()
            self._validate_amount(amount)
            self._require_funds(amount)
            txn = self._apply(TransactionType.TRANSFER, amount, transaction_id, -amount)
            self._monthly_transaction_count += 1
            return txn

    def transfer_in(self, amount: Decimal, transaction_id: str) -> Transaction:
        """Destination leg of a transfer"""
        with self._lock:
            self._require_active()
            self._validate_amount(amount)
            txn = self._apply(TransactionType.TRANSFER, amount, transaction_id, amount)
            self._monthly_transaction_count += 1
            return txn

    def record_failed_transaction(
        self,
        transaction_type: TransactionType,
        attempted_amount: Decimal,
        reason: str,
        transaction_id: str,
        failure_code: Optional[FailureCode] = None
    ) -> Transaction:
        """Append a FAILED record; balance and counters are untouched"""
        with self._lock:
            self._require_active()
            txn = Transaction(
                transaction_id=transaction_id,
                account_number=self._account_number,
                transaction_type=transaction_type,
                amount=attempted_amount,
                balance_before=self._balance,
                balance_after=self._balance,
                status=TransactionStatus.FAILED,
                failure_reason=reason,
                failure_code=failure_code
            )
            self._history.append(txn)
            return txn

    # System-generated mutations (monthly batch only)

    def apply_fee(self, amount: Decimal, transaction_id: str) -> Transaction:
        """Charge a fee. Does not count as a customer transaction."""
        with self._lock:
            self._require_active()
            self._validate_amount(amount)
            self._require_funds(amount)
            return self._apply(TransactionType.FEE, amount, transaction_id, -amount)

    def apply_interest(self, amount: Decimal, transaction_id: str) -> Transaction:
        """Credit interest. Does not count as a customer transaction."""
        with self._lock:
            self._require_active()
            self._validate_amount(amount)
            return self._apply(TransactionType.INTEREST, amount, transaction_id, amount)

    def reset_monthly_counters(self) -> None:
        with self._lock:
            self._monthly_transaction_count = 0
            self._monthly_withdrawal_count = 0

    # Lifecycle

    def can_be_closed(self) -> bool:
        """True iff the balance is exactly zero"""
        return self._balance == ZERO

    def close(self) -> None:
        with self._lock:
            self._require_active()
            if not self.can_be_closed():
                raise ValueError(
                    f"Cannot close account {self._account_number} with non-zero balance: ${self._balance}"
                )
            self._status = AccountStatus.CLOSED

    # Internals

    def _apply(self, transaction_type: TransactionType, amount: Decimal,
               transaction_id: str, delta: Decimal) -> Transaction:
        balance_before = self._balance
        balance_after = quantize_cents(balance_before + delta)
        txn = Transaction(
            transaction_id=transaction_id,
            account_number=self._account_number,
            transaction_type=transaction_type,
            amount=amount,
            balance_before=balance_before,
            balance_after=balance_after
        )
        self._balance = balance_after
        self._history.append(txn)
        return txn

    def _require_active(self) -> None:
        if self._status != AccountStatus.ACTIVE:
            raise AccountClosedError(self._account_number)

    def _require_funds(self, amount: Decimal) -> None:
        if amount > self._balance:
            raise InsufficientFundsError(self._account_number, amount, self._balance)

    @staticmethod
    def _validate_amount(amount: Decimal) -> None:
        if not isinstance(amount, Decimal):
            raise InvalidAmountError(f"Amount must be a Decimal, got {type(amount).__name__}")
        if not amount.is_finite() or amount <= ZERO:
            raise InvalidAmountError(f"Amount must be positive, got: {amount}")
        if not has_valid_precision(amount):
            raise InvalidAmountError("Amount cannot have more than 2 decimal places")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self._account_number == other._account_number

    def __hash__(self) -> int:
        return hash(self._account_number)

    def __repr__(self) -> str:
        return (
            f"Account(account_number={self._account_number!r}, type={self._account_type.value}, "
            f"customer={self._customer_name!r}, balance={self._balance}, status={self._status.value})"
        )
