"""
Ledger Core

A policy-driven multi-account ledger: CHECKING and SAVINGS accounts with
per-type business rules, exact Decimal arithmetic, an append-only audit
trail of every attempted operation, atomic transfers, and a monthly
fee/interest batch.
"""

__version__ = "1.0.0"

from .accounts import Account, AccountSnapshot, AccountStatus, AccountType
from .exceptions import (
    AccountClosedError, AccountNotFoundError, AccountOpenError, BusinessRuleViolation,
    FailureCode, InsufficientFundsError, InvalidAmountError, InvalidOperationError,
    LedgerError, MinimumBalanceViolationError, WithdrawalLimitExceededError
)
from .ids import IdGenerator
from .ledger import Ledger, MonthlyProcessingReport, TransferResult
from .policies import AccountPolicy, CheckingPolicy, MonthlyAdjustment, SavingsPolicy, policy_for
from .transactions import Transaction, TransactionStatus, TransactionType

__all__ = [
    "Account", "AccountSnapshot", "AccountStatus", "AccountType",
    "AccountClosedError", "AccountNotFoundError", "AccountOpenError", "BusinessRuleViolation",
    "FailureCode", "InsufficientFundsError", "InvalidAmountError", "InvalidOperationError",
    "LedgerError", "MinimumBalanceViolationError", "WithdrawalLimitExceededError",
    "IdGenerator", "Ledger", "MonthlyProcessingReport", "TransferResult",
    "AccountPolicy", "CheckingPolicy", "MonthlyAdjustment", "SavingsPolicy", "policy_for",
    "Transaction", "TransactionStatus", "TransactionType",
]
