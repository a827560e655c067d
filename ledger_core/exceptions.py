"""
Ledger Error Hierarchy

Two families of errors are kept apart:

- Structural errors (unknown account, closed account, malformed amount,
  self-transfer, bad opening request) are raised to the caller and never
  leave a record in any account history.
- Business-rule violations (insufficient funds, minimum balance, withdrawal
  limit) are raised by account policies and caught by the Ledger, which turns
  them into FAILED transactions returned to the caller.
"""

from decimal import Decimal
from enum import Enum


class FailureCode(Enum):
    """Machine-readable reason carried by a FAILED transaction"""
    INSUFFICIENT_FUNDS = "insufficient_funds"
    MINIMUM_BALANCE_VIOLATION = "minimum_balance_violation"
    WITHDRAWAL_LIMIT_EXCEEDED = "withdrawal_limit_exceeded"


class LedgerError(Exception):
    """Base class for every error raised by the ledger"""


# Structural errors

class AccountNotFoundError(LedgerError):
    """No account exists under the given account number"""

    def __init__(self, account_number: str):
        super().__init__(f"Account not found: {account_number}")
        self.account_number = account_number


class AccountClosedError(LedgerError):
    """Operation attempted against a CLOSED account"""

    def __init__(self, account_number: str):
        super().__init__(f"Account {account_number} is closed")
        self.account_number = account_number


class InvalidAmountError(LedgerError, ValueError):
    """Amount is non-positive, non-numeric, or has more than two decimal places"""


class InvalidOperationError(LedgerError):
    """Request that makes no sense regardless of account state (e.g. self-transfer)"""


class AccountOpenError(LedgerError, ValueError):
    """Account could not be opened: bad customer name or initial deposit"""


# Business-rule violations

class BusinessRuleViolation(LedgerError):
    """A policy check failed against a valid, open account"""
    code: FailureCode

    def __init__(self, message: str, account_number: str):
        super().__init__(message)
        self.account_number = account_number


class InsufficientFundsError(BusinessRuleViolation):
    code = FailureCode.INSUFFICIENT_FUNDS

    def __init__(self, account_number: str, requested: Decimal, available: Decimal):
        super().__init__(
            f"Insufficient funds in account {account_number}. "
            f"Requested: ${requested}, Available: ${available}",
            account_number
        )
        self.requested = requested
        self.available = available


class MinimumBalanceViolationError(BusinessRuleViolation):
    code = FailureCode.MINIMUM_BALANCE_VIOLATION

    def __init__(self, account_number: str, minimum_required: Decimal, resulting_balance: Decimal):
        super().__init__(
            f"Minimum balance violation in account {account_number}. "
            f"Minimum required: ${minimum_required}, "
            f"Resulting balance would be: ${resulting_balance}",
            account_number
        )
        self.minimum_required = minimum_required
        self.resulting_balance = resulting_balance


class WithdrawalLimitExceededError(BusinessRuleViolation):
    code = FailureCode.WITHDRAWAL_LIMIT_EXCEEDED

    def __init__(self, account_number: str, current_count: int, max_allowed: int):
        super().__init__(
            f"Withdrawal limit exceeded for account {account_number}. "
            f"Current withdrawals: {current_count}, "
            f"Maximum allowed: {max_allowed} per month",
            account_number
        )
        self.current_count = current_count
        self.max_allowed = max_allowed
