"""
Account Policy Module

Per-account-type business rules as stateless strategies. A policy validates
withdrawals (raising a BusinessRuleViolation) and computes the monthly
adjustment as a pure function of account state; the Ledger applies the result.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from dataclasses import dataclass
from typing import Optional

from .accounts import Account, AccountType
from .config import LedgerConfig, get_config
from .exceptions import (
    InsufficientFundsError, InvalidOperationError, MinimumBalanceViolationError,
    WithdrawalLimitExceededError
)
from .money import ZERO, quantize_cents
from .transactions import TransactionType


@dataclass(frozen=True)
class MonthlyAdjustment:
    """Fee or interest owed for one account for one cycle"""
    transaction_type: TransactionType
    amount: Decimal

    @property
    def is_zero(self) -> bool:
        return self.amount == ZERO


class AccountPolicy(ABC):
    """Strategy interface shared by all account types"""

    account_type: AccountType

    @property
    @abstractmethod
    def minimum_opening_deposit(self) -> Decimal:
        """Smallest initial deposit accepted when opening an account"""

    @abstractmethod
    def validate_withdrawal(self, account: Account, amount: Decimal) -> None:
        """Raise a BusinessRuleViolation if the debit is not allowed"""

    @abstractmethod
    def compute_monthly_adjustment(self, account: Account) -> MonthlyAdjustment:
        """Fee or interest for the cycle; no side effects"""

    @abstractmethod
    def describe_rules(self) -> str:
        """Human-readable summary of the rules, used on statements"""

    @staticmethod
    def _check_funds(account: Account, amount: Decimal) -> None:
        if amount > account.balance:
            raise InsufficientFundsError(account.account_number, amount, account.balance)


@dataclass(frozen=True)
class CheckingPolicy(AccountPolicy):
    """
    CHECKING rules: no minimum balance, unlimited withdrawals, a flat fee for
    every transaction beyond the free allowance in a month.
    """
    transaction_fee: Decimal = Decimal('2.50')
    free_transactions: int = 10

    account_type = AccountType.CHECKING

    @property
    def minimum_opening_deposit(self) -> Decimal:
        return ZERO

    def validate_withdrawal(self, account: Account, amount: Decimal) -> None:
        self._check_funds(account, amount)

    def compute_monthly_adjustment(self, account: Account) -> MonthlyAdjustment:
        chargeable = max(0, account.monthly_transaction_count - self.free_transactions)
        fee = quantize_cents(self.transaction_fee * chargeable)
        return MonthlyAdjustment(TransactionType.FEE, fee)

    def describe_rules(self) -> str:
        return (
            "CHECKING Account Rules:\n"
            "  - No minimum balance requirement\n"
            f"  - First {self.free_transactions} transactions per month are free\n"
            f"  - ${self.transaction_fee} fee for each transaction after {self.free_transactions}\n"
            "  - No interest earned\n"
            "  - Unlimited withdrawals"
        )


@dataclass(frozen=True)
class SavingsPolicy(AccountPolicy):
    """
    SAVINGS rules: a floor under the balance, a cap on direct withdrawals per
    month, and flat monthly interest on the whole balance.
    """
    minimum_balance: Decimal = Decimal('100.00')
    monthly_interest_rate: Decimal = Decimal('0.02')
    max_withdrawals_per_month: int = 5

    account_type = AccountType.SAVINGS

    @property
    def minimum_opening_deposit(self) -> Decimal:
        return self.minimum_balance

    def validate_withdrawal(self, account: Account, amount: Decimal) -> None:
        # Order matters: only the first failing check is reported
        self._check_funds(account, amount)

        resulting_balance = account.balance - amount
        if resulting_balance < self.minimum_balance:
            raise MinimumBalanceViolationError(
                account.account_number, self.minimum_balance, resulting_balance
            )

        if account.monthly_withdrawal_count >= self.max_withdrawals_per_month:
            raise WithdrawalLimitExceededError(
                account.account_number,
                account.monthly_withdrawal_count,
                self.max_withdrawals_per_month
            )

    def compute_monthly_adjustment(self, account: Account) -> MonthlyAdjustment:
        interest = quantize_cents(account.balance * self.monthly_interest_rate)
        return MonthlyAdjustment(TransactionType.INTEREST, interest)

    def describe_rules(self) -> str:
        rate_percent = (self.monthly_interest_rate * 100).normalize()
        return (
            "SAVINGS Account Rules:\n"
            f"  - ${self.minimum_balance} minimum balance required\n"
            f"  - {rate_percent:f}% monthly interest on entire balance\n"
            f"  - Maximum {self.max_withdrawals_per_month} withdrawals per month\n"
            "  - Transfers do NOT count toward withdrawal limit\n"
            "  - No transaction fees"
        )


def policy_for(account_type: AccountType, config: Optional[LedgerConfig] = None) -> AccountPolicy:
    """
    Select the policy for an account type.

    This is the single dispatch point: adding an account type means adding a
    policy class and a branch here.
    """
    config = config or get_config()

    if account_type == AccountType.CHECKING:
        return CheckingPolicy(
            transaction_fee=Decimal(config.checking_transaction_fee),
            free_transactions=config.checking_free_transactions
        )
    if account_type == AccountType.SAVINGS:
        return SavingsPolicy(
            minimum_balance=Decimal(config.savings_minimum_balance),
            monthly_interest_rate=Decimal(config.savings_monthly_interest_rate),
            max_withdrawals_per_month=config.savings_max_withdrawals_per_month
        )
    raise InvalidOperationError(f"No policy for account type: {account_type!r}")
