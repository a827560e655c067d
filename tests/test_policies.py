"""
Test suite for account policies

Tests withdrawal validation order, monthly fee/interest computation and
policy selection by account type.
"""

import pytest
from decimal import Decimal

from ledger_core.accounts import Account, AccountType
from ledger_core.config import LedgerConfig
from ledger_core.exceptions import (
    FailureCode, InsufficientFundsError, InvalidOperationError,
    MinimumBalanceViolationError, WithdrawalLimitExceededError
)
from ledger_core.policies import CheckingPolicy, SavingsPolicy, policy_for
from ledger_core.transactions import TransactionType


def funded_account(account_type, amount):
    account = Account("ACC-00000001", "Test Customer", account_type)
    account.opening_deposit(Decimal(amount), "TXN-0")
    return account


class TestCheckingPolicy:
    """Test CHECKING rules"""

    def setup_method(self):
        self.policy = CheckingPolicy()

    def test_no_opening_minimum(self):
        assert self.policy.minimum_opening_deposit == Decimal('0.00')

    def test_withdrawal_down_to_zero_allowed(self):
        account = funded_account(AccountType.CHECKING, '50.00')
        self.policy.validate_withdrawal(account, Decimal('50.00'))

    def test_withdrawal_beyond_balance_rejected(self):
        account = funded_account(AccountType.CHECKING, '50.00')

        with pytest.raises(InsufficientFundsError) as exc_info:
            self.policy.validate_withdrawal(account, Decimal('50.01'))
        assert exc_info.value.code == FailureCode.INSUFFICIENT_FUNDS

    def test_unlimited_withdrawals(self):
        account = funded_account(AccountType.CHECKING, '100.00')
        for i in range(20):
            account.withdraw(Decimal('1.00'), f"TXN-{i + 1}")

        self.policy.validate_withdrawal(account, Decimal('1.00'))

    @pytest.mark.parametrize("count,expected_fee", [
        (0, Decimal('0.00')),
        (10, Decimal('0.00')),
        (11, Decimal('2.50')),
        (25, Decimal('37.50')),
    ])
    def test_monthly_fee(self, count, expected_fee):
        account = funded_account(AccountType.CHECKING, '1.00')
        for i in range(count):
            account.deposit(Decimal('1.00'), f"TXN-{i + 1}")

        adjustment = self.policy.compute_monthly_adjustment(account)

        assert adjustment.transaction_type == TransactionType.FEE
        assert adjustment.amount == expected_fee
        assert adjustment.is_zero == (expected_fee == Decimal('0.00'))

    def test_monthly_fee_is_pure(self):
        account = funded_account(AccountType.CHECKING, '10.00')

        self.policy.compute_monthly_adjustment(account)

        assert account.balance == Decimal('10.00')
        assert len(account.transaction_history) == 1

    def test_describe_rules(self):
        rules = self.policy.describe_rules()

        assert rules.startswith("CHECKING Account Rules:")
        assert "First 10 transactions per month are free" in rules
        assert "$2.50 fee" in rules


class TestSavingsPolicy:
    """Test SAVINGS rules"""

    def setup_method(self):
        self.policy = SavingsPolicy()

    def test_opening_minimum_is_minimum_balance(self):
        assert self.policy.minimum_opening_deposit == Decimal('100.00')

    def test_withdrawal_to_exact_minimum_allowed(self):
        account = funded_account(AccountType.SAVINGS, '500.00')
        self.policy.validate_withdrawal(account, Decimal('400.00'))

    def test_withdrawal_below_minimum_rejected(self):
        account = funded_account(AccountType.SAVINGS, '500.00')

        with pytest.raises(MinimumBalanceViolationError) as exc_info:
            self.policy.validate_withdrawal(account, Decimal('400.01'))

        assert exc_info.value.code == FailureCode.MINIMUM_BALANCE_VIOLATION
        assert exc_info.value.resulting_balance == Decimal('99.99')

    def test_insufficient_funds_reported_before_minimum_balance(self):
        account = funded_account(AccountType.SAVINGS, '150.00')

        with pytest.raises(InsufficientFundsError):
            self.policy.validate_withdrawal(account, Decimal('200.00'))

    def test_sixth_withdrawal_rejected(self):
        account = funded_account(AccountType.SAVINGS, '1000.00')
        for i in range(5):
            self.policy.validate_withdrawal(account, Decimal('10.00'))
            account.withdraw(Decimal('10.00'), f"TXN-{i + 1}")

        with pytest.raises(WithdrawalLimitExceededError) as exc_info:
            self.policy.validate_withdrawal(account, Decimal('10.00'))

        assert exc_info.value.code == FailureCode.WITHDRAWAL_LIMIT_EXCEEDED
        assert exc_info.value.current_count == 5
        assert exc_info.value.max_allowed == 5

    def test_minimum_balance_reported_before_limit(self):
        account = funded_account(AccountType.SAVINGS, '1000.00')
        for i in range(5):
            account.withdraw(Decimal('10.00'), f"TXN-{i + 1}")

        with pytest.raises(MinimumBalanceViolationError):
            self.policy.validate_withdrawal(account, Decimal('900.00'))

    @pytest.mark.parametrize("balance,expected_interest", [
        ('500.00', Decimal('10.00')),
        ('10000.00', Decimal('200.00')),
        ('100.25', Decimal('2.01')),
    ])
    def test_monthly_interest(self, balance, expected_interest):
        account = funded_account(AccountType.SAVINGS, balance)

        adjustment = self.policy.compute_monthly_adjustment(account)

        assert adjustment.transaction_type == TransactionType.INTEREST
        assert adjustment.amount == expected_interest

    def test_describe_rules(self):
        rules = self.policy.describe_rules()

        assert rules.startswith("SAVINGS Account Rules:")
        assert "$100.00 minimum balance" in rules
        assert "2% monthly interest" in rules
        assert "Maximum 5 withdrawals per month" in rules


class TestPolicyFor:
    """Test policy selection"""

    def test_selects_by_type(self):
        assert isinstance(policy_for(AccountType.CHECKING), CheckingPolicy)
        assert isinstance(policy_for(AccountType.SAVINGS), SavingsPolicy)

    def test_uses_configured_values(self):
        config = LedgerConfig(
            checking_transaction_fee="1.00",
            checking_free_transactions=3,
            savings_minimum_balance="250.00",
            savings_max_withdrawals_per_month=2
        )

        checking = policy_for(AccountType.CHECKING, config)
        savings = policy_for(AccountType.SAVINGS, config)

        assert checking.transaction_fee == Decimal('1.00')
        assert checking.free_transactions == 3
        assert savings.minimum_balance == Decimal('250.00')
        assert savings.max_withdrawals_per_month == 2

    def test_unknown_type_rejected(self):
        with pytest.raises(InvalidOperationError):
            policy_for("money_market")
