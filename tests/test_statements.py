"""
Test suite for statement rendering
"""

from decimal import Decimal

from ledger_core.accounts import Account, AccountType
from ledger_core.exceptions import FailureCode
from ledger_core.statements import render_statement
from ledger_core.transactions import TransactionType


class TestRenderStatement:
    """Test the plain-text monthly statement"""

    def setup_method(self):
        self.account = Account("ACC-00000007", "Ada Lovelace", AccountType.CHECKING)

    def test_empty_account(self):
        statement = render_statement(self.account.snapshot())

        assert "MONTHLY ACCOUNT STATEMENT" in statement
        assert "Account Number:  ACC-00000007" in statement
        assert "Account Type:    CHECKING" in statement
        assert "No transactions this period." in statement
        assert "Total Transactions: 0 (0 failed)" in statement
        assert "--- Account Rules ---" not in statement
        assert statement.endswith("\n")

    def test_lists_transactions_with_failure_reasons(self):
        self.account.opening_deposit(Decimal('1250.50'), "TXN-000000000001")
        self.account.withdraw(Decimal('50.50'), "TXN-000000000002")
        self.account.record_failed_transaction(
            TransactionType.WITHDRAWAL, Decimal('5000.00'), "Insufficient funds in account",
            "TXN-000000000003", FailureCode.INSUFFICIENT_FUNDS
        )

        statement = render_statement(self.account.snapshot(), rules="CHECKING Account Rules:")
        lines = statement.splitlines()

        assert "Current Balance: $1,200.00" in statement
        assert "--- Account Rules ---" in lines
        assert "CHECKING Account Rules:" in lines
        assert "No transactions this period." not in statement
        assert any("TXN-000000000001" in line and "$1,250.50" in line for line in lines)
        assert any("TXN-000000000003" in line and "FAILED" in line for line in lines)
        assert "  Reason: Insufficient funds in account" in lines
        assert "Total Transactions: 3 (1 failed)" in lines
        assert "Ending Balance: $1,200.00" in lines

    def test_statement_is_read_only(self):
        self.account.deposit(Decimal('10.00'), "TXN-000000000001")
        history_before = self.account.transaction_history

        render_statement(self.account.snapshot())

        assert self.account.transaction_history == history_before
        assert self.account.balance == Decimal('10.00')
