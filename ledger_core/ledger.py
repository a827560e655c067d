"""
Ledger Service

Repository of accounts and the only component allowed to touch more than one
account per call. Orchestrates opening, closing, deposits, withdrawals,
transfers and the monthly batch, applying the account policies and keeping
every account's audit trail complete.

Failure discipline:
- Structural errors (not found, closed, bad amount, self-transfer) are raised
  and leave no record.
- Business-rule violations are recorded on the account as FAILED transactions
  and returned; they are never raised out of withdraw() or transfer().
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Tuple
import threading

from .accounts import Account, AccountType
from .config import LedgerConfig, get_config
from .events import (
    DomainEvent, EventDispatcher, EventPayload, create_account_event,
    create_transaction_event
)
from .exceptions import (
    AccountClosedError, AccountNotFoundError, AccountOpenError, BusinessRuleViolation,
    InvalidAmountError, InvalidOperationError
)
from .ids import IdGenerator
from .logging_config import get_logger, log_action
from .money import ZERO, AmountLike, has_valid_precision, to_decimal
from .policies import AccountPolicy, policy_for
from .statements import render_statement
from .transactions import Transaction, TransactionType


class TransferResult(NamedTuple):
    """Both legs of a transfer. destination is None when the transfer failed."""
    source: Transaction
    destination: Optional[Transaction]

    @property
    def succeeded(self) -> bool:
        return self.source.is_successful and self.destination is not None


@dataclass
class MonthlyProcessingReport:
    """Outcome of one monthly batch run"""
    processed_at: datetime
    accounts_processed: int = 0
    transactions: List[Transaction] = field(default_factory=list)
    total_fees: Decimal = ZERO
    total_interest: Decimal = ZERO

    def to_dict(self) -> Dict:
        return {
            'processed_at': self.processed_at.isoformat(),
            'accounts_processed': self.accounts_processed,
            'total_fees': str(self.total_fees),
            'total_interest': str(self.total_interest),
            'transactions': [txn.to_dict() for txn in self.transactions]
        }


class Ledger:
    """
    Multi-account ledger enforcing per-type account policies
    """

    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        config: Optional[LedgerConfig] = None,
        event_dispatcher: Optional[EventDispatcher] = None
    ):
        self.config = config or get_config()
        self.id_generator = id_generator or IdGenerator(self.config)
        self.logger = get_logger("ledger_core.ledger")

        # Policies are stateless, one shared instance per account type
        self._policies: Dict[AccountType, AccountPolicy] = {
            account_type: policy_for(account_type, self.config) for account_type in AccountType
        }

        self._accounts: Dict[str, Account] = {}
        self._accounts_lock = threading.Lock()
        self._batch_lock = threading.Lock()
        self._max_amount = Decimal(self.config.max_transaction_amount)

        self._event_dispatcher = event_dispatcher if self.config.enable_events else None

    # Account lifecycle

    def open_account(
        self,
        customer_name: str,
        account_type: AccountType,
        initial_deposit: AmountLike
    ) -> Account:
        """
        Open a new ACTIVE account

        Args:
            customer_name: Account holder's name, must not be blank
            account_type: CHECKING or SAVINGS
            initial_deposit: Opening amount; at least the policy minimum

        Returns:
            The new Account, with the opening deposit as its first transaction

        Raises:
            AccountOpenError: If the name, type or deposit is not acceptable
        """
        if not isinstance(customer_name, str) or not customer_name.strip():
            raise AccountOpenError("Customer name cannot be null or empty")
        if len(customer_name.strip()) < 2:
            raise AccountOpenError("Customer name must be at least 2 characters")

        if not isinstance(account_type, AccountType):
            raise AccountOpenError(f"Invalid account type: {account_type!r}")

        try:
            deposit = to_decimal(initial_deposit)
        except ValueError as e:
            raise AccountOpenError(f"Invalid initial deposit: {e}")

        if deposit < ZERO:
            raise AccountOpenError(f"Initial deposit must be non-negative, got: {deposit}")
        if not has_valid_precision(deposit):
            raise AccountOpenError("Initial deposit cannot have more than 2 decimal places")
        if deposit > self._max_amount:
            raise AccountOpenError(
                f"Initial deposit exceeds maximum of ${self._max_amount}, got: ${deposit}"
            )

        policy = self.get_policy(account_type)
        if deposit < policy.minimum_opening_deposit:
            raise AccountOpenError(
                f"{account_type.name} account requires minimum initial deposit of "
                f"${policy.minimum_opening_deposit}, got: ${deposit}"
            )

        account = Account(self.id_generator.next_account_id(), customer_name, account_type)
        opening_txn = None
        if deposit > ZERO:
            opening_txn = account.opening_deposit(deposit, self.id_generator.next_transaction_id())

        with self._accounts_lock:
            self._accounts[account.account_number] = account

        log_action(
            self.logger, "info", f"Account opened: {account.account_number}",
            action="open_account", resource=f"account:{account.account_number}",
            extra={
                "account_type": account_type.value,
                "initial_deposit": str(deposit)
            }
        )
        self._publish(create_account_event(DomainEvent.ACCOUNT_OPENED, account))
        if opening_txn:
            self._publish(create_transaction_event(opening_txn))

        return account

    def close_account(self, account_number: str) -> bool:
        """
        Close an account with a zero balance

        Returns:
            True if the account was closed, False if its balance is non-zero
            or it is already closed (no state change in either case)

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        account = self.get_account(account_number)

        with account.lock:
            if not account.is_active:
                log_action(
                    self.logger, "info", f"Close rejected, account already closed: {account_number}",
                    action="close_account", resource=f"account:{account_number}"
                )
                return False

            if not account.can_be_closed():
                log_action(
                    self.logger, "info", f"Close rejected, non-zero balance: {account_number}",
                    action="close_account", resource=f"account:{account_number}",
                    extra={"balance": str(account.balance)}
                )
                return False

            account.close()

        log_action(
            self.logger, "info", f"Account closed: {account_number}",
            action="close_account", resource=f"account:{account_number}"
        )
        self._publish(create_account_event(DomainEvent.ACCOUNT_CLOSED, account))
        return True

    # Money movement

    def deposit(self, account_number: str, amount: AmountLike) -> Transaction:
        """
        Deposit into an account

        Raises:
            AccountNotFoundError, AccountClosedError, InvalidAmountError
        """
        account = self.get_account(account_number)
        value = self._parse_amount(amount)

        with account.lock:
            self._require_active(account, "deposit")
            txn = account.deposit(value, self.id_generator.next_transaction_id())

        self._log_transaction("deposit", txn)
        self._publish(create_transaction_event(txn))
        return txn

    def withdraw(self, account_number: str, amount: AmountLike) -> Transaction:
        """
        Withdraw from an account, subject to its policy

        Returns:
            SUCCESS transaction, or a FAILED transaction carrying the
            business-rule violation (balance and counters unchanged)

        Raises:
            AccountNotFoundError, AccountClosedError, InvalidAmountError
        """
        account = self.get_account(account_number)
        value = self._parse_amount(amount)

        with account.lock:
            self._require_active(account, "withdraw")
            policy = self.get_policy(account.account_type)
            transaction_id = self.id_generator.next_transaction_id()
            try:
                policy.validate_withdrawal(account, value)
            except BusinessRuleViolation as e:
                txn = account.record_failed_transaction(
                    TransactionType.WITHDRAWAL, value, str(e), transaction_id, e.code
                )
            else:
                txn = account.withdraw(value, transaction_id)

        self._log_transaction("withdraw", txn)
        self._publish(create_transaction_event(txn))
        return txn

    def transfer(self, from_account_number: str, to_account_number: str,
                 amount: AmountLike) -> TransferResult:
        """
        Move funds between two accounts atomically

        The source account's withdrawal policy applies. On a policy failure a
        single FAILED TRANSFER is recorded on the source and neither balance
        changes. On success both accounts get a TRANSFER record for the same
        amount. Transfers never count toward the withdrawal limit.

        Raises:
            InvalidOperationError: Source and destination are the same account
            AccountNotFoundError, AccountClosedError, InvalidAmountError
        """
        if from_account_number == to_account_number:
            raise InvalidOperationError("Cannot transfer to the same account")

        source = self.get_account(from_account_number)
        destination = self.get_account(to_account_number)
        value = self._parse_amount(amount)

        # Consistent lock order prevents deadlock between opposite transfers
        first, second = sorted((source, destination), key=lambda a: a.account_number)

        with first.lock, second.lock:
            self._require_active(source, "transfer")
            self._require_active(destination, "transfer")

            policy = self.get_policy(source.account_type)
            transaction_id = self.id_generator.next_transaction_id()
            try:
                policy.validate_withdrawal(source, value)
            except BusinessRuleViolation as e:
                failed = source.record_failed_transaction(
                    TransactionType.TRANSFER, value, str(e), transaction_id, e.code
                )
                result = TransferResult(failed, None)
            else:
                debit = source.transfer_out(value, transaction_id)
                credit = destination.transfer_in(value, self.id_generator.next_transaction_id())
                result = TransferResult(debit, credit)

        self._log_transaction(
            "transfer", result.source, counterparty=destination.account_number
        )
        self._publish(create_transaction_event(result.source))
        if result.destination is not None:
            self._publish(create_transaction_event(result.destination))
        return result

    # Monthly batch

    def apply_monthly_processing(self) -> MonthlyProcessingReport:
        """
        Charge fees / credit interest on every ACTIVE account and reset the
        monthly counters

        Runs at most once at a time. Any unexpected failure aborts the whole
        batch rather than skipping the account.
        """
        with self._batch_lock:
            report = MonthlyProcessingReport(processed_at=datetime.now(timezone.utc))

            for account in self.get_all_accounts():
                try:
                    processed, txn = self._process_account_month(account)
                except Exception:
                    log_action(
                        self.logger, "error",
                        f"Monthly processing aborted at account {account.account_number}",
                        action="monthly_processing", resource=f"account:{account.account_number}",
                        exc_info=True
                    )
                    raise

                if not processed:
                    continue

                report.accounts_processed += 1
                if txn is not None:
                    report.transactions.append(txn)
                    if txn.transaction_type == TransactionType.FEE:
                        report.total_fees += txn.amount
                    else:
                        report.total_interest += txn.amount

        log_action(
            self.logger, "info", "Monthly processing completed",
            action="monthly_processing",
            extra={
                "accounts_processed": report.accounts_processed,
                "total_fees": str(report.total_fees),
                "total_interest": str(report.total_interest)
            }
        )
        for txn in report.transactions:
            self._publish(create_transaction_event(txn))
        self._publish(EventPayload(
            event_type=DomainEvent.MONTHLY_PROCESSING_COMPLETED,
            entity_type="ledger",
            entity_id="monthly_processing",
            data={k: v for k, v in report.to_dict().items() if k != 'transactions'}
        ))
        return report

    def _process_account_month(self, account: Account) -> Tuple[bool, Optional[Transaction]]:
        with account.lock:
            if not account.is_active:
                return False, None

            policy = self.get_policy(account.account_type)
            adjustment = policy.compute_monthly_adjustment(account)
            txn = None

            if adjustment.transaction_type == TransactionType.FEE:
                # A fee never takes a checking balance below zero
                fee = min(adjustment.amount, account.balance)
                if fee < adjustment.amount:
                    log_action(
                        self.logger, "warning",
                        f"Fee capped at available balance for {account.account_number}",
                        action="monthly_processing", resource=f"account:{account.account_number}",
                        extra={"fee_due": str(adjustment.amount), "fee_charged": str(fee)}
                    )
                if fee > ZERO:
                    txn = account.apply_fee(fee, self.id_generator.next_transaction_id())
            elif adjustment.amount > ZERO:
                txn = account.apply_interest(adjustment.amount, self.id_generator.next_transaction_id())

            account.reset_monthly_counters()
            return True, txn

    # Queries

    def get_account(self, account_number: str) -> Account:
        """Look up an account; raises AccountNotFoundError if unknown"""
        if not isinstance(account_number, str) or not account_number.strip():
            raise AccountNotFoundError(str(account_number))

        with self._accounts_lock:
            account = self._accounts.get(account_number)
        if account is None:
            raise AccountNotFoundError(account_number)
        return account

    def get_all_accounts(self) -> List[Account]:
        with self._accounts_lock:
            return list(self._accounts.values())

    def get_accounts_by_type(self, account_type: AccountType) -> List[Account]:
        if not isinstance(account_type, AccountType):
            raise InvalidOperationError(f"Invalid account type: {account_type!r}")
        return [a for a in self.get_all_accounts() if a.account_type == account_type]

    def account_exists(self, account_number: str) -> bool:
        with self._accounts_lock:
            return account_number in self._accounts

    @property
    def account_count(self) -> int:
        with self._accounts_lock:
            return len(self._accounts)

    def get_policy(self, account_type: AccountType) -> AccountPolicy:
        """Policy governing accounts of the given type"""
        return self._policies[account_type]

    def get_transaction_history(
        self,
        account_number: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        transaction_type: Optional[TransactionType] = None
    ) -> List[Transaction]:
        """
        Chronological history of an account, optionally filtered

        Args:
            account_number: Account to read
            start: Inclusive lower bound on timestamp
            end: Inclusive upper bound on timestamp
            transaction_type: Only transactions of this type
        """
        account = self.get_account(account_number)
        return [
            txn for txn in account.transaction_history
            if (start is None or txn.timestamp >= start)
            and (end is None or txn.timestamp <= end)
            and (transaction_type is None or txn.transaction_type == transaction_type)
        ]

    def get_failed_transactions(self, account_number: str) -> List[Transaction]:
        account = self.get_account(account_number)
        return [txn for txn in account.transaction_history if txn.is_failed]

    def generate_monthly_statement(self, account_number: str) -> str:
        """Plain-text statement for the current cycle"""
        account = self.get_account(account_number)
        policy = self.get_policy(account.account_type)
        return render_statement(account.snapshot(), rules=policy.describe_rules())

    # Internals

    def _parse_amount(self, amount: AmountLike) -> Decimal:
        try:
            value = to_decimal(amount)
        except ValueError as e:
            raise InvalidAmountError(str(e))

        if value <= ZERO:
            raise InvalidAmountError(f"Amount must be positive: {value}")
        if not has_valid_precision(value):
            raise InvalidAmountError("Amount cannot have more than 2 decimal places")
        if value > self._max_amount:
            raise InvalidAmountError(f"Amount exceeds maximum of ${self._max_amount}: {value}")
        return value

    def _require_active(self, account: Account, action: str) -> None:
        if not account.is_active:
            log_action(
                self.logger, "info", f"{action} rejected, account closed: {account.account_number}",
                action=action, resource=f"account:{account.account_number}"
            )
            raise AccountClosedError(account.account_number)

    def _log_transaction(self, action: str, txn: Transaction,
                         counterparty: Optional[str] = None) -> None:
        extra = {
            "transaction_id": txn.transaction_id,
            "amount": str(txn.amount),
            "status": txn.status.value,
            "balance_after": str(txn.balance_after)
        }
        if counterparty:
            extra["counterparty"] = counterparty

        if txn.is_failed:
            extra["failure_code"] = txn.failure_code.value if txn.failure_code else None
            log_action(
                self.logger, "warning", f"{action} failed: {txn.failure_reason}",
                action=action, resource=f"account:{txn.account_number}", extra=extra
            )
        else:
            log_action(
                self.logger, "info", f"{action} recorded: {txn.transaction_id}",
                action=action, resource=f"account:{txn.account_number}", extra=extra
            )

    def _publish(self, event: EventPayload) -> None:
        if self._event_dispatcher:
            self._event_dispatcher.publish(event)
