"""
Statement Generation

Builds a plain-text monthly statement from an AccountSnapshot. Works only on
read-only snapshots so it never re-derives or touches ledger state.
"""

from typing import List, Optional

from .accounts import AccountSnapshot
from .money import format_amount

RULE = "=" * 78
THIN_RULE = "-" * 78


def render_statement(snapshot: AccountSnapshot, rules: Optional[str] = None) -> str:
    """
    Render a monthly statement.

    Args:
        snapshot: Account snapshot taken under the account lock
        rules: Optional policy description to print under the header

    Returns:
        Statement text, newline terminated
    """
    lines: List[str] = [
        RULE,
        "MONTHLY ACCOUNT STATEMENT".center(78),
        RULE,
        "",
        f"Account Number:  {snapshot.account_number}",
        f"Account Type:    {snapshot.account_type.name}",
        f"Customer Name:   {snapshot.customer_name}",
        f"Status:          {snapshot.status.name}",
        f"Current Balance: {format_amount(snapshot.balance)}",
        "",
        "--- Monthly Statistics ---",
        f"Transactions This Month: {snapshot.monthly_transaction_count}",
        f"Withdrawals This Month:  {snapshot.monthly_withdrawal_count}",
        "",
    ]

    if rules:
        lines += ["--- Account Rules ---", rules, ""]

    lines += [
        "--- Transaction History ---",
        THIN_RULE,
        f"{'Date/Time (UTC)':<20} {'ID':<17} {'Type':<10} {'Amount':>11} {'Balance':>11} {'Status':<7}",
        THIN_RULE,
    ]

    if not snapshot.transactions:
        lines.append("No transactions this period.")

    for txn in snapshot.transactions:
        lines.append(
            f"{txn.timestamp.strftime('%Y-%m-%d %H:%M:%S'):<20} "
            f"{txn.transaction_id:<17} "
            f"{txn.transaction_type.name:<10} "
            f"{format_amount(txn.amount):>11} "
            f"{format_amount(txn.balance_after):>11} "
            f"{txn.status.name:<7}"
        )
        if txn.is_failed:
            lines.append(f"  Reason: {txn.failure_reason}")

    failed = sum(1 for txn in snapshot.transactions if txn.is_failed)
    lines += [
        THIN_RULE,
        f"Total Transactions: {len(snapshot.transactions)} ({failed} failed)",
        f"Ending Balance: {format_amount(snapshot.balance)}",
        RULE,
    ]
    return "\n".join(lines) + "\n"
