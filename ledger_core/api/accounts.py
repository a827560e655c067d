"""
Account management endpoints
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse

from .dependencies import get_ledger
from .schemas import OpenAccountRequest
from ..accounts import AccountType
from ..ledger import Ledger
from ..transactions import TransactionType


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def open_account(
    request: OpenAccountRequest,
    ledger: Ledger = Depends(get_ledger)
):
    """Open a new account"""
    try:
        account_type = request.to_account_type()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown account type: {request.account_type}")

    account = ledger.open_account(request.customer_name, account_type, request.initial_deposit)
    return {
        "account": account.snapshot().to_dict(),
        "message": "Account opened successfully"
    }


@router.get("")
async def list_accounts(
    account_type: Optional[str] = None,
    ledger: Ledger = Depends(get_ledger)
):
    """List accounts, optionally filtered by type"""
    if account_type:
        try:
            accounts = ledger.get_accounts_by_type(AccountType(account_type.lower()))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown account type: {account_type}")
    else:
        accounts = ledger.get_all_accounts()

    return {"accounts": [account.snapshot().to_dict() for account in accounts]}


@router.get("/{account_number}")
async def get_account(
    account_number: str,
    ledger: Ledger = Depends(get_ledger)
):
    """Get account details"""
    return ledger.get_account(account_number).snapshot().to_dict()


@router.post("/{account_number}/close")
async def close_account(
    account_number: str,
    ledger: Ledger = Depends(get_ledger)
):
    """Close an account; only possible with a zero balance"""
    closed = ledger.close_account(account_number)
    snapshot = ledger.get_account(account_number).snapshot()
    return {
        "account_number": account_number,
        "closed": closed,
        "status": snapshot.status.value,
        "balance": str(snapshot.balance)
    }


@router.get("/{account_number}/transactions")
async def get_account_transactions(
    account_number: str,
    transaction_type: Optional[str] = None,
    failed_only: bool = False,
    ledger: Ledger = Depends(get_ledger)
):
    """Get transaction history for account"""
    if failed_only:
        transactions = ledger.get_failed_transactions(account_number)
    else:
        type_filter = None
        if transaction_type:
            try:
                type_filter = TransactionType(transaction_type.lower())
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Unknown transaction type: {transaction_type}")
        transactions = ledger.get_transaction_history(account_number, transaction_type=type_filter)

    return {"transactions": [txn.to_dict() for txn in transactions]}


@router.get("/{account_number}/statement", response_class=PlainTextResponse)
async def get_statement(
    account_number: str,
    ledger: Ledger = Depends(get_ledger)
):
    """Monthly statement as plain text"""
    return ledger.generate_monthly_statement(account_number)
