"""
Money movement endpoints
"""

from fastapi import APIRouter, Depends, status

from .dependencies import get_ledger
from .schemas import DepositRequest, TransferRequest, WithdrawRequest
from ..ledger import Ledger


router = APIRouter()


@router.post("/deposit", status_code=status.HTTP_201_CREATED)
async def deposit(
    request: DepositRequest,
    ledger: Ledger = Depends(get_ledger)
):
    """Deposit funds"""
    txn = ledger.deposit(request.account_number, request.amount)
    return {"transaction": txn.to_dict()}


@router.post("/withdraw", status_code=status.HTTP_201_CREATED)
async def withdraw(
    request: WithdrawRequest,
    ledger: Ledger = Depends(get_ledger)
):
    """
    Withdraw funds. Business-rule violations still return 201 with a FAILED
    transaction; inspect transaction.status.
    """
    txn = ledger.withdraw(request.account_number, request.amount)
    return {"transaction": txn.to_dict()}


@router.post("/transfer", status_code=status.HTTP_201_CREATED)
async def transfer(
    request: TransferRequest,
    ledger: Ledger = Depends(get_ledger)
):
    """Transfer between two accounts"""
    result = ledger.transfer(request.from_account_number, request.to_account_number, request.amount)
    return {
        "succeeded": result.succeeded,
        "source": result.source.to_dict(),
        "destination": result.destination.to_dict() if result.destination else None
    }
