"""
Administrative endpoints
"""

from fastapi import APIRouter, Depends

from .dependencies import get_ledger
from ..ledger import Ledger


router = APIRouter()


@router.post("/monthly-processing")
async def run_monthly_processing(ledger: Ledger = Depends(get_ledger)):
    """Charge fees, credit interest and reset monthly counters for all active accounts"""
    report = ledger.apply_monthly_processing()
    return report.to_dict()
