"""
Ledger instance shared by all API routes
"""

from typing import Optional

from ..events import EventDispatcher
from ..ledger import Ledger

_ledger: Optional[Ledger] = None


def get_ledger() -> Ledger:
    """FastAPI dependency returning the process-wide ledger"""
    global _ledger
    if _ledger is None:
        _ledger = Ledger(event_dispatcher=EventDispatcher())
    return _ledger


def set_ledger(ledger: Optional[Ledger]) -> None:
    """Replace the process-wide ledger (tests, embedding)"""
    global _ledger
    _ledger = ledger
