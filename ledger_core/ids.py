"""
Identifier Generation

Sequential, prefixed identifiers for accounts and transactions. Counters are
guarded by a lock so ids stay unique under concurrent callers.
"""

import itertools
import threading
from typing import Optional

from .config import LedgerConfig, get_config


class IdGenerator:
    """Thread-safe generator of account numbers and transaction ids"""

    def __init__(self, config: Optional[LedgerConfig] = None):
        config = config or get_config()
        self.account_prefix = config.account_id_prefix
        self.transaction_prefix = config.transaction_id_prefix
        self.account_width = config.account_id_width
        self.transaction_width = config.transaction_id_width
        self._lock = threading.Lock()
        self._account_counter = itertools.count(1)
        self._transaction_counter = itertools.count(1)

    def next_account_id(self) -> str:
        """Allocate the next account number, e.g. ACC-00000001"""
        with self._lock:
            value = next(self._account_counter)
        return f"{self.account_prefix}{value:0{self.account_width}d}"

    def next_transaction_id(self) -> str:
        """Allocate the next transaction id, e.g. TXN-000000000001"""
        with self._lock:
            value = next(self._transaction_counter)
        return f"{self.transaction_prefix}{value:0{self.transaction_width}d}"
