"""Minimal fungible ledger the claim verifier mints into."""

import logging
import threading
from typing import Dict, Protocol

from .encoding import normalize_address
from .exceptions import InvalidInput

logger = logging.getLogger(__name__)


class Ledger(Protocol):
    def mint(self, to: str, amount: int) -> None:
        ...

    def balance_of(self, address: str) -> int:
        ...


class InMemoryLedger:
    """Balances keyed by checksummed address."""

    def __init__(self):
        self._balances: Dict[str, int] = {}
        self._lock = threading.Lock()
        self.total_supply = 0

    def mint(self, to: str, amount: int) -> None:
        if amount < 0:
            raise InvalidInput("amount", amount, "cannot mint a negative amount")
        to = normalize_address(to)
        with self._lock:
            self._balances[to] = self._balances.get(to, 0) + amount
            self.total_supply += amount
        logger.debug(f"Minted {amount} to {to}")

    def balance_of(self, address: str) -> int:
        with self._lock:
            return self._balances.get(normalize_address(address), 0)
