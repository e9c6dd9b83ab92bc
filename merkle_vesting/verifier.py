"""Claim verifier: exactly-once redemption of merkle-committed entitlements.

State per address goes ``Unclaimed -> Claimed`` and never back. Claim records
are keyed by address only, so replacing the root does not reopen a claim.
"""

import logging
import threading
from typing import Dict, Optional, Sequence

from .encoding import (
    Bytes32Like,
    ensure_uint256,
    leaf_hash,
    normalize_address,
    process_proof,
    to_bytes32,
    to_hex,
)
from .exceptions import AlreadyClaimed, InvalidInput, InvalidProof, Unauthorized
from .ledger import InMemoryLedger, Ledger

logger = logging.getLogger(__name__)


class ClaimVerifier:
    """Holds the current root commitment and the per-address claim records."""

    def __init__(self, initial_root: Bytes32Like, admin: str, ledger: Optional[Ledger] = None):
        self._root = to_bytes32(initial_root, "root")
        self._admin = normalize_address(admin)
        self._ledger = ledger if ledger is not None else InMemoryLedger()
        self._claimed: Dict[str, bool] = {}
        # Reentrant so a nested claim from inside mint reaches the Claimed check
        self._lock = threading.RLock()
        logger.info(f"Claim verifier created with root {to_hex(self._root)}, admin {self._admin}")

    @property
    def merkle_root(self) -> bytes:
        with self._lock:
            return self._root

    @property
    def admin(self) -> str:
        return self._admin

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def has_claimed(self, address: str) -> bool:
        with self._lock:
            return self._claimed.get(normalize_address(address), False)

    def balance_of(self, address: str) -> int:
        return self._ledger.balance_of(address)

    def claim(self, caller: str, amount: int, proof: Sequence[Bytes32Like]) -> None:
        """
        Claim ``amount`` for ``caller`` using a proof against the current root.

        Raises:
            AlreadyClaimed: caller has claimed before, under any root
            InvalidProof: the proof does not fold to the current root
        """
        caller = normalize_address(caller)
        with self._lock:
            if self._claimed.get(caller, False):
                logger.warning(f"Rejected claim from {caller}: already claimed")
                raise AlreadyClaimed(caller)

            try:
                amount = ensure_uint256(amount)
                leaf = leaf_hash(caller, amount)
                computed = process_proof(leaf, proof)
            except InvalidInput as e:
                logger.warning(f"Rejected claim from {caller}: {e.message}")
                raise InvalidProof(caller, amount, e.reason) from e

            if computed != self._root:
                logger.warning(f"Rejected claim from {caller} for {amount}: proof does not match root")
                raise InvalidProof(caller, amount)

            # Record before minting so reentrant calls see Claimed
            self._claimed[caller] = True
            try:
                self._ledger.mint(caller, amount)
            except Exception:
                del self._claimed[caller]
                raise

        logger.info(f"{caller} claimed {amount}")

    def set_merkle_root(self, caller: str, new_root: Bytes32Like) -> None:
        """Replace the root commitment. Admin only; claim records are kept."""
        caller = normalize_address(caller)
        if caller != self._admin:
            logger.warning(f"Rejected setMerkleRoot from {caller}")
            raise Unauthorized(caller, "setMerkleRoot")
        root = to_bytes32(new_root, "root")
        with self._lock:
            previous = self._root
            self._root = root
        logger.info(f"Merkle root updated {to_hex(previous)} -> {to_hex(root)}")
