"""One-time token claims against a merkle root commitment."""

from .exceptions import (
    AlreadyClaimed,
    InvalidInput,
    InvalidProof,
    MerkleVestingError,
    Unauthorized,
)
from .ledger import InMemoryLedger, Ledger
from .tree import Commitment, Entitlement, MerkleTree, build
from .verifier import ClaimVerifier

__version__ = "0.1.0"

__all__ = [
    "AlreadyClaimed",
    "ClaimVerifier",
    "Commitment",
    "Entitlement",
    "InMemoryLedger",
    "InvalidInput",
    "InvalidProof",
    "Ledger",
    "MerkleTree",
    "MerkleVestingError",
    "Unauthorized",
    "build",
]
