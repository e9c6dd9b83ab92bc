"""Commitment builder: sorted merkle tree over (address, amount) entitlements."""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from .encoding import (
    Bytes32Like,
    ensure_uint256,
    hash_pair,
    hex_proof,
    leaf_hash,
    normalize_address,
    to_hex,
    verify_proof,
)
from .exceptions import InvalidInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Entitlement:
    address: str   # checksummed EVM address
    amount: int    # uint256

    def __post_init__(self):
        object.__setattr__(self, "address", normalize_address(self.address))
        object.__setattr__(self, "amount", ensure_uint256(self.amount))

    @property
    def leaf(self) -> bytes:
        return leaf_hash(self.address, self.amount)


EntitlementLike = Union[Entitlement, Tuple[str, int]]


def _as_entitlement(item: EntitlementLike) -> Entitlement:
    if isinstance(item, Entitlement):
        return item
    address, amount = item
    return Entitlement(address, amount)


class MerkleTree:
    """
    Binary hash tree over the ascending-sorted leaves.

    Sibling pairs are hashed in sorted order. A trailing node without a
    sibling is promoted to the next layer unhashed, so its proof has no
    entry for that layer.
    """

    def __init__(self, leaves: Sequence[bytes]):
        if not leaves:
            raise InvalidInput("leaves", [], "cannot build a tree without leaves")
        self.leaves: List[bytes] = sorted(leaves)
        self.layers = self._build_tree(self.leaves)
        self._index: Dict[bytes, int] = {leaf: i for i, leaf in enumerate(self.leaves)}

    def _build_tree(self, leaves: List[bytes]) -> List[List[bytes]]:
        tree = [leaves]
        current_level = leaves
        while len(current_level) > 1:
            next_level: List[bytes] = []
            for i in range(0, len(current_level), 2):
                if i + 1 < len(current_level):
                    next_level.append(hash_pair(current_level[i], current_level[i + 1]))
                else:
                    # Promote odd leaf
                    next_level.append(current_level[i])
            tree.append(next_level)
            current_level = next_level
        return tree

    @property
    def root(self) -> bytes:
        return self.layers[-1][0]

    def index_of(self, leaf: bytes) -> int:
        try:
            return self._index[leaf]
        except KeyError:
            raise InvalidInput("leaf", to_hex(leaf), "leaf is not in the tree") from None

    def get_proof(self, index: int) -> List[bytes]:
        proof: List[bytes] = []
        idx = index
        for level in self.layers[:-1]:
            pair_index = idx ^ 1
            if pair_index < len(level):
                proof.append(level[pair_index])
            idx //= 2
        return proof


@dataclass
class Commitment:
    """Root commitment for one generation plus the proofs for its entitlements."""

    tree: MerkleTree
    entitlements: List[Entitlement] = field(default_factory=list)

    @property
    def root(self) -> bytes:
        return self.tree.root

    @property
    def hex_root(self) -> str:
        return to_hex(self.tree.root)

    @property
    def total_amount(self) -> int:
        return sum(e.amount for e in self.entitlements)

    def leaf_for(self, entitlement: EntitlementLike) -> bytes:
        return _as_entitlement(entitlement).leaf

    def index_of(self, entitlement: EntitlementLike) -> int:
        ent = _as_entitlement(entitlement)
        try:
            return self.tree.index_of(ent.leaf)
        except InvalidInput:
            raise InvalidInput(
                "entitlement", (ent.address, ent.amount), "entitlement is not in this generation"
            ) from None

    def get_proof(self, entitlement: EntitlementLike) -> List[bytes]:
        return self.tree.get_proof(self.index_of(entitlement))

    def get_hex_proof(self, entitlement: EntitlementLike) -> List[str]:
        return hex_proof(self.get_proof(entitlement))

    def verify(self, entitlement: EntitlementLike, proof: Sequence[Bytes32Like]) -> bool:
        return verify_proof(proof, self.root, self.leaf_for(entitlement))


def build(entitlements: Iterable[EntitlementLike]) -> Commitment:
    """
    Build the commitment for one generation of entitlements.

    Raises InvalidInput for an empty list or when an address appears twice.
    The root does not depend on input order.
    """
    ents = [_as_entitlement(e) for e in entitlements]
    if not ents:
        raise InvalidInput("entitlements", [], "entitlement list is empty")

    seen: Dict[str, int] = {}
    for ent in ents:
        if ent.address in seen:
            raise InvalidInput(
                "entitlements",
                ent.address,
                f"duplicate address (amounts {seen[ent.address]} and {ent.amount})",
            )
        seen[ent.address] = ent.amount

    tree = MerkleTree([e.leaf for e in ents])
    ordered = sorted(ents, key=lambda e: tree.index_of(e.leaf))
    logger.debug(f"Built tree with {len(ordered)} leaves, {len(tree.layers)} layers")
    return Commitment(tree=tree, entitlements=ordered)
