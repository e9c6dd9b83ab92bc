"""Canonical encoding of entitlements and sorted-pair merkle hashing.

Leaves match Solidity's ``keccak256(abi.encodePacked(address, uint256))``:
the 20 address bytes followed by the 32-byte big-endian amount. Pairs are
hashed in sorted order, compatible with OpenZeppelin's ``MerkleProof``.
"""

from typing import Iterable, List, Sequence, Union

import base58
from eth_utils import decode_hex, is_hex_address, keccak, to_checksum_address
from web3 import Web3

from .exceptions import InvalidInput

UINT256_MAX = 2**256 - 1
TRON_ADDRESS_PREFIX = 0x41

Bytes32Like = Union[bytes, str]


def tron_to_evm_address(tron_addr: str) -> str:
    """
    Convert Tron Base58Check addr (T...) to EVM 0x address by stripping leading 0x41.
    Returns checksummed 0x address.
    """
    try:
        decoded = base58.b58decode_check(tron_addr)
    except ValueError as e:
        raise InvalidInput("address", tron_addr, f"bad base58check: {e}") from e
    if len(decoded) != 21 or decoded[0] != TRON_ADDRESS_PREFIX:
        raise InvalidInput("address", tron_addr, "not a Tron address")
    return to_checksum_address("0x" + decoded[1:].hex())


def normalize_address(addr: str) -> str:
    """Return the checksummed EVM form of an EVM hex or Tron Base58 address."""
    if not isinstance(addr, str):
        raise InvalidInput("address", addr, "address must be a string")
    a = addr.strip()
    if a.startswith("T") and len(a) == 34:
        return tron_to_evm_address(a)
    if not a.lower().startswith("0x"):
        a = "0x" + a
    if not is_hex_address(a):
        raise InvalidInput("address", addr, "not a 20-byte hex address")
    return to_checksum_address(a)


def ensure_uint256(amount) -> int:
    if isinstance(amount, bool):
        raise InvalidInput("amount", amount, "amount must be an integer")
    if isinstance(amount, str):
        text = amount.strip()
        if not text.isdigit():
            raise InvalidInput("amount", amount, "amount must be a non-negative integer string")
        amount = int(text)
    if not isinstance(amount, int):
        raise InvalidInput("amount", amount, "amount must be an integer")
    if not (0 <= amount <= UINT256_MAX):
        raise InvalidInput("amount", amount, "amount exceeds uint256")
    return amount


def to_bytes32(value: Bytes32Like, field: str = "hash") -> bytes:
    """Accept 32 raw bytes or a 0x-prefixed hex string."""
    if isinstance(value, str):
        try:
            value = decode_hex(value)
        except ValueError as e:
            raise InvalidInput(field, value, f"bad hex: {e}") from e
    if not isinstance(value, (bytes, bytearray)) or len(value) != 32:
        raise InvalidInput(field, value, "expected 32 bytes")
    return bytes(value)


def to_hex(value: bytes) -> str:
    return "0x" + bytes(value).hex()


def leaf_hash(address: str, amount) -> bytes:
    """
    keccak256(abi.encodePacked(address, uint256 amount))
    """
    return bytes(
        Web3.solidity_keccak(
            ["address", "uint256"],
            [normalize_address(address), ensure_uint256(amount)],
        )
    )


def hash_pair(a: bytes, b: bytes) -> bytes:
    if a < b:
        return keccak(a + b)
    else:
        return keccak(b + a)


def process_proof(leaf: bytes, proof: Iterable[Bytes32Like]) -> bytes:
    computed = leaf
    for sibling in proof:
        computed = hash_pair(computed, to_bytes32(sibling, "proof"))
    return computed


def verify_proof(proof: Sequence[Bytes32Like], root: Bytes32Like, leaf: bytes) -> bool:
    return process_proof(leaf, proof) == to_bytes32(root, "root")


def hex_proof(proof: List[bytes]) -> List[str]:
    return [to_hex(p) for p in proof]
