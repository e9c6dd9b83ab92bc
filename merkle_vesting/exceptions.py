"""Custom exceptions for merkle vesting claims."""


class MerkleVestingError(Exception):
    """Base exception for all merkle vesting errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidInput(MerkleVestingError):
    """Raised when an entitlement set, address, amount or hash is malformed."""

    def __init__(self, field: str, value, reason: str):
        message = f"Invalid {field}={value!r}: {reason}"
        super().__init__(message, {"field": field, "value": value, "reason": reason})
        self.field = field
        self.value = value
        self.reason = reason


class AlreadyClaimed(MerkleVestingError):
    """Raised when an address that already claimed tries to claim again."""

    def __init__(self, address: str):
        super().__init__(f"Already claimed tokens: {address}", {"address": address})
        self.address = address


class InvalidProof(MerkleVestingError):
    """Raised when a proof does not fold to the current merkle root."""

    def __init__(self, address: str, amount, reason: str = "could not verify merkleProof"):
        super().__init__(
            f"{reason} (address={address}, amount={amount})",
            {"address": address, "amount": amount, "reason": reason},
        )
        self.address = address
        self.amount = amount
        self.reason = reason


class Unauthorized(MerkleVestingError):
    """Raised when a non-admin invokes an admin-only operation."""

    def __init__(self, caller: str, operation: str):
        super().__init__(
            f"{caller} is not allowed to call {operation}",
            {"caller": caller, "operation": operation},
        )
        self.caller = caller
        self.operation = operation
