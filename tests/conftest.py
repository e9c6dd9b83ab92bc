"""Pytest configuration and fixtures for merkle vesting tests."""

import pytest

from merkle_vesting import config as config_module
from merkle_vesting.tree import Entitlement, build
from merkle_vesting.verifier import ClaimVerifier

# Hardhat default accounts
OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ADDR1 = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
ADDR2 = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"
ADDR3 = "0x90F79bf6EB2c4f870365E785982E1f101E93b906"
ADDR4 = "0x15d34AAf54267DB7D7c367839AAf71A00a2C6A65"
ADDR5 = "0x9965507D1a55bcC2695C58ba16FB37d819B0A4dc"
ADDR6 = "0x976EA74026E726554dB657fA54763abd0C3a0aa9"


@pytest.fixture
def entitlements() -> list[Entitlement]:
    """The five-recipient generation: A=1000, B=2000, C=1000, D=5000, E=7000."""
    return [
        Entitlement(ADDR1, 1000),
        Entitlement(ADDR2, 2000),
        Entitlement(ADDR3, 1000),
        Entitlement(ADDR4, 5000),
        Entitlement(ADDR5, 7000),
    ]


@pytest.fixture
def second_generation() -> list[Entitlement]:
    """Replacement generation that drops D and E and adds ADDR6=3000."""
    return [
        Entitlement(ADDR1, 1000),
        Entitlement(ADDR2, 2000),
        Entitlement(ADDR3, 1000),
        Entitlement(ADDR6, 3000),
    ]


@pytest.fixture
def commitment(entitlements):
    return build(entitlements)


@pytest.fixture
def verifier(commitment) -> ClaimVerifier:
    return ClaimVerifier(commitment.root, OWNER)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate configuration from the developer's environment and .env."""
    for key in ("MERKLE_VESTING_TREE_FILE", "MERKLE_VESTING_ADMIN", "MERKLE_VESTING_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "_config", None)
    return tmp_path
