"""Configuration management for merkle vesting tooling.

Loads configuration from environment variables or .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_TREE_FILE = "merkleTree.json"


@dataclass
class VestingConfig:
    """Settings shared by the CLI and deployment helpers."""

    # Distribution file written by `build` and read by deployment
    tree_file: Path = Path(DEFAULT_TREE_FILE)

    # Administrator allowed to replace the merkle root
    admin_address: Optional[str] = None

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "VestingConfig":
        """Load configuration from environment variables."""
        return cls(
            tree_file=Path(os.getenv("MERKLE_VESTING_TREE_FILE", DEFAULT_TREE_FILE)),
            admin_address=os.getenv("MERKLE_VESTING_ADMIN") or None,
            log_level=os.getenv("MERKLE_VESTING_LOG_LEVEL", "INFO").upper(),
        )

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "VestingConfig":
        """
        Load configuration from .env file and environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                      looks for .env in the current directory.

        Returns:
            VestingConfig instance with loaded values
        """
        env_path = env_file or Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)
        return cls.from_env()

    def has_admin(self) -> bool:
        return bool(self.admin_address)


# Global config instance (lazy loaded)
_config: Optional[VestingConfig] = None


def get_config() -> VestingConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = VestingConfig.load()
    return _config


def reload_config(env_file: Optional[Path] = None) -> VestingConfig:
    """Reload configuration from environment."""
    global _config
    _config = VestingConfig.load(env_file)
    return _config
