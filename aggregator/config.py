"""Configuration management for the campaign aggregator."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from aggregator.errors import ConfigurationError

# Load environment variables from .env file if present
load_dotenv()


@dataclass
class Config:
    """Aggregator configuration."""

    # Required
    contract_address: str

    # Ledger settings
    rpc_url: str = "http://127.0.0.1:8545"

    # Content store settings
    pinata_jwt: Optional[str] = None
    pinata_api_url: str = "https://api.pinata.cloud"
    ipfs_gateway_url: str = "https://gateway.pinata.cloud/ipfs/"

    # Per-call bounds (seconds)
    read_timeout_seconds: float = 10
    write_timeout_seconds: float = 30

    # None keeps batch fan-out unbounded
    batch_max_concurrency: Optional[int] = None

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        contract_address = os.getenv("CONTRACT_ADDRESS")
        if not contract_address:
            raise ValueError("CONTRACT_ADDRESS environment variable is required")

        max_concurrency = os.getenv("BATCH_MAX_CONCURRENCY")

        return cls(
            contract_address=contract_address,
            rpc_url=os.getenv("RPC_URL", "http://127.0.0.1:8545"),
            # The JWT is checked at request time, not here
            pinata_jwt=os.getenv("PINATA_JWT") or None,
            pinata_api_url=os.getenv("PINATA_API_URL", "https://api.pinata.cloud"),
            ipfs_gateway_url=os.getenv("IPFS_GATEWAY_URL", "https://gateway.pinata.cloud/ipfs/"),
            read_timeout_seconds=float(os.getenv("READ_TIMEOUT_SECONDS", "10")),
            write_timeout_seconds=float(os.getenv("WRITE_TIMEOUT_SECONDS", "30")),
            batch_max_concurrency=int(max_concurrency) if max_concurrency else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """Validate configuration values."""
        if not self.contract_address:
            raise ValueError("contract_address is required")
        if not self.rpc_url:
            raise ValueError("rpc_url is required")
        if self.read_timeout_seconds <= 0:
            raise ValueError("read_timeout_seconds must be > 0")
        if self.write_timeout_seconds <= 0:
            raise ValueError("write_timeout_seconds must be > 0")
        if self.batch_max_concurrency is not None and self.batch_max_concurrency <= 0:
            raise ValueError("batch_max_concurrency must be > 0")

    def require_pinata_jwt(self) -> str:
        """Return the Pinata credential or fail as a configuration error.

        Raises:
            ConfigurationError: If PINATA_JWT is not configured
        """
        if not self.pinata_jwt:
            raise ConfigurationError("PINATA_JWT is not configured")
        return self.pinata_jwt

    @property
    def has_pinata_jwt(self) -> bool:
        return bool(self.pinata_jwt)
