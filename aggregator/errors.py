"""Error taxonomy shared by the ledger, store and aggregation layers.

Every error carries a ``kind`` discriminant so callers (HTTP views, the CLI)
can branch on it without matching class names. A missing metadata record is
not an error: lookups return ``None`` and ``ErrorKind.NOT_FOUND`` only shows
up in responses built from that outcome.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Error discriminant."""
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NETWORK = "network"
    TIMEOUT = "timeout"
    CONTRACT_READ = "contract_read"


class AggregatorError(Exception):
    """Base exception for aggregator errors."""

    kind: ErrorKind = ErrorKind.NETWORK

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(AggregatorError):
    """Raised when a required credential or setting is missing."""

    kind = ErrorKind.CONFIGURATION


class ValidationError(AggregatorError):
    """Raised when a write payload lacks required fields."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class NetworkError(AggregatorError):
    """Raised when a store read or write fails."""

    kind = ErrorKind.NETWORK

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.details = details or message


class RequestTimeoutError(NetworkError):
    """Raised when a store request exceeds its bound."""

    kind = ErrorKind.TIMEOUT


class ContractReadError(AggregatorError):
    """Raised when a ledger read fails."""

    kind = ErrorKind.CONTRACT_READ
