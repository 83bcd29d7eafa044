"""
core - Core utilities and models for POOLSCAN.

This package contains:
- address.py: TRON raw/display address codec
- models.py: Data models (TokenRef, EntrySummary, outcomes, ScanResult)
- constants.py: Contract signatures, defaults, error codes
- exceptions.py: Typed exceptions with error codes
- logging.py: Structured JSON logging
"""

from core.address import Address, ZERO_ADDRESS, to_display, to_raw
from core.constants import ErrorCode, ExitCode
from core.exceptions import (
    AbiDecodeError,
    ConfigError,
    ContractRevertError,
    EnrichmentError,
    GatewayError,
    InvalidRegistry,
    MalformedAddress,
    PoolscanError,
    RegistryUnreachable,
    SinkWriteError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    EntrySummary,
    Failure,
    Match,
    NoMatch,
    Outcome,
    RegistryHandle,
    ScanResult,
    TokenRef,
    format_fee_tier,
)

__all__ = [
    # Address
    "Address",
    "ZERO_ADDRESS",
    "to_display",
    "to_raw",
    # Constants
    "ErrorCode",
    "ExitCode",
    # Exceptions
    "AbiDecodeError",
    "ConfigError",
    "ContractRevertError",
    "EnrichmentError",
    "GatewayError",
    "InvalidRegistry",
    "MalformedAddress",
    "PoolscanError",
    "RegistryUnreachable",
    "SinkWriteError",
    # Models
    "EntrySummary",
    "Failure",
    "Match",
    "NoMatch",
    "Outcome",
    "RegistryHandle",
    "ScanResult",
    "TokenRef",
    "format_fee_tier",
    # Logging
    "get_logger",
    "setup_logging",
]
