# PATH: core/constants.py
"""
Constants for POOLSCAN.

Contains enums, contract signatures and scan defaults.
"""

from enum import Enum
from typing import Final


# =============================================================================
# ADDRESSES
# =============================================================================

# TRON raw addresses: 0x41 prefix byte + 20 account bytes
ADDRESS_PREFIX_HEX: Final[str] = "41"
ADDRESS_PREFIX_BYTE: Final[int] = 0x41
ADDRESS_BYTES: Final[int] = 21
ADDRESS_HEX_LENGTH: Final[int] = ADDRESS_BYTES * 2

# Used as caller for constant calls when no owner is configured
ZERO_ADDRESS_RAW: Final[str] = ADDRESS_PREFIX_HEX + "00" * 20


# =============================================================================
# CONTRACT SIGNATURES (resolved to selectors by the node)
# =============================================================================

SIG_ALL_POOLS_LENGTH: Final[str] = "allPoolsLength()"
SIG_ALL_POOLS: Final[str] = "allPools(uint256)"

SIG_TOKEN0: Final[str] = "token0()"
SIG_TOKEN1: Final[str] = "token1()"
SIG_FEE: Final[str] = "fee()"
SIG_LIQUIDITY: Final[str] = "liquidity()"

SIG_SYMBOL: Final[str] = "symbol()"
SIG_DECIMALS: Final[str] = "decimals()"


# =============================================================================
# SCAN DEFAULTS
# =============================================================================

# Fee is expressed in hundredths of a bip; /10000 gives percent
FEE_PERCENT_DIVISOR: Final[int] = 10_000

DEFAULT_OUTPUT_PATH: Final[str] = "filtered_pools_info.json"
DEFAULT_CONFIG_PATH: Final[str] = "config/scan.yaml"
DEFAULT_NETWORK: Final[str] = "nile"
DEFAULT_TIMEOUT_SECONDS: Final[int] = 10

API_KEY_HEADER: Final[str] = "TRON-PRO-API-KEY"

TRIGGER_CONSTANT_PATH: Final[str] = "/wallet/triggerconstantcontract"
TRIGGER_CONSTANT_SOLIDITY_PATH: Final[str] = "/walletsolidity/triggerconstantcontract"


class ErrorCode(str, Enum):
    """Error codes carried by every PoolscanError."""
    # Input / decoding
    MALFORMED_ADDRESS = "MALFORMED_ADDRESS"
    ABI_DECODE_ERROR = "ABI_DECODE_ERROR"

    # Infrastructure errors
    INFRA_RPC_ERROR = "INFRA_RPC_ERROR"
    INFRA_TIMEOUT = "INFRA_TIMEOUT"
    CONTRACT_REVERT = "CONTRACT_REVERT"

    # Registry
    REGISTRY_UNREACHABLE = "REGISTRY_UNREACHABLE"
    INVALID_REGISTRY = "INVALID_REGISTRY"

    # Per-entry
    ENRICHMENT_FAILED = "ENRICHMENT_FAILED"

    # Output / setup
    SINK_WRITE_FAILED = "SINK_WRITE_FAILED"
    CONFIG_ERROR = "CONFIG_ERROR"

    UNKNOWN = "UNKNOWN"


class ExitCode(int, Enum):
    """Process exit codes for the scan CLI."""
    OK = 0
    FATAL = 1
    SAVE_FAILED = 2
