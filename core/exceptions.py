# PATH: core/exceptions.py
"""
Typed exceptions for POOLSCAN.

Fatal errors (registry open, config) are distinguished from per-entry
errors, which the pipeline recovers from.
"""

from typing import Optional

from core.constants import ErrorCode


class PoolscanError(Exception):
    """Base exception for POOLSCAN."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class MalformedAddress(PoolscanError):
    """Address does not conform to the raw or display encoding."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.MALFORMED_ADDRESS, details)


class AbiDecodeError(PoolscanError):
    """Contract return data could not be decoded."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.ABI_DECODE_ERROR, details)


class GatewayError(PoolscanError):
    """Remote call failed (network, node, timeout)."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INFRA_RPC_ERROR,
        details: Optional[dict] = None,
    ):
        super().__init__(message, code, details)


class ContractRevertError(GatewayError):
    """Constant call reverted on-chain."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.CONTRACT_REVERT, details)


class RegistryUnreachable(PoolscanError):
    """Entry count could not be fetched from the registry."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.REGISTRY_UNREACHABLE, details)


class InvalidRegistry(PoolscanError):
    """Registry returned a missing or non-numeric entry count."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.INVALID_REGISTRY, details)


class EnrichmentError(PoolscanError):
    """
    Failure while enriching one registry entry.

    Wraps the underlying cause; the scan drops the entry and continues.
    """

    def __init__(
        self,
        entry_address: Optional[str],
        cause: BaseException,
        details: Optional[dict] = None,
    ):
        self.entry_address = entry_address
        self.cause = cause
        super().__init__(
            f"Entry {entry_address or '<unresolved>'} failed: {cause}",
            ErrorCode.ENRICHMENT_FAILED,
            {
                "entry_address": entry_address,
                "error_type": type(cause).__name__,
                **(details or {}),
            },
        )


class SinkWriteError(PoolscanError):
    """Scan result could not be persisted."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.SINK_WRITE_FAILED, details)


class ConfigError(PoolscanError):
    """Configuration is missing or invalid."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message, ErrorCode.CONFIG_ERROR, details)
