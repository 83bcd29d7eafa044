# PATH: core/address.py
"""
core/address.py - TRON address codec.

Two encodings of the same 21-byte account identifier:
- raw:     hex, 0x41 prefix byte + 20 bytes ("41a614f8...")
- display: base58check of the raw bytes ("TR7NHqje...")

Equality is defined on the raw form. Both conversions are pure and
never pad or truncate; anything else raises MalformedAddress.
"""

import re
from dataclasses import dataclass

import base58

from core.constants import (
    ADDRESS_BYTES,
    ADDRESS_HEX_LENGTH,
    ADDRESS_PREFIX_BYTE,
    ADDRESS_PREFIX_HEX,
    ZERO_ADDRESS_RAW,
)
from core.exceptions import MalformedAddress

_RAW_PATTERN = re.compile(r"^41[0-9a-f]{40}$")
_WORD_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def _normalize_raw(raw: str) -> str:
    if not isinstance(raw, str):
        raise MalformedAddress(
            f"Raw address must be a string, got {type(raw).__name__}",
        )
    value = raw.strip().lower()
    if value.startswith("0x"):
        value = value[2:]
    if not _RAW_PATTERN.match(value):
        raise MalformedAddress(
            f"Malformed raw address: {raw!r}",
            details={"expected_length": ADDRESS_HEX_LENGTH, "length": len(value)},
        )
    return value


def to_display(raw: str) -> str:
    """Encode a raw hex address as base58check."""
    value = _normalize_raw(raw)
    return base58.b58encode_check(bytes.fromhex(value)).decode("ascii")


def to_raw(display: str) -> str:
    """Decode a base58check display address to raw hex."""
    if not isinstance(display, str) or not display:
        raise MalformedAddress(f"Malformed display address: {display!r}")

    try:
        payload = base58.b58decode_check(display.strip())
    except ValueError as e:
        raise MalformedAddress(
            f"Malformed display address: {display!r}",
            details={"error": str(e)},
        ) from e

    if len(payload) != ADDRESS_BYTES or payload[0] != ADDRESS_PREFIX_BYTE:
        raise MalformedAddress(
            f"Display address does not decode to a TRON account: {display!r}",
            details={"payload_length": len(payload)},
        )
    return payload.hex()


def from_evm_word(word: str) -> str:
    """
    Convert a 32-byte ABI address word to a raw TRON address.

    Contracts return addresses EVM-style (20 bytes, left padded);
    the TRON prefix byte is re-attached here.
    """
    value = word.lower()
    if value.startswith("0x"):
        value = value[2:]
    if not _WORD_PATTERN.match(value):
        raise MalformedAddress(f"Malformed address word: {word!r}")
    return ADDRESS_PREFIX_HEX + value[-40:]


@dataclass(frozen=True)
class Address:
    """Account identifier, compared by its raw encoding."""
    raw: str

    def __post_init__(self):
        object.__setattr__(self, "raw", _normalize_raw(self.raw))

    @classmethod
    def from_raw(cls, raw: str) -> "Address":
        return cls(raw)

    @classmethod
    def from_display(cls, display: str) -> "Address":
        return cls(to_raw(display))

    @classmethod
    def parse(cls, value: str) -> "Address":
        """Accept either encoding (display addresses start with 'T')."""
        if isinstance(value, str) and value.strip().startswith("T"):
            return cls.from_display(value)
        return cls.from_raw(value)

    @property
    def display(self) -> str:
        return to_display(self.raw)

    def __str__(self) -> str:
        return self.display


ZERO_ADDRESS = Address(ZERO_ADDRESS_RAW)
