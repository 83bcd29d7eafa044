# PATH: chains/abi.py
"""
chains/abi.py - Minimal ABI encoding for constant calls.

The node resolves function selectors from the signature string, so only
parameter encoding and return-value decoding live here.
"""

from typing import Any, Sequence

from core.address import Address, from_evm_word
from core.exceptions import AbiDecodeError, MalformedAddress

WORD_HEX = 64


def encode_uint256(value: int) -> str:
    """Encode a uint256 as one 32-byte word."""
    if value < 0 or value >= 2 ** 256:
        raise ValueError(f"uint256 out of range: {value}")
    return hex(value)[2:].zfill(WORD_HEX)


def encode_address(address: Address) -> str:
    """Encode an address as a left-padded 32-byte word (prefix byte dropped)."""
    return address.raw[2:].zfill(WORD_HEX)


def encode_args(args: Sequence[Any]) -> str:
    """
    Encode static call arguments.

    Supports int (uint256) and Address values.
    """
    parts = []
    for arg in args:
        if isinstance(arg, Address):
            parts.append(encode_address(arg))
        elif isinstance(arg, int) and not isinstance(arg, bool):
            parts.append(encode_uint256(arg))
        else:
            raise TypeError(f"Unsupported ABI argument type: {type(arg).__name__}")
    return "".join(parts)


def _clean(hex_result: str) -> str:
    if hex_result is None:
        raise AbiDecodeError("Empty call result")
    data = hex_result[2:] if hex_result.startswith("0x") else hex_result
    if not data:
        raise AbiDecodeError("Empty call result")
    return data.lower()


def _word(data: str, index: int) -> str:
    start = index * WORD_HEX
    word = data[start:start + WORD_HEX]
    if len(word) < WORD_HEX:
        raise AbiDecodeError(
            f"Call result too short: {len(data)} chars",
            details={"data_length": len(data), "word_index": index},
        )
    return word


def decode_uint(hex_result: str) -> int:
    """Decode the first word as an unsigned integer."""
    data = _clean(hex_result)
    try:
        return int(_word(data, 0), 16)
    except ValueError as e:
        raise AbiDecodeError(f"Invalid uint word: {data[:WORD_HEX]!r}") from e


def decode_address(hex_result: str) -> Address:
    """Decode the first word as a TRON address."""
    data = _clean(hex_result)
    try:
        return Address(from_evm_word(_word(data, 0)))
    except MalformedAddress as e:
        raise AbiDecodeError(f"Invalid address word: {e.message}") from e


def _decode_bytes32_string(word: str) -> str:
    # Legacy tokens return symbol() as bytes32
    raw = bytes.fromhex(word).rstrip(b"\x00")
    return raw.decode("utf-8", errors="replace")


def decode_string(hex_result: str) -> str:
    """Decode a dynamic string return value (falls back to bytes32)."""
    data = _clean(hex_result)
    try:
        if len(data) == WORD_HEX:
            return _decode_bytes32_string(data)

        offset = int(_word(data, 0), 16)
        if offset % 32 != 0:
            raise AbiDecodeError(f"Invalid string offset: {offset}")

        length_index = offset // 32
        length = int(_word(data, length_index), 16)
        start = (length_index + 1) * WORD_HEX
        payload = data[start:start + length * 2]
        if len(payload) < length * 2:
            raise AbiDecodeError(
                "String payload truncated",
                details={"expected_bytes": length, "got_chars": len(payload)},
            )
        return bytes.fromhex(payload).decode("utf-8", errors="replace")
    except ValueError as e:
        raise AbiDecodeError(f"Invalid string data: {e}") from e


def decode_result(hex_result: str, returns: str) -> Any:
    """Decode a single return value of the given ABI type."""
    if returns.startswith("uint"):
        return decode_uint(hex_result)
    if returns == "address":
        return decode_address(hex_result)
    if returns == "string":
        return decode_string(hex_result)
    raise ValueError(f"Unsupported return type: {returns}")
