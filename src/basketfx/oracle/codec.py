"""Transcoding between Hermes transport encoding and on-chain bytes.

Hermes ships signed price updates as base64; the Pyth verifier contract takes
them as raw bytes, which JSON-RPC and ABI tooling express as 0x-prefixed hex.
The signature inside an update covers the exact bytes, so this must be a pure
byte-for-byte conversion.
"""

import base64
import binascii

from basketfx.exceptions import EncodingFailure


def to_onchain_bytes(update_b64: str) -> str:
    """Convert a base64 price update into 0x-prefixed hex.

    Args:
        update_b64: Base64 update blob as returned by Hermes

    Returns:
        Hex string with 0x prefix

    Raises:
        EncodingFailure: If the input is not valid base64
    """
    try:
        raw = base64.b64decode(update_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingFailure(f"Invalid base64 price update: {e}") from e

    if not raw:
        raise EncodingFailure("Empty price update")

    return "0x" + raw.hex()


def from_onchain_bytes(update_hex: str) -> bytes:
    """Decode 0x-prefixed hex back into raw update bytes."""
    payload = update_hex[2:] if update_hex.startswith(("0x", "0X")) else update_hex
    try:
        return bytes.fromhex(payload)
    except ValueError as e:
        raise EncodingFailure(f"Invalid hex price update: {e}") from e


def encode_updates(updates_b64: list[str]) -> list[str]:
    """Convert a batch of Hermes updates, preserving order."""
    return [to_onchain_bytes(update) for update in updates_b64]
