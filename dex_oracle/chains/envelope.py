"""
JSON-RPC response envelope parsing.

The body is scanned for the exact marker '"result":"' rather than parsed as
JSON: a null, numeric or object result never matches the marker and is
rejected along with a missing field.
"""

from __future__ import annotations

import binascii

from ..core.errors import MalformedEnvelope

RESULT_MARKER = '"result":"'


def extract_hex_result(body: str) -> str:
    """Return the hex payload of the "result" field, without any 0x prefix."""
    start = body.find(RESULT_MARKER)
    if start < 0:
        raise MalformedEnvelope("response has no string \"result\" field")
    data_start = start + len(RESULT_MARKER)
    end = body.find('"', data_start)
    if end < 0:
        raise MalformedEnvelope("unterminated \"result\" string")
    hex_data = body[data_start:end]
    if not hex_data:
        raise MalformedEnvelope("empty \"result\" field")
    if hex_data.startswith("0x"):
        return hex_data[2:]
    return hex_data


def decode_hex(hex_data: str) -> bytes:
    """Hex string (no prefix) -> bytes. Odd length or non-hex characters are rejected."""
    try:
        return binascii.unhexlify(hex_data)
    except (binascii.Error, ValueError) as exc:
        raise MalformedEnvelope(f"invalid hex in result: {exc}") from exc


__all__ = ["RESULT_MARKER", "extract_hex_result", "decode_hex"]
