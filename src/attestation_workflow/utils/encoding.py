"""Hex helpers for verifier payloads."""


def to_utf8_hex_bytes32(value: str) -> str:
    """Encode ``value`` as UTF-8 hex, right-padded to 32 bytes.

    Example:
        >>> to_utf8_hex_bytes32("Web2Json")[:18]
        '0x576562324a736f6e'

    Raises:
        ValueError: If the UTF-8 encoding is longer than 32 bytes
    """
    raw = value.encode("utf-8")
    if len(raw) > 32:
        raise ValueError(f"{value!r} does not fit in 32 bytes")
    return "0x" + raw.hex().ljust(64, "0")
