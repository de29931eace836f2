# cid_crypto/encoding.py
"""Conversions between raw bytes, 0x-prefixed hex strings and UTF-8 text."""
import binascii


def bytes_to_hex(data: bytes) -> str:
    return "0x" + bytes(data).hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Decodes a hex string, with or without a leading ``0x``. Raises ValueError on bad input."""
    normalized = hex_str[2:] if hex_str.startswith(("0x", "0X")) else hex_str
    if len(normalized) % 2 != 0:
        raise ValueError("Invalid hex string: odd number of digits")
    try:
        return binascii.unhexlify(normalized)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid hex string: {e}") from e


def utf8_to_bytes(text: str) -> bytes:
    return text.encode("utf-8")


def bytes_to_utf8(data: bytes) -> str:
    # strict: callers must see invalid UTF-8 rather than replacement characters
    return bytes(data).decode("utf-8")
