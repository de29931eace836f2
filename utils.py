# --- File: utils.py ---
import os
from typing import Union

from cid_crypto.encoding import bytes_to_hex, hex_to_bytes

# --- Utility Functions ---

HANDLE_SIZE = 32


def normalize_bytes32_handle(handle: Union[str, bytes, int]) -> str:
    """
    Renders a confidential-compute handle as 0x + 64 hex digits.
    Ledgers hand handles back as hex text, raw bytes or integers depending on the client library.
    """
    if isinstance(handle, (bytes, bytearray)):
        raw = bytes(handle)
    elif isinstance(handle, int):
        if handle < 0 or handle >= 1 << (HANDLE_SIZE * 8):
            raise ValueError("Handle integer does not fit in 32 bytes")
        raw = handle.to_bytes(HANDLE_SIZE, "big")
    else:
        raw = hex_to_bytes(handle)

    if len(raw) > HANDLE_SIZE:
        raise ValueError(f"Handle is {len(raw)} bytes, expected at most {HANDLE_SIZE}")
    return bytes_to_hex(raw.rjust(HANDLE_SIZE, b"\x00"))


def describe_file(file_path: str) -> str:
    """'name (size KB)', with one decimal below 10 KB."""
    size = os.path.getsize(file_path)
    size_kb = size / 1024
    size_text = f"{size_kb:.1f}" if size < 1024 * 10 else f"{size_kb:.0f}"
    return f"{os.path.basename(file_path)} ({size_text} KB)"


def short_cid(cid: str, length: int = 6) -> str:
    """Display-only abbreviation of a CID, e.g. 'QmRN6w…'."""
    if len(cid) <= length:
        return cid
    return f"{cid[:length]}…"
