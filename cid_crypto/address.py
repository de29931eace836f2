# cid_crypto/address.py
"""
Address handling for key-carriers.

``address_to_bytes`` turns a textual address into the raw 20 bytes used for
key derivation. ``normalize_address`` canonicalizes whatever the
confidential-compute platform hands back after a reveal, which may be a
0x-prefixed hex address, a decimal integer, or 40 bare hex digits.
"""
import logging
import re
from enum import Enum
from typing import Tuple, Union

from .errors import InvalidAddressLength, UnrecognizedFormat
from .key_generation import ADDRESS_LENGTH

logger = logging.getLogger(__name__)

_HEX_DIGITS = ADDRESS_LENGTH * 2
_PREFIXED_HEX_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")
_DECIMAL_RE = re.compile(r"^[0-9]+$")
_BARE_HEX_RE = re.compile(r"^[0-9a-fA-F]{40}$")
_MAX_ADDRESS_VALUE = (1 << (ADDRESS_LENGTH * 8)) - 1


class AddressForm(Enum):
    HEX = "hex"
    DECIMAL = "decimal"
    BARE_HEX = "bare_hex"
    INVALID = "invalid"


def address_to_bytes(address: Union[str, bytes]) -> bytes:
    """
    Raw 20 bytes of an address. Text is lower-cased and stripped of ``0x``
    first so that differently-cased spellings map to the same bytes.
    """
    if isinstance(address, (bytes, bytearray)):
        raw = bytes(address)
        if len(raw) != ADDRESS_LENGTH:
            raise InvalidAddressLength(f"Address must be {ADDRESS_LENGTH} bytes, got {len(raw)}")
        return raw

    normalized = address.strip().lower()
    if normalized.startswith("0x"):
        normalized = normalized[2:]
    if len(normalized) != _HEX_DIGITS:
        raise InvalidAddressLength(
            f"Address must be {_HEX_DIGITS} hex digits, got {len(normalized)}"
        )
    try:
        return bytes.fromhex(normalized)
    except ValueError as e:
        raise UnrecognizedFormat(f"Address is not hexadecimal: {address!r}") from e


def classify_address(raw: Union[str, int]) -> Tuple[AddressForm, str]:
    """
    Tags a revealed value with the shape it arrived in.

    Returns the form and the trimmed textual value. Checks run in order
    (prefixed hex, decimal, bare hex), so a 40-character all-digit string is
    read as decimal.
    """
    if isinstance(raw, bool):
        return AddressForm.INVALID, str(raw)
    if isinstance(raw, int):
        return (AddressForm.DECIMAL, str(raw)) if raw >= 0 else (AddressForm.INVALID, str(raw))
    if not isinstance(raw, str):
        return AddressForm.INVALID, repr(raw)

    trimmed = raw.strip()
    if _PREFIXED_HEX_RE.match(trimmed):
        return AddressForm.HEX, trimmed
    if _DECIMAL_RE.match(trimmed):
        return AddressForm.DECIMAL, trimmed
    if _BARE_HEX_RE.match(trimmed):
        return AddressForm.BARE_HEX, trimmed
    return AddressForm.INVALID, trimmed


def normalize_address(raw: Union[str, int]) -> str:
    """
    Canonical ``0x`` + 40 hex digit form of a revealed key-carrier.

    - prefixed hex is returned as is (casing preserved),
    - decimal is re-rendered as zero-padded lower-case hex,
    - bare hex gets the ``0x`` prefix.

    Anything else, including a decimal value wider than 160 bits, raises
    UnrecognizedFormat.
    """
    form, value = classify_address(raw)

    if form is AddressForm.HEX:
        return value
    if form is AddressForm.DECIMAL:
        number = int(value)
        if number > _MAX_ADDRESS_VALUE:
            raise UnrecognizedFormat(f"Decimal value does not fit in {ADDRESS_LENGTH} bytes")
        return "0x" + format(number, f"0{_HEX_DIGITS}x")
    if form is AddressForm.BARE_HEX:
        return "0x" + value

    logger.warning("Revealed address value has an unrecognized format.")
    raise UnrecognizedFormat(f"Unrecognized decrypted address format: {value}")
