# cid_crypto/__init__.py

"""
CID confidentiality core (PyCryptodome)
This package holds the deterministic, local part of the storage scheme:
- Byte/hex/UTF-8 conversions
- Base58 encoding and CIDv0 computation (sha2-256 multihash)
- Key-carrier generation from an injectable secure random source
- Address-keyed AES-256-GCM encryption under the versioned wire format
- Normalization of revealed key-carrier values
"""
import logging

from .address import AddressForm, address_to_bytes, classify_address, normalize_address
from .base58 import base58_encode
from .cid import compute_cid, compute_cid_from_file, random_cid
from .encoding import bytes_to_hex, bytes_to_utf8, hex_to_bytes, utf8_to_bytes
from .errors import (
    AuthenticationFailure,
    BlackBoxError,
    EncodingError,
    InvalidAddressLength,
    MalformedPayload,
    UnrecognizedFormat,
    UnsupportedVersion,
)
from .key_generation import RandomSource, generate_key_carrier
from .symmetric_ciphers import (
    decrypt_utf8_with_address,
    derive_key_from_address,
    encrypt_utf8_with_address,
)

logger = logging.getLogger(__name__)

__all__ = [
    "AddressForm",
    "address_to_bytes",
    "classify_address",
    "normalize_address",
    "base58_encode",
    "compute_cid",
    "compute_cid_from_file",
    "random_cid",
    "bytes_to_hex",
    "bytes_to_utf8",
    "hex_to_bytes",
    "utf8_to_bytes",
    "RandomSource",
    "generate_key_carrier",
    "derive_key_from_address",
    "encrypt_utf8_with_address",
    "decrypt_utf8_with_address",
    "BlackBoxError",
    "MalformedPayload",
    "UnsupportedVersion",
    "AuthenticationFailure",
    "EncodingError",
    "UnrecognizedFormat",
    "InvalidAddressLength",
]

logger.debug("CID crypto package initialized (PyCryptodome AES-GCM).")
