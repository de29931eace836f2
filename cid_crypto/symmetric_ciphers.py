# cid_crypto/symmetric_ciphers.py
"""
Address-keyed AES-256-GCM.

The key is SHA-256 of the key-carrier's 20 raw bytes. Payloads travel as a
0x-prefixed hex string of:

    version (1) || nonce (12) || ciphertext (len(plaintext)) || tag (16)

Only version 0x01 exists. Its offsets are fixed; a future version with other
AEAD parameters would need explicit length fields.
"""
import hashlib
import logging
from typing import Tuple, Union

from Crypto.Cipher import AES

from .address import address_to_bytes
from .encoding import bytes_to_hex, bytes_to_utf8, hex_to_bytes, utf8_to_bytes
from .errors import (
    AuthenticationFailure,
    EncodingError,
    MalformedPayload,
    UnsupportedVersion,
)
from .key_generation import RandomSource, default_random_source, random_bytes

logger = logging.getLogger(__name__)

PAYLOAD_VERSION = 0x01
NONCE_SIZE = 12
TAG_SIZE = 16
KEY_SIZE = 32
MIN_PAYLOAD_SIZE = 1 + NONCE_SIZE + TAG_SIZE


def derive_key_from_address(address: Union[str, bytes]) -> bytes:
    """Same key-carrier, same key: SHA-256 over the address bytes."""
    return hashlib.sha256(address_to_bytes(address)).digest()


def aes_gcm_encrypt(plaintext_bytes: bytes, aes_key_bytes: bytes, nonce_bytes: bytes) -> Tuple[bytes, bytes]:
    """Returns (ciphertext, tag). Raises ValueError/TypeError on a bad key or nonce."""
    cipher = AES.new(aes_key_bytes, AES.MODE_GCM, nonce=nonce_bytes, mac_len=TAG_SIZE)
    return cipher.encrypt_and_digest(plaintext_bytes)


def aes_gcm_decrypt(ciphertext_bytes: bytes, tag_bytes: bytes, aes_key_bytes: bytes, nonce_bytes: bytes) -> bytes:
    cipher = AES.new(aes_key_bytes, AES.MODE_GCM, nonce=nonce_bytes, mac_len=TAG_SIZE)
    try:
        return cipher.decrypt_and_verify(ciphertext_bytes, tag_bytes)
    except ValueError as e:
        # PyCryptodome reports a tag mismatch as ValueError("MAC check failed")
        logger.error("AES-GCM decryption failed: authentication tag mismatch.")
        raise AuthenticationFailure("Encrypted payload failed authentication") from e


def encode_payload(nonce: bytes, ciphertext: bytes, tag: bytes) -> str:
    return bytes_to_hex(bytes([PAYLOAD_VERSION]) + nonce + ciphertext + tag)


def decode_payload(encrypted_hex: str) -> Tuple[bytes, bytes, bytes]:
    """
    Splits a hex payload into (nonce, ciphertext, tag).

    Structure is checked before the version so that a truncated payload is
    always reported as malformed.
    """
    try:
        payload = hex_to_bytes(encrypted_hex)
    except (ValueError, AttributeError) as e:
        raise MalformedPayload(f"Encrypted payload is not valid hex: {e}") from e

    if len(payload) < MIN_PAYLOAD_SIZE:
        raise MalformedPayload(
            f"Encrypted payload is {len(payload)} bytes, minimum is {MIN_PAYLOAD_SIZE}"
        )
    if payload[0] != PAYLOAD_VERSION:
        raise UnsupportedVersion(f"Unsupported payload version: 0x{payload[0]:02x}")

    nonce = payload[1:1 + NONCE_SIZE]
    ciphertext = payload[1 + NONCE_SIZE:-TAG_SIZE]
    tag = payload[-TAG_SIZE:]
    return nonce, ciphertext, tag


def encrypt_utf8_with_address(
    address: Union[str, bytes],
    plaintext: str,
    rng: RandomSource = default_random_source,
) -> str:
    """Encrypts ``plaintext`` under the key derived from ``address`` with a fresh nonce per call."""
    key = derive_key_from_address(address)
    nonce = random_bytes(NONCE_SIZE, rng)
    ciphertext, tag = aes_gcm_encrypt(utf8_to_bytes(plaintext), key, nonce)
    logger.debug(f"Encrypted {len(ciphertext)}-byte plaintext under key-carrier.")
    return encode_payload(nonce, ciphertext, tag)


def decrypt_utf8_with_address(address: Union[str, bytes], encrypted_hex: str) -> str:
    """
    Inverse of ``encrypt_utf8_with_address``.

    Raises MalformedPayload, UnsupportedVersion, AuthenticationFailure or
    EncodingError; never returns partial or unverified plaintext.
    """
    nonce, ciphertext, tag = decode_payload(encrypted_hex)
    key = derive_key_from_address(address)
    plaintext_bytes = aes_gcm_decrypt(ciphertext, tag, key, nonce)
    try:
        return bytes_to_utf8(plaintext_bytes)
    except UnicodeDecodeError as e:
        logger.error("Decrypted payload is not valid UTF-8.")
        raise EncodingError("Decrypted payload is not valid UTF-8") from e
