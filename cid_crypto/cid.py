# cid_crypto/cid.py
"""
Content identifiers (CIDv0 style): Base58(0x12 || 0x20 || sha256(content)).
"""
import hashlib
import logging

from .base58 import base58_encode
from .key_generation import RandomSource, default_random_source, random_bytes

logger = logging.getLogger(__name__)

MULTIHASH_SHA2_256 = 0x12
SHA2_256_DIGEST_LENGTH = 0x20

_FILE_CHUNK_SIZE = 64 * 1024


def multihash_sha2_256(digest: bytes) -> bytes:
    """Prefixes a 32-byte SHA-256 digest with its multihash tag and length."""
    if len(digest) != SHA2_256_DIGEST_LENGTH:
        raise ValueError(f"SHA-256 digest must be {SHA2_256_DIGEST_LENGTH} bytes, got {len(digest)}")
    return bytes([MULTIHASH_SHA2_256, SHA2_256_DIGEST_LENGTH]) + bytes(digest)


def cid_from_digest(digest: bytes) -> str:
    return base58_encode(multihash_sha2_256(digest))


def compute_cid(content: bytes) -> str:
    """Identical content always yields the identical CID."""
    return cid_from_digest(hashlib.sha256(content).digest())


def compute_cid_from_file(file_path: str) -> str:
    """Same result as ``compute_cid`` on the file's bytes, without reading it into memory at once."""
    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(_FILE_CHUNK_SIZE), b""):
            hasher.update(chunk)
    cid = cid_from_digest(hasher.digest())
    logger.debug(f"Computed CID for file {file_path}")
    return cid


def random_cid(rng: RandomSource = default_random_source) -> str:
    """
    A well-formed CID over 32 random bytes instead of a real digest.

    For demo and test data only: it does not address any content.
    """
    return cid_from_digest(random_bytes(SHA2_256_DIGEST_LENGTH, rng))
