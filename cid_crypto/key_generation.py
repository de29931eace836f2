# cid_crypto/key_generation.py
"""
Key-carrier generation.

A key-carrier ("address A") is 20 random bytes rendered like an EVM address.
It has no on-chain meaning; it only exists to derive the symmetric key that
protects one stored CID, so a fresh one is generated for every stored item.
"""
import logging
from typing import Callable

from Crypto.Random import get_random_bytes

logger = logging.getLogger(__name__)

# rng(n) -> n bytes. Must be cryptographically secure outside of tests.
RandomSource = Callable[[int], bytes]

ADDRESS_LENGTH = 20

default_random_source: RandomSource = get_random_bytes


def random_bytes(length: int, rng: RandomSource = default_random_source) -> bytes:
    """Draws ``length`` bytes from ``rng`` and checks the source returned what was asked for."""
    data = rng(length)
    if len(data) != length:
        raise ValueError(f"Random source returned {len(data)} bytes, expected {length}")
    return bytes(data)


def generate_key_carrier(rng: RandomSource = default_random_source) -> str:
    """Returns a fresh key-carrier as a lower-case ``0x`` + 40 hex digit string."""
    carrier = "0x" + random_bytes(ADDRESS_LENGTH, rng).hex()
    logger.debug("Generated new key-carrier address.")
    return carrier
