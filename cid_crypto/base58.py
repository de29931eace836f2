# cid_crypto/base58.py
"""
Base58 encoding with the Bitcoin/IPFS alphabet (no 0, O, I or l).

Only the encoder is provided; content identifiers are produced here but never
parsed back.
"""
import base58

BASE58_ALPHABET = base58.BITCOIN_ALPHABET.decode("ascii")


def base58_encode(data: bytes) -> str:
    """
    Each leading zero byte becomes a leading '1'. An all-zero input of length N
    gives N '1's and an empty input gives a single '1'.
    """
    return base58.b58encode(bytes(data), alphabet=base58.BITCOIN_ALPHABET).decode("ascii") or "1"
