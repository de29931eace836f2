# cid_crypto/errors.py
"""
Error taxonomy for the CID confidentiality core and its collaborators.

Every error is terminal for the single operation that raised it. Nothing here
is retried automatically; callers decide whether a ledger or reveal failure
is worth another attempt.
"""


class BlackBoxError(Exception):
    """Base class for every error raised by this project."""


# --- Core (local, deterministic) errors ---

class MalformedPayload(BlackBoxError):
    """Encrypted payload is structurally invalid (too short, bad hex)."""


class UnsupportedVersion(BlackBoxError):
    """Encrypted payload carries a format version this code does not know."""


class AuthenticationFailure(BlackBoxError):
    """AEAD tag did not verify: wrong key, tampered or corrupted payload."""


class EncodingError(BlackBoxError):
    """Decrypted bytes are not valid UTF-8."""


class UnrecognizedFormat(BlackBoxError):
    """A revealed address value matches none of the accepted shapes."""


class InvalidAddressLength(BlackBoxError):
    """Key-carrier is not exactly 20 bytes."""


# --- Ledger collaborator errors ---

class LedgerError(BlackBoxError):
    pass


class EmptyFileName(LedgerError):
    pass


class EmptyEncryptedIpfsHash(LedgerError):
    pass


class InvalidIndex(LedgerError):
    pass


class InvalidInputProof(LedgerError):
    pass


# --- Confidential-compute collaborator errors ---

class RevealError(BlackBoxError):
    """The key-carrier could not be revealed (unknown handle, timeout, empty result)."""


class NotAuthorized(RevealError):
    """Caller is not on the access list for the protected handle."""
