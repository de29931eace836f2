# --- File: security/file_record.py ---
from pydantic import BaseModel, Field


class FileRecord(BaseModel):
    """
    One stored file entry as the ledger returns it.
    Nothing in it reveals the CID: the payload is AES-GCM ciphertext and the
    key-carrier is only referenced through its confidential-compute handle.
    """
    owner: str = Field(..., description="Address of the account that stored the record.")
    index: int = Field(..., ge=0, description="Zero-based position in the owner's record list.")
    file_name: str = Field(..., description="Plaintext file name supplied at upload.")
    encrypted_ipfs_hash: str = Field(..., description="0x-prefixed hex of the versioned AES-GCM payload wrapping the CID.")
    encrypted_address_a: str = Field(..., description="0x-prefixed 32-byte handle of the protected key-carrier.")
    created_at: int = Field(..., description="UNIX timestamp (seconds) at which the ledger accepted the record.")

    model_config = {"from_attributes": True}


class StoredFile(BaseModel):
    """Outcome of a write: what was submitted and the index the ledger assigned."""
    owner: str
    index: int
    file_name: str
    cid: str = Field(..., description="The plaintext CID, known only to the uploader at this point.")
    encrypted_ipfs_hash: str
    encrypted_address_a: str


class RevealedFile(BaseModel):
    """A record whose CID has been recovered for an authorized caller."""
    owner: str
    index: int
    file_name: str
    cid: str
    created_at: int
