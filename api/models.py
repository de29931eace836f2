from pydantic import BaseModel, Field, model_validator
from typing import Optional

# --- API Request/Response Models (using Pydantic) ---

class StoreFileRequest(BaseModel):
    """Request model for storing a file record."""
    owner: str = Field(..., description="Address of the account storing the record")
    file_name: str = Field(..., description="File name to store in the clear")
    cid: Optional[str] = Field(None, description="CID to protect. Computed from content_b64 when omitted")
    content_b64: Optional[str] = Field(None, description="Base64 file content used to compute the CID")

    @model_validator(mode="after")
    def check_cid_or_content(self):
        if self.cid is not None and self.content_b64 is not None:
            raise ValueError("Provide either 'cid' or 'content_b64', not both")
        return self

class StoreFileResponse(BaseModel):
    """Response model for a stored file record."""
    owner: str
    index: int = Field(..., description="Index assigned by the ledger")
    file_name: str
    cid: str = Field(..., description="The CID that was encrypted (random demo CID if none was supplied)")
    encrypted_ipfs_hash: str = Field(..., description="0x-prefixed versioned AES-GCM payload")
    encrypted_address_a: str = Field(..., description="Handle of the protected key-carrier")

class FileCountResponse(BaseModel):
    owner: str
    count: int

class RevealedFileResponse(BaseModel):
    """A record with its CID recovered for the caller."""
    owner: str
    index: int
    file_name: str
    cid: str
    created_at: int = Field(..., description="UNIX timestamp (seconds) of the ledger entry")
