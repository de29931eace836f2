# --- File: security/collaborators.py ---
"""
Capabilities the orchestrator needs from the outside world.

A ``KeyProtector`` is the confidential-compute platform: it turns a
key-carrier into an opaque 32-byte handle on the way in, and reveals it again
only to authorized callers. A ``LedgerStore`` keeps per-owner file records.
Anything implementing these methods can be plugged into ``BlackBoxClient``.
"""
from typing import Protocol, Tuple, Union

from .file_record import FileRecord


class KeyProtector(Protocol):
    def protect(self, raw_value: str, contract_address: str, owner: str) -> Tuple[bytes, bytes]:
        """Returns (handle, input_proof) for ``raw_value``."""
        ...

    def allow(self, handle: bytes, contract_address: str, account: str) -> None:
        ...

    def discard(self, handle: bytes) -> None:
        """Forgets a handle that never made it onto the ledger."""
        ...

    async def reveal(self, handle: bytes, contract_address: str, caller: str) -> Union[str, int]:
        """Returns the protected value if ``caller`` may see it."""
        ...


class LedgerStore(Protocol):
    def add_record(
        self,
        owner: str,
        file_name: str,
        encrypted_cid_payload: bytes,
        handle: bytes,
        input_proof: bytes,
    ) -> int:
        ...

    def get_record(self, owner: str, index: int) -> FileRecord:
        ...

    def get_record_count(self, owner: str) -> int:
        ...
