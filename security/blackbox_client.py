# --- File: security/blackbox_client.py ---
import asyncio
import logging
import os
from typing import List, Optional

from cid_crypto import (
    compute_cid,
    compute_cid_from_file,
    decrypt_utf8_with_address,
    encrypt_utf8_with_address,
    generate_key_carrier,
    hex_to_bytes,
    normalize_address,
    random_cid,
)
from cid_crypto.errors import EmptyFileName, LedgerError, RevealError
from cid_crypto.key_generation import RandomSource, default_random_source
from utils import normalize_bytes32_handle

from .collaborators import KeyProtector, LedgerStore
from .file_record import RevealedFile, StoredFile

logger = logging.getLogger(__name__)

DEFAULT_REVEAL_TIMEOUT_SECONDS = 30.0


class BlackBoxClient:
    """
    Stores CIDs on a public ledger so that only authorized viewers can read them.

    Write path: fresh key-carrier -> AES-GCM encrypt the CID under it ->
    protect the key-carrier with the confidential-compute layer -> submit
    (payload, handle, proof) to the ledger.

    Read path: fetch (payload, handle) -> reveal the key-carrier for the
    caller -> normalize it -> decrypt the CID. Neither the payload nor the
    handle alone is enough to recover the CID.
    """
    def __init__(self,
                 ledger: LedgerStore,
                 key_protector: KeyProtector,
                 contract_address: str,
                 rng: RandomSource = default_random_source,
                 reveal_timeout: float = DEFAULT_REVEAL_TIMEOUT_SECONDS):
        self.ledger = ledger
        self.key_protector = key_protector
        self.contract_address = contract_address
        self.rng = rng
        self.reveal_timeout = reveal_timeout

    # --- Write path ---

    def store_cid(self, owner: str, file_name: str, cid: Optional[str] = None) -> StoredFile:
        """
        Encrypts ``cid`` under a fresh key-carrier and submits the record.
        Without a CID a random one is generated, which is only useful as demo data.
        """
        if not file_name:
            raise EmptyFileName("File name must not be empty")
        if cid is None:
            cid = random_cid(self.rng)
            logger.info(f"STORE ({owner}): No CID supplied for '{file_name}', using a random demo CID.")

        key_carrier = generate_key_carrier(self.rng)
        encrypted_ipfs_hash = encrypt_utf8_with_address(key_carrier, cid, self.rng)

        logger.debug(f"STORE ({owner}): Protecting key-carrier with the confidential-compute layer.")
        handle, input_proof = self.key_protector.protect(key_carrier, self.contract_address, owner)

        try:
            index = self.ledger.add_record(
                owner,
                file_name,
                hex_to_bytes(encrypted_ipfs_hash),
                handle,
                input_proof,
            )
        except LedgerError as e:
            logger.warning(f"STORE ({owner}): Ledger rejected '{file_name}' ({type(e).__name__}), discarding handle.")
            self.key_protector.discard(handle)
            raise
        logger.info(f"STORE ({owner}): Stored '{file_name}' at index {index}.")
        return StoredFile(
            owner=owner,
            index=index,
            file_name=file_name,
            cid=cid,
            encrypted_ipfs_hash=encrypted_ipfs_hash,
            encrypted_address_a=normalize_bytes32_handle(handle),
        )

    def store_content(self, owner: str, file_name: str, content: bytes) -> StoredFile:
        return self.store_cid(owner, file_name, compute_cid(content))

    def store_file(self, owner: str, file_path: str, file_name: Optional[str] = None) -> StoredFile:
        name = file_name or os.path.basename(file_path)
        return self.store_cid(owner, name, compute_cid_from_file(file_path))

    # --- Read path ---

    async def _reveal_key_carrier(self, handle: bytes, caller: str) -> str:
        try:
            raw_value = await asyncio.wait_for(
                self.key_protector.reveal(handle, self.contract_address, caller),
                timeout=self.reveal_timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"REVEAL ({caller}): Timed out after {self.reveal_timeout}s.")
            raise RevealError(f"Key-carrier reveal timed out after {self.reveal_timeout}s") from e

        if raw_value is None or raw_value == "":
            logger.error(f"REVEAL ({caller}): Confidential-compute layer returned an empty value.")
            raise RevealError("Key-carrier reveal returned no value")
        return normalize_address(raw_value)

    async def reveal_file(self, owner: str, index: int, caller: Optional[str] = None) -> RevealedFile:
        """Recovers the CID of ``owner``'s record ``index`` on behalf of ``caller`` (the owner by default)."""
        caller = caller or owner
        record = self.ledger.get_record(owner, index)

        handle = hex_to_bytes(normalize_bytes32_handle(record.encrypted_address_a))
        key_carrier = await self._reveal_key_carrier(handle, caller)
        cid = decrypt_utf8_with_address(key_carrier, record.encrypted_ipfs_hash)

        logger.info(f"REVEAL ({caller}): Recovered CID for {owner} #{index} '{record.file_name}'.")
        return RevealedFile(
            owner=record.owner,
            index=record.index,
            file_name=record.file_name,
            cid=cid,
            created_at=record.created_at,
        )

    async def list_files(self, owner: str, caller: Optional[str] = None) -> List[RevealedFile]:
        count = self.count_files(owner)
        logger.info(f"LIST ({owner}): {count} records.")
        return [await self.reveal_file(owner, i, caller) for i in range(count)]

    def count_files(self, owner: str) -> int:
        return self.ledger.get_record_count(owner)


    def share_file(self, owner: str, index: int, viewer: str) -> None:
        """Lets ``viewer`` reveal the key-carrier of ``owner``'s record ``index``."""
        record = self.ledger.get_record(owner, index)
        handle = hex_to_bytes(normalize_bytes32_handle(record.encrypted_address_a))
        self.key_protector.allow(handle, self.contract_address, viewer)
        logger.info(f"SHARE ({owner}): Record #{index} '{record.file_name}' can now be revealed by {viewer}.")
