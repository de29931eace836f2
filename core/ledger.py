# --- File: core/ledger.py ---
import sqlite3
import threading
import time
import logging # Use logging
from typing import Callable, Optional

import config
from cid_crypto.encoding import bytes_to_hex
from cid_crypto.errors import (
    EmptyEncryptedIpfsHash,
    EmptyFileName,
    InvalidIndex,
    InvalidInputProof,
    LedgerError,
)
from security.file_record import FileRecord

# --- Ledger Module ---

HANDLE_SIZE = 32

# (handle, input_proof, contract_address, owner) -> bool
ProofVerifier = Callable[[bytes, bytes, str, str], bool]


class SQLiteLedgerStore:
    """
    Local ledger backend with the storage contract's bookkeeping rules.
    Records are append-only and indexed per owner from zero; owners are
    compared case-insensitively.
    """
    def __init__(
        self,
        db_path: str = config.LEDGER_DB_PATH,
        contract_address: str = config.CONTRACT_ADDRESS,
        proof_verifier: Optional[ProofVerifier] = None
    ):
        self.db_path = db_path
        self.contract_address = contract_address
        self.proof_verifier = proof_verifier
        self._lock = threading.Lock()
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self._initialize_schema()
        logging.info(f"Ledger store initialized at {db_path} for contract {contract_address}")

    def _initialize_schema(self):
        with self.conn:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS files (
                    owner TEXT NOT NULL, -- lower-cased address
                    idx INTEGER NOT NULL,
                    file_name TEXT NOT NULL,
                    encrypted_ipfs_hash BLOB NOT NULL,
                    encrypted_address_a BLOB NOT NULL,
                    created_at INTEGER NOT NULL, -- UNIX seconds
                    PRIMARY KEY (owner, idx)
                )
            """)

    def add_record(
        self,
        owner: str,
        file_name: str,
        encrypted_cid_payload: bytes,
        handle: bytes,
        input_proof: bytes
    ) -> int:
        """Appends a record for ``owner`` and returns its index."""
        if not file_name:
            raise EmptyFileName("File name must not be empty")
        if not encrypted_cid_payload:
            raise EmptyEncryptedIpfsHash("Encrypted IPFS hash must not be empty")
        if len(handle) != HANDLE_SIZE:
            raise LedgerError(f"Handle must be {HANDLE_SIZE} bytes, got {len(handle)}")
        if self.proof_verifier and not self.proof_verifier(handle, input_proof, self.contract_address, owner):
            logging.warning(f"Rejected record from {owner}: input proof does not verify.")
            raise InvalidInputProof("Input proof does not match handle and owner")

        owner_key = owner.lower()
        with self._lock, self.conn:
            index = self._count(owner_key)
            self.conn.execute(
                """
                INSERT INTO files
                (owner, idx, file_name, encrypted_ipfs_hash, encrypted_address_a, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (owner_key, index, file_name, bytes(encrypted_cid_payload), bytes(handle), int(time.time()))
            )
        logging.info(f"FileAdded owner={owner} index={index} fileName={file_name}")
        return index

    def _count(self, owner_key: str) -> int:
        row = self.conn.execute("SELECT COUNT(*) FROM files WHERE owner = ?", (owner_key,)).fetchone()
        return int(row[0])

    def get_record_count(self, owner: str) -> int:
        return self._count(owner.lower())

    def get_record(self, owner: str, index: int) -> FileRecord:
        if index < 0 or index >= self.get_record_count(owner):
            raise InvalidIndex(f"No record {index} for owner {owner}")
        row = self.conn.execute(
            """
            SELECT file_name, encrypted_ipfs_hash, encrypted_address_a, created_at
            FROM files WHERE owner = ? AND idx = ?
            """,
            (owner.lower(), index)
        ).fetchone()

        file_name, encrypted_ipfs_hash, encrypted_address_a, created_at = row
        return FileRecord(
            owner=owner,
            index=index,
            file_name=file_name,
            encrypted_ipfs_hash=bytes_to_hex(encrypted_ipfs_hash),
            encrypted_address_a=bytes_to_hex(encrypted_address_a),
            created_at=created_at,
        )

    def close(self):
        """Closes the database connection."""
        if self.conn:
            try:
                self.conn.close()
                logging.info("Ledger database connection closed.")
                self.conn = None
            except sqlite3.Error as e:
                logging.error(f"Error closing ledger connection: {e}")
