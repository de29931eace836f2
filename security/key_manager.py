# --- File: security/key_manager.py ---
import base64
import hashlib
import hmac
import json
import logging
import os
import threading
from typing import Dict, Optional, Set, Tuple

from Crypto.Cipher import AES

from cid_crypto.address import address_to_bytes
from cid_crypto.encoding import bytes_to_hex
from cid_crypto.errors import NotAuthorized, RevealError
from cid_crypto.key_generation import RandomSource, default_random_source, random_bytes

logger = logging.getLogger(__name__)

DEFAULT_KEY_FILE = "blackbox_keystore.json"  # Overridden by config.KEY_STORE_FILE
HANDLE_SIZE = 32
_NONCE_SIZE = 12
_PROOF_CONTEXT = b"blackbox-input-proof-v1"


def _acl_entry(contract_address: str, account: str) -> str:
    return f"{contract_address.lower()}|{account.lower()}"


class LocalKeyProtector:
    """
    Local stand-in for the confidential-compute platform.

    Protected values are sealed with AES-GCM under a master key that lives in
    a JSON key store, and each handle keeps an access list of
    (contract, account) pairs allowed to reveal it. The master key is loaded
    from the key file or generated if the file doesn't exist. With
    ``key_file_path=None`` everything stays in memory.
    """
    def __init__(self, key_file_path: Optional[str] = DEFAULT_KEY_FILE, rng: RandomSource = default_random_source):
        self.key_file_path = key_file_path
        self.rng = rng
        self.master_key: bytes = b""
        self.sealed_values: Dict[str, Dict[str, str]] = {}
        self.access_lists: Dict[str, Set[str]] = {}
        self._is_dirty = False  # Set when the store changed and needs saving
        self._lock = threading.Lock()
        self._load_or_generate_keys()

    def _load_or_generate_keys(self):
        """Loads the key store from disk, generating a master key if none is present."""
        if self.key_file_path and os.path.exists(self.key_file_path):
            try:
                with open(self.key_file_path, 'r') as f:
                    stored = json.load(f)
                self.master_key = base64.b64decode(stored["master_key_b64"])
                for handle_hex, entry in stored.get("handles", {}).items():
                    self.sealed_values[handle_hex] = entry["sealed"]
                    self.access_lists[handle_hex] = set(entry.get("acl", []))
                logger.info(f"Loaded key store with {len(self.sealed_values)} handles from {self.key_file_path}")
            except (IOError, ValueError, KeyError) as e:
                logger.error(f"Error loading key store from {self.key_file_path}: {e}")
                raise

        if not self.master_key:
            logger.warning("No master key found. Generating a new one for the local key protector.")
            self.master_key = random_bytes(32, self.rng)
            self._is_dirty = True

        self._save_keys()

    def _save_keys(self):
        """Writes the key store to its JSON file when something changed."""
        if not self.key_file_path:
            self._is_dirty = False
            return
        if not self._is_dirty:
            logger.debug("No changes to key store, skipping save.")
            return

        key_dir = os.path.dirname(self.key_file_path)
        if key_dir and not os.path.exists(key_dir):
            os.makedirs(key_dir, exist_ok=True)
            logger.info(f"Created directory for key store: {key_dir}")

        stored = {
            "master_key_b64": base64.b64encode(self.master_key).decode('utf-8'),
            "handles": {
                handle_hex: {"sealed": sealed, "acl": sorted(self.access_lists.get(handle_hex, set()))}
                for handle_hex, sealed in self.sealed_values.items()
            },
        }
        with open(self.key_file_path, 'w') as f:
            json.dump(stored, f, indent=4)
        logger.debug(f"Key store saved to {self.key_file_path}")
        self._is_dirty = False

    def _input_proof(self, handle: bytes, contract_address: str, owner: str) -> bytes:
        message = _PROOF_CONTEXT + handle + _acl_entry(contract_address, owner).encode('utf-8')
        return hmac.new(self.master_key, message, hashlib.sha256).digest()

    def protect(self, raw_value: str, contract_address: str, owner: str) -> Tuple[bytes, bytes]:
        """
        Seals an address-shaped value and returns (handle, input_proof).
        The owner is allowed to reveal it from the start.
        """
        value_bytes = address_to_bytes(raw_value)
        handle = random_bytes(HANDLE_SIZE, self.rng)
        nonce = random_bytes(_NONCE_SIZE, self.rng)

        cipher = AES.new(self.master_key, AES.MODE_GCM, nonce=nonce)
        cipher.update(handle)
        ciphertext, tag = cipher.encrypt_and_digest(value_bytes)

        handle_hex = bytes_to_hex(handle)
        with self._lock:
            self.sealed_values[handle_hex] = {
                "nonce_b64": base64.b64encode(nonce).decode('utf-8'),
                "ciphertext_b64": base64.b64encode(ciphertext).decode('utf-8'),
                "tag_b64": base64.b64encode(tag).decode('utf-8'),
            }
            self.access_lists[handle_hex] = {_acl_entry(contract_address, owner)}
            self._is_dirty = True
            self._save_keys()

        logger.info(f"Protected key-carrier under handle {handle_hex[:10]}... for owner {owner}")
        return handle, self._input_proof(handle, contract_address, owner)

    def verify_input_proof(self, handle: bytes, input_proof: bytes, contract_address: str, owner: str) -> bool:
        expected = self._input_proof(bytes(handle), contract_address, owner)
        return hmac.compare_digest(expected, bytes(input_proof))

    def allow(self, handle: bytes, contract_address: str, account: str):
        """Grants ``account`` the right to reveal ``handle`` through ``contract_address``."""
        handle_hex = bytes_to_hex(handle)
        with self._lock:
            if handle_hex not in self.access_lists:
                raise RevealError(f"Unknown handle {handle_hex}")
            self.access_lists[handle_hex].add(_acl_entry(contract_address, account))
            self._is_dirty = True
            self._save_keys()
        logger.info(f"Granted reveal access on handle {handle_hex[:10]}... to {account}")

    def discard(self, handle: bytes):
        handle_hex = bytes_to_hex(handle)
        with self._lock:
            if self.sealed_values.pop(handle_hex, None) is None:
                return
            self.access_lists.pop(handle_hex, None)
            self._is_dirty = True
            self._save_keys()
        logger.info(f"Discarded handle {handle_hex[:10]}...")

    def is_allowed(self, handle: bytes, contract_address: str, account: str) -> bool:
        return _acl_entry(contract_address, account) in self.access_lists.get(bytes_to_hex(handle), set())

    async def reveal(self, handle: bytes, contract_address: str, caller: str) -> str:
        """Unseals the value behind ``handle`` for an authorized caller."""
        handle_hex = bytes_to_hex(handle)
        sealed = self.sealed_values.get(handle_hex)
        if sealed is None:
            logger.error(f"Reveal requested for unknown handle {handle_hex}")
            raise RevealError(f"Unknown handle {handle_hex}")
        if not self.is_allowed(handle, contract_address, caller):
            logger.warning(f"Caller {caller} is not allowed to reveal handle {handle_hex[:10]}...")
            raise NotAuthorized(f"{caller} is not authorized to reveal this handle")

        cipher = AES.new(self.master_key, AES.MODE_GCM, nonce=base64.b64decode(sealed["nonce_b64"]))
        cipher.update(bytes(handle))
        try:
            value_bytes = cipher.decrypt_and_verify(
                base64.b64decode(sealed["ciphertext_b64"]),
                base64.b64decode(sealed["tag_b64"]),
            )
        except ValueError as e:
            logger.error(f"Sealed value for handle {handle_hex} failed authentication.")
            raise RevealError("Sealed key-carrier is corrupted") from e
        return bytes_to_hex(value_bytes)
