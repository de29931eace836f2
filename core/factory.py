# --- File: core/factory.py ---
import logging
from typing import Optional

import config
from core.ledger import SQLiteLedgerStore
from security.blackbox_client import BlackBoxClient
from security.key_manager import LocalKeyProtector

logger = logging.getLogger(__name__)


def build_local_client(contract_address: Optional[str] = None) -> BlackBoxClient:
    """Wires the SQLite ledger and local key protector named in config into a client."""
    contract_address = contract_address or config.CONTRACT_ADDRESS
    key_protector = LocalKeyProtector(key_file_path=config.KEY_STORE_FILE)
    ledger = SQLiteLedgerStore(
        db_path=config.LEDGER_DB_PATH,
        contract_address=contract_address,
        proof_verifier=key_protector.verify_input_proof
    )
    logger.info(f"Local BlackBoxClient ready (contract={contract_address}, ledger={config.LEDGER_DB_PATH}).")
    return BlackBoxClient(
        ledger=ledger,
        key_protector=key_protector,
        contract_address=contract_address,
        reveal_timeout=config.REVEAL_TIMEOUT_SECONDS
    )
