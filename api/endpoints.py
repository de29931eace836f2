# --- File: api/endpoints.py ---
from fastapi import HTTPException, Body, Depends, Query
from typing import List, Optional
from api.models import StoreFileRequest, StoreFileResponse, FileCountResponse, RevealedFileResponse
from core.factory import build_local_client
from core.ledger import SQLiteLedgerStore
from security.blackbox_client import BlackBoxClient
from security.key_manager import LocalKeyProtector
import config
import logging
import base64
import binascii

# --- Dependency Injection Setup ---
# Global instances, primarily set by lifespan in main.py
_ledger_instance: Optional[SQLiteLedgerStore] = None
_key_protector_instance: Optional[LocalKeyProtector] = None
_blackbox_client_instance: Optional[BlackBoxClient] = None


def build_blackbox_client() -> BlackBoxClient:
    global _ledger_instance, _key_protector_instance
    client = build_local_client(config.CONTRACT_ADDRESS)
    _ledger_instance = client.ledger
    _key_protector_instance = client.key_protector
    return client

def get_blackbox_client() -> BlackBoxClient:
    global _blackbox_client_instance
    if _blackbox_client_instance is None:
        logging.warning("BlackBoxClient instance was None, attempting to initialize now (should have been done by lifespan).")
        _blackbox_client_instance = build_blackbox_client()
    return _blackbox_client_instance

def close_resources():
    global _ledger_instance, _key_protector_instance, _blackbox_client_instance
    if _ledger_instance:
        _ledger_instance.close()
    _ledger_instance = None
    _key_protector_instance = None
    _blackbox_client_instance = None

# --- API Endpoints ---
# BlackBoxError subclasses propagate to the handler registered in main.py.

async def store_file(
    store_request: StoreFileRequest = Body(...),
    client: BlackBoxClient = Depends(get_blackbox_client)
):
    logging.info(f"Received store request: owner={store_request.owner}, file_name={store_request.file_name}")
    if store_request.content_b64 is not None:
        try:
            content = base64.b64decode(store_request.content_b64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise HTTPException(status_code=400, detail=f"content_b64 is not valid base64: {e}")
        stored = client.store_content(store_request.owner, store_request.file_name, content)
    else:
        stored = client.store_cid(store_request.owner, store_request.file_name, store_request.cid)

    return StoreFileResponse(**stored.model_dump())

async def get_file_count(
    owner: str,
    client: BlackBoxClient = Depends(get_blackbox_client)
):
    return FileCountResponse(owner=owner, count=client.count_files(owner))

async def list_files(
    owner: str,
    caller: Optional[str] = Query(None, description="Identity requesting the reveal (defaults to owner)"),
    client: BlackBoxClient = Depends(get_blackbox_client)
) -> List[RevealedFileResponse]:
    logging.info(f"Received list request for owner={owner} caller={caller or owner}")
    revealed = await client.list_files(owner, caller)
    return [RevealedFileResponse(**r.model_dump()) for r in revealed]

async def get_file(
    owner: str,
    index: int,
    caller: Optional[str] = Query(None, description="Identity requesting the reveal (defaults to owner)"),
    client: BlackBoxClient = Depends(get_blackbox_client)
):
    logging.info(f"Received reveal request for owner={owner} index={index} caller={caller or owner}")
    revealed = await client.reveal_file(owner, index, caller)
    return RevealedFileResponse(**revealed.model_dump())
