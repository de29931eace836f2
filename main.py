# --- File: main.py ---
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from api import endpoints
from api.models import StoreFileResponse, FileCountResponse, RevealedFileResponse
from cid_crypto.errors import (
    BlackBoxError, LedgerError, InvalidIndex, RevealError, NotAuthorized
)
from contextlib import asynccontextmanager
from typing import List
import uvicorn
import logging
import config # Your config file


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    logging.info("Application startup sequence initiated...")
    if endpoints._blackbox_client_instance is None:
        logging.info("Lifespan: Initializing ledger store, key protector and BlackBoxClient...")
        endpoints._blackbox_client_instance = endpoints.build_blackbox_client()
        logging.info(f"Lifespan: BlackBoxClient ready for contract {config.CONTRACT_ADDRESS}.")

    yield

    # --- Shutdown ---
    logging.info("Application shutdown sequence initiated...")
    endpoints.close_resources()
    logging.info("Application shutdown complete.")

app = FastAPI(
    title="BlackBox Storage API",
    description="Stores IPFS CIDs on a public ledger, encrypted under a throwaway key-carrier that only authorized callers can reveal.",
    version="0.1.0",
    lifespan=lifespan
)

logging.info(f"CORS allowed origins: {config.CORS_ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def status_code_for(exc: BlackBoxError) -> int:
    if isinstance(exc, InvalidIndex):
        return 404
    if isinstance(exc, NotAuthorized):
        return 403
    if isinstance(exc, RevealError):
        return 502
    if isinstance(exc, LedgerError):
        return 400
    # Payload, version, authentication, encoding and address format errors
    return 422

@app.exception_handler(BlackBoxError)
async def blackbox_exception_handler(request: Request, exc: BlackBoxError):
    status_code = status_code_for(exc)
    logging.error(f"{type(exc).__name__} at Path {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "message": str(exc)},
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    logging.error(f"HTTP Exception: Status Code={exc.status_code}, Detail={exc.detail}, Path: {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": f"An error occurred: {exc.detail}"},
    )

app.post(
    "/files", response_model=StoreFileResponse, summary="Encrypt a CID and store the file record",
    tags=["Files"], status_code=201
)(endpoints.store_file)

app.get(
    "/files/{owner}/count", response_model=FileCountResponse, summary="Number of records stored by an owner",
    tags=["Files"]
)(endpoints.get_file_count)

app.get(
    "/files/{owner}", response_model=List[RevealedFileResponse], summary="Reveal every record of an owner",
    tags=["Files"]
)(endpoints.list_files)

app.get(
    "/files/{owner}/{index}", response_model=RevealedFileResponse, summary="Reveal the CID of one record",
    tags=["Files"]
)(endpoints.get_file)

@app.get("/health", tags=["General"])
async def health_check():
    return {"status": "ok"}

if __name__ == "__main__":
    logging.info("Starting BlackBox Storage API server using Uvicorn...")
    logging.info(f"Server starting on {config.HOST}:{config.PORT}")
    uvicorn.run(
        "main:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL_FROM_ENV.lower()
    )
