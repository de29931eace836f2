# --- File: config.py ---
import os
from dotenv import load_dotenv
import logging

load_dotenv()

LOG_LEVEL_FROM_ENV = os.getenv("LOG_LEVEL", "INFO").upper()
numeric_level = getattr(logging, LOG_LEVEL_FROM_ENV, logging.INFO)

logging.basicConfig(
    level=numeric_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# --- Storage contract ---
DEFAULT_CONTRACT_ADDRESS = "0xfcC9275bD14E7e5e799986abfFd5e36f3F277396"
CONTRACT_ADDRESS = os.getenv("CONTRACT_ADDRESS", DEFAULT_CONTRACT_ADDRESS)

# --- Local ledger backend ---
LEDGER_DB_PATH = os.getenv("LEDGER_DB_PATH", "./blackbox_ledger.db")

# --- Local key protector (confidential-compute stand-in) ---
KEY_STORE_FILE = os.getenv("KEY_STORE_FILE", "blackbox_keystore.json")
REVEAL_TIMEOUT_SECONDS = float(os.getenv("REVEAL_TIMEOUT_SECONDS", "30"))

# --- Identity used by the CLI when --owner is not given ---
OWNER_ADDRESS = os.getenv("OWNER_ADDRESS")

# --- HTTP server ---
CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))


# --- Basic Validation ---
if not OWNER_ADDRESS:
    logger.warning("OWNER_ADDRESS environment variable not set. CLI commands will require --owner.")
if CONTRACT_ADDRESS == DEFAULT_CONTRACT_ADDRESS:
    logger.info(f"Using default storage contract address {CONTRACT_ADDRESS}.")
if REVEAL_TIMEOUT_SECONDS <= 0:
    logger.warning("REVEAL_TIMEOUT_SECONDS must be positive. Falling back to 30 seconds.")
    REVEAL_TIMEOUT_SECONDS = 30.0
