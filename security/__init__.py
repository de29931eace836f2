# security/__init__.py
from .blackbox_client import BlackBoxClient
from .collaborators import KeyProtector, LedgerStore
from .file_record import FileRecord, RevealedFile, StoredFile
from .key_manager import LocalKeyProtector

__all__ = [
    "BlackBoxClient",
    "KeyProtector",
    "LedgerStore",
    "FileRecord",
    "RevealedFile",
    "StoredFile",
    "LocalKeyProtector",
]
