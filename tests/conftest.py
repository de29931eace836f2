import asyncio
import hashlib

import pytest

from cid_crypto.errors import NotAuthorized, RevealError
from core.ledger import SQLiteLedgerStore
from security.blackbox_client import BlackBoxClient

CONTRACT = "0xfcC9275bD14E7e5e799986abfFd5e36f3F277396"
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20


class CountingRandom:
    """Deterministic stand-in for a secure random source: every call returns new bytes."""

    def __init__(self, seed: bytes = b"seed"):
        self.seed = seed
        self.calls = 0

    def __call__(self, n: int) -> bytes:
        out = b""
        block = 0
        while len(out) < n:
            out += hashlib.sha256(self.seed + self.calls.to_bytes(8, "big") + block.to_bytes(4, "big")).digest()
            block += 1
        self.calls += 1
        return out[:n]


class FakeKeyProtector:
    """In-memory confidential-compute fake. ``reveal_as`` picks the shape of revealed values."""

    def __init__(self, reveal_as: str = "hex"):
        self.reveal_as = reveal_as
        self.values = {}
        self.allowed = {}
        self.issued = 0

    def protect(self, raw_value, contract_address, owner):
        self.issued += 1
        handle = self.issued.to_bytes(32, "big")
        self.values[handle] = raw_value
        self.allowed[handle] = {owner.lower()}
        return handle, b"proof"

    def allow(self, handle, contract_address, account):
        handle = bytes(handle)
        if handle not in self.values:
            raise RevealError("unknown handle")
        self.allowed[handle].add(account.lower())

    def discard(self, handle):
        self.values.pop(bytes(handle), None)
        self.allowed.pop(bytes(handle), None)

    async def reveal(self, handle, contract_address, caller):
        handle = bytes(handle)
        if handle not in self.values:
            raise RevealError("unknown handle")
        if caller.lower() not in self.allowed[handle]:
            raise NotAuthorized(caller)
        value = self.values[handle]
        if self.reveal_as == "decimal":
            return str(int(value, 16))
        if self.reveal_as == "int":
            return int(value, 16)
        if self.reveal_as == "bare":
            return value[2:]
        if self.reveal_as == "upper":
            return "0x" + value[2:].upper()
        if self.reveal_as == "empty":
            return ""
        return value


class SlowKeyProtector(FakeKeyProtector):
    async def reveal(self, handle, contract_address, caller):
        await asyncio.sleep(5)
        return await super().reveal(handle, contract_address, caller)


@pytest.fixture
def rng():
    return CountingRandom()


@pytest.fixture
def ledger():
    store = SQLiteLedgerStore(db_path=":memory:", contract_address=CONTRACT)
    yield store
    store.close()


@pytest.fixture
def fake_protector():
    return FakeKeyProtector()


@pytest.fixture
def client(ledger, fake_protector, rng):
    return BlackBoxClient(ledger, fake_protector, CONTRACT, rng=rng)
