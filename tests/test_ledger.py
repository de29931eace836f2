import pytest

from cid_crypto.errors import (
    EmptyEncryptedIpfsHash,
    EmptyFileName,
    InvalidIndex,
    InvalidInputProof,
    LedgerError,
)
from core.ledger import SQLiteLedgerStore
from tests.conftest import ALICE, BOB, CONTRACT

HANDLE = b"\x07" * 32
PAYLOAD = b"\x01" + b"\x00" * 40


def test_records_are_indexed_per_owner(ledger):
    assert ledger.add_record(ALICE, "a.png", PAYLOAD, HANDLE, b"p") == 0
    assert ledger.add_record(ALICE, "b.png", PAYLOAD, HANDLE, b"p") == 1
    assert ledger.add_record(BOB, "c.png", PAYLOAD, HANDLE, b"p") == 0

    assert ledger.get_record_count(ALICE) == 2
    assert ledger.get_record_count(BOB) == 1
    assert ledger.get_record_count("0x" + "cc" * 20) == 0


def test_get_record_returns_stored_fields(ledger):
    ledger.add_record(ALICE, "example.png", PAYLOAD, HANDLE, b"p")
    record = ledger.get_record(ALICE, 0)
    assert record.file_name == "example.png"
    assert record.index == 0
    assert record.encrypted_ipfs_hash == "0x" + PAYLOAD.hex()
    assert record.encrypted_address_a == "0x" + HANDLE.hex()
    assert record.created_at > 0


def test_owner_lookup_ignores_case(ledger):
    ledger.add_record(ALICE, "a.png", PAYLOAD, HANDLE, b"p")
    assert ledger.get_record_count(ALICE.upper()) == 1
    assert ledger.get_record(ALICE.upper(), 0).file_name == "a.png"


def test_invalid_index(ledger):
    ledger.add_record(ALICE, "a.png", PAYLOAD, HANDLE, b"p")
    with pytest.raises(InvalidIndex):
        ledger.get_record(ALICE, 1)
    with pytest.raises(InvalidIndex):
        ledger.get_record(BOB, 0)


@pytest.mark.parametrize("index", [-1, 2**63, 2**64])
def test_out_of_range_index_is_invalid_index(ledger, index):
    ledger.add_record(ALICE, "a.png", PAYLOAD, HANDLE, b"p")
    with pytest.raises(InvalidIndex):
        ledger.get_record(ALICE, index)


def test_validation(ledger):
    with pytest.raises(EmptyFileName):
        ledger.add_record(ALICE, "", PAYLOAD, HANDLE, b"p")
    with pytest.raises(EmptyEncryptedIpfsHash):
        ledger.add_record(ALICE, "a.png", b"", HANDLE, b"p")
    with pytest.raises(LedgerError):
        ledger.add_record(ALICE, "a.png", PAYLOAD, b"\x07" * 31, b"p")
    assert ledger.get_record_count(ALICE) == 0


def test_proof_verifier_is_enforced():
    def verifier(handle, proof, contract_address, owner):
        return proof == b"good" and contract_address == CONTRACT

    store = SQLiteLedgerStore(db_path=":memory:", contract_address=CONTRACT, proof_verifier=verifier)
    try:
        assert store.add_record(ALICE, "a.png", PAYLOAD, HANDLE, b"good") == 0
        with pytest.raises(InvalidInputProof):
            store.add_record(ALICE, "b.png", PAYLOAD, HANDLE, b"bad")
        assert store.get_record_count(ALICE) == 1
    finally:
        store.close()


def test_records_survive_reopen(tmp_path):
    db_path = str(tmp_path / "ledger.db")
    store = SQLiteLedgerStore(db_path=db_path, contract_address=CONTRACT)
    store.add_record(ALICE, "a.png", PAYLOAD, HANDLE, b"p")
    store.close()

    reopened = SQLiteLedgerStore(db_path=db_path, contract_address=CONTRACT)
    try:
        assert reopened.get_record_count(ALICE) == 1
        assert reopened.add_record(ALICE, "b.png", PAYLOAD, HANDLE, b"p") == 1
    finally:
        reopened.close()
