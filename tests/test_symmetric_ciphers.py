import pytest

from cid_crypto.encoding import bytes_to_hex, hex_to_bytes
from cid_crypto.errors import (
    AuthenticationFailure,
    EncodingError,
    InvalidAddressLength,
    MalformedPayload,
    UnsupportedVersion,
)
from cid_crypto.symmetric_ciphers import (
    MIN_PAYLOAD_SIZE,
    aes_gcm_encrypt,
    decrypt_utf8_with_address,
    derive_key_from_address,
    encode_payload,
    encrypt_utf8_with_address,
)

KEY_CARRIER = "0x8ba1f109551bD432803012645Ac136ddd64DBA72"
HELLO_CID = "QmRN6wdp1S2A5EtjW9A3M1vKSBuQQGcgvuhoMUoEz4iiT5"
GOLDEN_PAYLOAD = (
    "0x01000102030405060708090a0b6920f42648ff61fa4dfcc1a2b6fa3469c59c98"
    "6269c8e42f98d28f44f97f15a312756ee0ff68df2ac25376cc7fb23a81398851df"
    "7d96f5ec7b927caa5b50"
)


def fixed_nonce(n):
    return bytes(range(n))


def test_golden_vector():
    assert encrypt_utf8_with_address(KEY_CARRIER, HELLO_CID, fixed_nonce) == GOLDEN_PAYLOAD
    assert decrypt_utf8_with_address(KEY_CARRIER, GOLDEN_PAYLOAD) == HELLO_CID


def test_key_derivation_ignores_case_and_prefix():
    expected = "805bedf184431f2249a219d0e3dc4156f8a5ddc8a0a6d2a6249092454d4ef0da"
    assert derive_key_from_address(KEY_CARRIER).hex() == expected
    assert derive_key_from_address(KEY_CARRIER.lower()).hex() == expected
    assert derive_key_from_address(KEY_CARRIER[2:].upper()).hex() == expected
    assert derive_key_from_address(hex_to_bytes(KEY_CARRIER)).hex() == expected


@pytest.mark.parametrize("plaintext", ["", "a", HELLO_CID, "ünïcødé ✓", "x" * 1000])
def test_round_trip(plaintext, rng):
    payload = encrypt_utf8_with_address(KEY_CARRIER, plaintext, rng)
    assert payload.startswith("0x01")
    raw = hex_to_bytes(payload)
    assert len(raw) == MIN_PAYLOAD_SIZE + len(plaintext.encode("utf-8"))
    assert decrypt_utf8_with_address(KEY_CARRIER.upper().replace("0X", "0x"), payload) == plaintext


def test_each_encryption_uses_a_fresh_nonce(rng):
    first = encrypt_utf8_with_address(KEY_CARRIER, HELLO_CID, rng)
    second = encrypt_utf8_with_address(KEY_CARRIER, HELLO_CID, rng)
    assert first != second
    assert hex_to_bytes(first)[1:13] != hex_to_bytes(second)[1:13]


def test_flipping_any_nonce_ciphertext_or_tag_byte_fails_authentication():
    raw = hex_to_bytes(GOLDEN_PAYLOAD)
    for position in range(1, len(raw)):
        tampered = bytearray(raw)
        tampered[position] ^= 0x01
        with pytest.raises(AuthenticationFailure):
            decrypt_utf8_with_address(KEY_CARRIER, bytes_to_hex(bytes(tampered)))


def test_wrong_key_carrier_fails_authentication():
    with pytest.raises(AuthenticationFailure):
        decrypt_utf8_with_address("0x" + "11" * 20, GOLDEN_PAYLOAD)


def test_too_short_payload_is_malformed():
    with pytest.raises(MalformedPayload):
        decrypt_utf8_with_address(KEY_CARRIER, "0x01" + "0" * 24)
    with pytest.raises(MalformedPayload):
        decrypt_utf8_with_address(KEY_CARRIER, "0x")


def test_minimum_length_payload_with_bad_tag_fails_authentication():
    with pytest.raises(AuthenticationFailure):
        decrypt_utf8_with_address(KEY_CARRIER, "0x01" + "00" * (MIN_PAYLOAD_SIZE - 1))


def test_non_hex_payload_is_malformed():
    with pytest.raises(MalformedPayload):
        decrypt_utf8_with_address(KEY_CARRIER, "0xnot-hex")


def test_unknown_version_is_rejected():
    tampered = "0x02" + GOLDEN_PAYLOAD[4:]
    with pytest.raises(UnsupportedVersion):
        decrypt_utf8_with_address(KEY_CARRIER, tampered)


def test_invalid_utf8_plaintext_raises_encoding_error():
    key = derive_key_from_address(KEY_CARRIER)
    nonce = fixed_nonce(12)
    ciphertext, tag = aes_gcm_encrypt(b"\xff\xfe\xfd", key, nonce)
    payload = encode_payload(nonce, ciphertext, tag)
    with pytest.raises(EncodingError):
        decrypt_utf8_with_address(KEY_CARRIER, payload)


@pytest.mark.parametrize("bad_address", ["0x1234", "0x" + "ab" * 21, b"\x00" * 19])
def test_key_carrier_must_be_twenty_bytes(bad_address):
    with pytest.raises(InvalidAddressLength):
        encrypt_utf8_with_address(bad_address, HELLO_CID)
