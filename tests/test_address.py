import pytest

from cid_crypto.address import AddressForm, address_to_bytes, classify_address, normalize_address
from cid_crypto.errors import InvalidAddressLength, UnrecognizedFormat
from cid_crypto.key_generation import generate_key_carrier, random_bytes


def test_prefixed_hex_is_returned_unchanged():
    value = "0x" + "0" * 38 + "AB"
    assert len(value) == 42
    assert normalize_address(value) == value


def test_decimal_is_rendered_as_padded_hex():
    assert normalize_address("171") == "0x" + "0" * 38 + "ab"
    assert normalize_address("0") == "0x" + "0" * 40
    assert normalize_address(str(2 ** 160 - 1)) == "0x" + "f" * 40


def test_integer_values_are_treated_as_decimal():
    assert normalize_address(171) == "0x" + "0" * 38 + "ab"


def test_bare_hex_gets_prefix():
    bare = "8ba1f109551bD432803012645Ac136ddd64DBA72"
    assert normalize_address(bare) == "0x" + bare


def test_surrounding_whitespace_is_ignored():
    assert normalize_address("  171\n") == "0x" + "0" * 38 + "ab"


def test_forty_digit_decimal_is_read_as_decimal():
    value = "1" * 40
    form, _ = classify_address(value)
    assert form is AddressForm.DECIMAL
    assert normalize_address(value) == "0x" + format(int(value), "040x")


@pytest.mark.parametrize(
    "raw",
    [
        "not-a-number-or-hex",
        "",
        "0x1234",
        "0x" + "g" * 40,
        "ab" * 19,
        str(2 ** 160),
        -1,
        None,
        True,
    ],
)
def test_unrecognized_values_raise(raw):
    with pytest.raises(UnrecognizedFormat):
        normalize_address(raw)


def test_classify_tags_each_shape():
    assert classify_address("0x" + "a" * 40)[0] is AddressForm.HEX
    assert classify_address("42")[0] is AddressForm.DECIMAL
    assert classify_address("a" * 40)[0] is AddressForm.BARE_HEX
    assert classify_address("0xzz")[0] is AddressForm.INVALID


def test_address_to_bytes():
    assert address_to_bytes("0x" + "AB" * 20) == b"\xab" * 20
    with pytest.raises(InvalidAddressLength):
        address_to_bytes("0xabcd")
    with pytest.raises(UnrecognizedFormat):
        address_to_bytes("0x" + "zz" * 20)


def test_generate_key_carrier_uses_injected_source():
    carrier = generate_key_carrier(lambda n: b"\xab" * n)
    assert carrier == "0x" + "ab" * 20


def test_generated_key_carriers_are_fresh(rng):
    carriers = {generate_key_carrier(rng) for _ in range(5)}
    assert len(carriers) == 5
    for carrier in carriers:
        assert normalize_address(carrier) == carrier


def test_short_random_source_is_rejected():
    with pytest.raises(ValueError):
        random_bytes(12, lambda n: b"\x00" * (n - 1))
