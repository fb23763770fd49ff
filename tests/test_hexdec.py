import pytest

from icsmotion.hexdec import (
    dec_to_uint16,
    hex_to_uint16,
    uint16_to_dec,
    uint16_to_hex,
)


def test_dec_to_uint16_parses_digits():
    assert dec_to_uint16("1234", 4) == 1234


def test_dec_to_uint16_uses_only_requested_digits():
    assert dec_to_uint16("0042xyz", 4) == 42


def test_dec_to_uint16_wraps_to_16_bits():
    assert dec_to_uint16("65536", 5) == 0


@pytest.mark.parametrize("text", ["12a4", " 123", "-123"])
def test_dec_to_uint16_rejects_bad_digit(text):
    with pytest.raises(ValueError):
        dec_to_uint16(text, 4)


def test_dec_to_uint16_rejects_short_text():
    with pytest.raises(ValueError):
        dec_to_uint16("12", 4)


def test_uint16_to_dec_pads_with_zeros():
    assert uint16_to_dec(42, 5) == "00042"


def test_uint16_to_dec_keeps_lowest_digits():
    assert uint16_to_dec(12345, 3) == "345"


@pytest.mark.parametrize("value", [0, 1, 999, 7500, 65535])
def test_decimal_round_trip(value):
    assert dec_to_uint16(uint16_to_dec(value, 5), 5) == value


def test_hex_to_uint16_upper_and_lower_case_agree():
    assert hex_to_uint16("abCD", 4) == 0xABCD
    assert hex_to_uint16("ABCD", 4) == hex_to_uint16("abcd", 4)


def test_hex_to_uint16_ignores_trailing_text():
    assert hex_to_uint16("00FF$", 4) == 0xFF


@pytest.mark.parametrize("text", ["12G4", "00x1", "ＡＢ12"])
def test_hex_to_uint16_rejects_bad_digit(text):
    with pytest.raises(ValueError):
        hex_to_uint16(text, 4)


def test_hex_to_uint16_rejects_short_text():
    with pytest.raises(ValueError):
        hex_to_uint16("F", 2)


def test_uint16_to_hex_formats_upper_case():
    assert uint16_to_hex(0xABCD, 4) == "ABCD"


def test_uint16_to_hex_masks_to_16_bits():
    assert uint16_to_hex(-1, 4) == "FFFF"


@pytest.mark.parametrize("value", [0, 0x0A, 0x7FFF, 0x7001, 0xFFFF])
def test_hex_round_trip(value):
    assert hex_to_uint16(uint16_to_hex(value, 4), 4) == value


def test_zero_digits_gives_empty_and_zero():
    assert uint16_to_hex(0x1234, 0) == ""
    assert hex_to_uint16("", 0) == 0