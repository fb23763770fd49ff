"""Fixed-width decimal and hexadecimal conversion of 16-bit unsigned values."""

_UINT16_MASK = 0xFFFF
_HEX_DIGITS = "0123456789ABCDEF"


def _take(text: str, digits: int) -> str:
    if digits < 0:
        raise ValueError(f"digit count must not be negative: {digits}")
    if len(text) < digits:
        raise ValueError(f"expected at least {digits} characters, got {len(text)}")
    return text[:digits]


def dec_to_uint16(text: str, digits: int) -> int:
    """Parse the first ``digits`` characters of ``text`` as a decimal number.

    The result wraps to 16 bits. Raises ValueError on a non-decimal character.
    """
    value = 0
    for char in _take(text, digits):
        if not ("0" <= char <= "9"):
            raise ValueError(f"invalid decimal digit {char!r} in {text!r}")
        value = (value * 10 + (ord(char) - ord("0"))) & _UINT16_MASK
    return value


def uint16_to_dec(value: int, digits: int) -> str:
    """Format the lowest ``digits`` decimal digits of a 16-bit value, zero padded."""
    value &= _UINT16_MASK
    out = []
    for _ in range(digits):
        value, digit = divmod(value, 10)
        out.append(str(digit))
    return "".join(reversed(out))


def hex_to_uint16(text: str, digits: int) -> int:
    """Parse the first ``digits`` characters of ``text`` as a hexadecimal number.

    Upper and lower case are accepted; the result wraps to 16 bits.
    Raises ValueError on a non-hexadecimal character.
    """
    value = 0
    for char in _take(text, digits):
        digit = _HEX_DIGITS.find(char.upper()) if char.isascii() else -1
        if digit < 0:
            raise ValueError(f"invalid hexadecimal digit {char!r} in {text!r}")
        value = ((value << 4) + digit) & _UINT16_MASK
    return value


def uint16_to_hex(value: int, digits: int) -> str:
    """Format the lowest ``digits`` hexadecimal digits of a 16-bit value in upper case."""
    value &= _UINT16_MASK
    out = []
    for _ in range(digits):
        out.append(_HEX_DIGITS[value & 0xF])
        value >>= 4
    return "".join(reversed(out))