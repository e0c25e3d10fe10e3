"""Short code encoding utility

This module provides a bijective base62 encoding between link ids (non-negative
integers issued by the global counter) and short codes.

Functions:
    encode(n) -> str:
        Encode a link id into its short code.
    decode(code) -> tuple[int, bool]:
        Decode a short code back into its link id.
    is_valid_code(code) -> bool:
        Check whether a string is a canonical short code.

Example:
    >>> from kvshortener.utils import encode, decode
    >>> encode(125)
    '21'
    >>> decode('21')
    (125, True)
    >>> decode('not-a-code')
    (0, False)
"""

import string


ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase
BASE = len(ALPHABET)  # 10 digits + 26 lowercase + 26 uppercase
INDEX = {char: value for value, char in enumerate(ALPHABET)}

# Redis integers (and therefore counter values) are signed 64-bit
MAX_ID = 2**63 - 1
MAX_CODE_LENGTH = 11  # len(encode(MAX_ID))


def encode(n: int) -> str:
    """Encode a link id into a base62 short code.

    Digits are written most significant first, without padding, so the
    mapping is a plain positional numeral system over ALPHABET.

    Args:
        n (int):
            Non-negative link id, at most MAX_ID.

    Returns:
        str: The short code.

    Raises:
        TypeError: If n is not an integer.
        ValueError: If n is negative or above MAX_ID.

    Example:
        >>> encode(0)
        '0'
        >>> encode(61)
        'Z'
        >>> encode(62)
        '10'
    """
    if not isinstance(n, int) or isinstance(n, bool):
        raise TypeError(f'Link id must be of type integer (given type: {type(n)}).')
    if n < 0 or n > MAX_ID:
        raise ValueError(f'Link id must be in range [0, {MAX_ID}] (given value: {n}).')

    if n == 0:
        return ALPHABET[0]

    digits = []
    while n:
        n, remainder = divmod(n, BASE)
        digits.append(ALPHABET[remainder])
    return ''.join(reversed(digits))


def decode(code: str) -> tuple[int, bool]:
    """Decode a short code back into its link id.

    Only canonical codes (the exact output of encode()) are accepted. Codes
    with characters outside ALPHABET, leading zeros, or values above MAX_ID
    are rejected as a whole.

    Args:
        code (str): The short code.

    Returns:
        tuple[int, bool]:
            (link id, True) on success, (0, False) otherwise.

    Example:
        >>> decode('Z')
        (61, True)
        >>> decode('01')
        (0, False)
    """
    if not isinstance(code, str) or not code or len(code) > MAX_CODE_LENGTH:
        return 0, False
    if len(code) > 1 and code[0] == ALPHABET[0]:
        return 0, False

    n = 0
    for char in code:
        value = INDEX.get(char)
        if value is None:
            return 0, False
        n = n * BASE + value

    if n > MAX_ID:
        return 0, False
    return n, True


def is_valid_code(code: str) -> bool:
    """Return True if code is a canonical short code."""
    return decode(code)[1]
