"""
Reversible scramble for sequential ids crossing a public boundary.

A token is the decimal key followed by the decimal value of ``id XOR key``.
The key is always 8 digits wide, so the split point is fixed. This hides
ordering and volume from casual inspection; it is not encryption.
"""
import re
import secrets

from jobboard.errors import JobBoardError

KEY_MIN = 10_000_000
KEY_MAX = 99_999_999  # exclusive
KEY_WIDTH = 8
# Ids are signed 64-bit integers; XOR with an 8-digit key stays below 2**63,
# so the cipher half never needs more than 19 digits
MAX_ID = 2**63 - 1
MAX_CIPHER_WIDTH = len(str(MAX_ID))

_DIGITS = re.compile(r"[0-9]+")


class InvalidToken(JobBoardError):
    """Raised when a public token can't be decoded"""
    pass


def obfuscate_with_key(value: int, key: int) -> str:
    if not 0 <= value <= MAX_ID:
        raise ValueError(f"Cannot obfuscate id {value} outside [0, {MAX_ID}]")
    if not KEY_MIN <= key < KEY_MAX:
        raise ValueError(f"Key {key} is outside [{KEY_MIN}, {KEY_MAX})")
    return f"{key}{value ^ key}"


def obfuscate(value: int) -> str:
    """Encode an internal id with a fresh random key."""
    key = secrets.randbelow(KEY_MAX - KEY_MIN) + KEY_MIN
    return obfuscate_with_key(value, key)


def reveal(token: str) -> int:
    """
    Decode a token produced by obfuscate().
    
    Raises:
        InvalidToken: If the token is too short or too long, either half isn't
            a plain decimal integer, or the id is outside the 64-bit range
    """
    if token is None or len(token) <= KEY_WIDTH:
        raise InvalidToken(f"Token {token!r} is too short")
    if len(token) > KEY_WIDTH + MAX_CIPHER_WIDTH:
        raise InvalidToken(f"Token {token[:32]!r}... is too long")
    
    key_part, cipher_part = token[:KEY_WIDTH], token[KEY_WIDTH:]
    if not _DIGITS.fullmatch(key_part) or not _DIGITS.fullmatch(cipher_part):
        raise InvalidToken(f"Token {token!r} is not numeric")
    
    value = int(cipher_part) ^ int(key_part)
    if value > MAX_ID:
        raise InvalidToken(f"Token {token!r} is out of range")
    return value
