"""
Short Code Generation

Generated short codes are fixed-length strings over the base62 alphabet
[0-9A-Za-z]. Each character is drawn with secrets.choice, which samples
the OS CSPRNG with rejection sampling, so every symbol is equally likely
(no modulo bias).

Uniqueness is not checked here: the caller inserts the code and lets the
database's unique constraint reject collisions, then asks for another one.
"""

import secrets
import string

BASE62_CHARS = string.digits + string.ascii_uppercase + string.ascii_lowercase
DEFAULT_CODE_LENGTH = 7


def generate_short_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    Generate a random base62 short code.

    Args:
        length: Number of characters (default: 7, about 3.5e12 codes)

    Returns:
        A random code such as "aZ09xQe"
    """
    if length <= 0:
        raise ValueError(f"length must be positive, got {length}")
    return "".join(secrets.choice(BASE62_CHARS) for _ in range(length))
