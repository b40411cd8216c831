"""
One-time code generation and comparison.
"""

import hmac
import secrets


def generate_code(length: int = 6) -> str:
    """
    Generate a cryptographically random numeric code.

    Every value in 0 .. 10**length - 1 is equally likely; leading zeros
    are kept so the result is always exactly `length` digits.
    """
    if length <= 0:
        raise ValueError("Code length must be positive")
    return str(secrets.randbelow(10**length)).zfill(length)


def codes_match(expected: str, submitted: str) -> bool:
    """
    Compare two codes in constant time.

    Codes of different lengths never match.
    """
    if expected is None or submitted is None:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), submitted.encode("utf-8"))
