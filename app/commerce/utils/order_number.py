"""
Utility functions for generating order numbers.
"""

import secrets
import string
import time

from app.core.constants import ORDER_NUMBER_PREFIX, RANDOM_SUFFIX_LENGTH

_ALPHABET = string.ascii_uppercase + string.digits


def random_suffix(length: int = RANDOM_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def generate_order_number() -> str:
    """
    Generate a unique order number in format: LVUP-<epoch ms>-XXXXXX

    Example: LVUP-1760832000000-K3F9QZ
    """
    epoch_ms = int(time.time() * 1000)
    return f"{ORDER_NUMBER_PREFIX}-{epoch_ms}-{random_suffix()}"
