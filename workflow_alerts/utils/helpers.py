"""Utility helper functions"""

import random
import string
import time

_ID_ALPHABET = string.digits + string.ascii_lowercase


def format_megabytes(bytes_value):
    """Format a byte count as megabytes with two decimals"""
    return f"{bytes_value / 1024 / 1024:.2f}MB"


def safe_divide(a, b, default=0.0):
    """Safely divide two numbers, returning default if division by zero"""
    try:
        if b == 0:
            return default
        return a / b
    except (TypeError, ZeroDivisionError):
        return default


def generate_alert_id(now=None):
    """Build an opaque alert id from the epoch milliseconds and 9 random base36 chars"""
    millis = int((now if now is not None else time.time()) * 1000)
    suffix = ''.join(random.choices(_ID_ALPHABET, k=9))
    return f"alert_{millis}_{suffix}"
