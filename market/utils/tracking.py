# market/utils/tracking.py
import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_uppercase


def generate_tracking_number(prefix: str = "GM") -> str:
    """
    Prefix + last 6 digits of the millisecond clock + 6 random base-36 chars,
    e.g. GM482913K7Q2ZD. Not guaranteed unique, the orders table enforces it.
    """
    millis = str(int(time.time() * 1000))[-6:]
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(6))
    return f"{prefix}{millis}{suffix}"
