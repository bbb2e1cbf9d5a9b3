# online_forms/utils/tracking.py
import re
import secrets
import string
import time

BASE36_ALPHABET = string.digits + string.ascii_uppercase
TRACKING_PREFIX = "TRK"
TRACKING_PATTERN = re.compile(r"^TRK-[0-9A-Z]+-[0-9A-Z]{5}$")


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("base36 encoding expects a non-negative integer")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_tracking_number(now_ms: int = None) -> str:
    """
    Human-facing submission code: TRK-<base36 epoch millis>-<5 random base36 chars>.
    The suffix comes from `secrets`, so two submissions in the same millisecond
    still collide only with probability 36**-5.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(5))
    return f"{TRACKING_PREFIX}-{to_base36(now_ms)}-{suffix}".upper()


def is_valid_tracking_number(value: str) -> bool:
    return bool(value) and bool(TRACKING_PATTERN.match(value))
