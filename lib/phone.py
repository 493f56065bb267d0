import re
from typing import Optional

# North American numbers with optional leading 1, separators and extension
PHONE_PATTERN = re.compile(r"1?\W*([2-9][0-8][0-9])\W*([2-9][0-9]{2})\W*([0-9]{4})(\se?x?t?(\d*))?")


def is_phone_number(text: str) -> bool:
    return PHONE_PATTERN.search(text or '') is not None


def normalize_phone(text: str) -> Optional[str]:
    """Return the 10-digit number found in `text`, without country code or extension"""
    match = PHONE_PATTERN.search(text or '')
    if not match:
        return None
    return ''.join(match.group(i) for i in (1, 2, 3))
