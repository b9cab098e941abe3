"""Access Codes — unguessable, human-typable credentials of the form OSIA-XXXX-XXXX-XXXX.

Invariants:
    - Alphabet has exactly 32 symbols and excludes I, 1, O, 0
    - Each of the three segments is 4 symbols drawn independently and uniformly
    - Generation gives no uniqueness guarantee (codes are validated together with email)

Design Decisions:
    - secrets.choice over random.choice: codes gate account creation, so they must not
      be predictable from earlier codes
    - normalize_access_code is lenient (trim + uppercase) because codes are typed by hand
"""

import re
import secrets

ACCESS_CODE_PREFIX = "OSIA"
ACCESS_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SEGMENT_LENGTH = 4
SEGMENT_COUNT = 3

ACCESS_CODE_PATTERN = re.compile(
    rf"^{ACCESS_CODE_PREFIX}"
    + rf"-[{ACCESS_CODE_ALPHABET}]{{{SEGMENT_LENGTH}}}" * SEGMENT_COUNT
    + "$"
)


def _segment() -> str:
    return "".join(
        secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(SEGMENT_LENGTH)
    )


def generate_access_code() -> str:
    """Return a fresh OSIA-XXXX-XXXX-XXXX code."""
    segments = [_segment() for _ in range(SEGMENT_COUNT)]
    return "-".join([ACCESS_CODE_PREFIX, *segments])


def normalize_access_code(raw: str) -> str:
    """Trim surrounding whitespace and uppercase a user-typed code."""
    return raw.strip().upper()


def is_well_formed(code: str) -> bool:
    return bool(ACCESS_CODE_PATTERN.match(code))
