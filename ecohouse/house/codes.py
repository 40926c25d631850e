"""House code helpers.

A house code is the human-shareable join token for a household:
``ECO-`` + 4-digit year + ``-`` + 6 characters from ``[A-Z0-9]``,
e.g. ``ECO-2024-AB12CD``. Input is case-insensitive and canonicalized to
uppercase. These helpers never touch the database.
"""

import re
import secrets
import string
from datetime import UTC, datetime

HOUSE_CODE_PREFIX = "ECO"
HOUSE_CODE_SUFFIX_LENGTH = 6
HOUSE_CODE_ALPHABET = string.ascii_uppercase + string.digits
HOUSE_CODE_LENGTH = len(HOUSE_CODE_PREFIX) + 1 + 4 + 1 + HOUSE_CODE_SUFFIX_LENGTH

_HOUSE_CODE_RE = re.compile(r"ECO-[0-9]{4}-[A-Z0-9]{6}")


def normalize_house_code(code: str) -> str:
    """Canonical form used for storage and lookups."""
    return code.strip().upper()


def is_valid_house_code(code: str) -> bool:
    """True iff ``code``, uppercased, is exactly ``ECO-YYYY-XXXXXX``.

    Surrounding whitespace is not forgiven here; callers that accept user
    input normalize first.
    """
    if not isinstance(code, str):
        return False
    return _HOUSE_CODE_RE.fullmatch(code.upper()) is not None


def generate_house_code(now: datetime | None = None) -> str:
    """Produce a candidate code for the current calendar year.

    The random part is drawn uniformly from ``[A-Z0-9]``. Uniqueness is not
    checked here; the registry relies on the unique constraint and retries.
    """
    year = (now or datetime.now(UTC)).year
    suffix = "".join(
        secrets.choice(HOUSE_CODE_ALPHABET) for _ in range(HOUSE_CODE_SUFFIX_LENGTH)
    )
    return f"{HOUSE_CODE_PREFIX}-{year:04d}-{suffix}"
