import re
from typing import Dict, List, Sequence

from importer.exceptions import DuplicateColumnError

_INVALID_CHARS = re.compile(r"[^a-z0-9_]")
_UNDERSCORE_RUNS = re.compile(r"_+")
_LEADING_DIGIT = re.compile(r"^[0-9]")

# PostgreSQL truncates longer identifiers (NAMEDATALEN - 1)
MAX_IDENTIFIER_LENGTH = 63


def sanitize_column_name(header: str) -> str:
    """
    Map an arbitrary CSV header to a lowercase PostgreSQL-safe identifier.

    "Full Name" -> "full_name", "3rd Col" -> "col_3rd_col". May return "".
    The result is ASCII and at most MAX_IDENTIFIER_LENGTH characters, so it
    is the exact name PostgreSQL stores.
    """
    name = _INVALID_CHARS.sub("_", header.lower())
    name = _UNDERSCORE_RUNS.sub("_", name.strip("_"))
    if _LEADING_DIGIT.match(name):
        name = f"col_{name}"
    return name[:MAX_IDENTIFIER_LENGTH].rstrip("_")


def build_column_mapping(headers: Sequence[str]) -> Dict[str, str]:
    """
    Returns {original header: sanitized identifier} in header order.

    Headers that sanitize to nothing become col_<1-based position>.
    Raises DuplicateColumnError when distinct headers collide.
    """
    mapping = {}
    owners: Dict[str, List[str]] = {}
    for position, header in enumerate(headers, start=1):
        sanitized = sanitize_column_name(header) or f"col_{position}"
        mapping[header] = sanitized
        owners.setdefault(sanitized, []).append(header)

    for sanitized, originals in owners.items():
        if len(originals) > 1:
            raise DuplicateColumnError(sanitized, originals)

    return mapping
