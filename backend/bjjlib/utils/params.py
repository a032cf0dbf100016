"""Lenient parsing of query-string parameters.

Malformed values fall back to their defaults instead of failing the request.
"""

# Largest value an INTEGER primary key column holds on every backend
MAX_DB_INT = 2**31 - 1


def is_storable_id(value: int) -> bool:
    """True if some row could have this primary key."""
    return 1 <= value <= MAX_DB_INT


def parse_positive_int(value: str | None, default: int) -> int:
    """
    Parse a positive integer, returning ``default`` when absent or malformed.

    Values above MAX_DB_INT are capped to it, so a huge page number still
    means "past the last page".

    Args:
        value: Raw query-string value
        default: Value used when ``value`` is missing, not an integer, or < 1

    Returns:
        Parsed integer or the default
    """
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    if parsed < 1:
        return default
    return min(parsed, MAX_DB_INT)


def parse_id_list(value: str | None) -> list[int]:
    """
    Parse a comma-separated list of integer IDs.

    Entries that are not integers are dropped; duplicates keep their first
    position.

    Examples:
        >>> parse_id_list("3, 1,x,3")
        [3, 1]
    """
    if not value:
        return []

    ids: list[int] = []
    for part in value.split(","):
        try:
            parsed = int(part.strip())
        except ValueError:
            continue
        if parsed not in ids:
            ids.append(parsed)
    return ids
