"""Canonical form of tag and category names."""

from bjjlib.exceptions import ValidationError


def normalize_tag_name(name: str) -> str:
    """
    Canonicalize user-supplied tag text.

    Tags are unique case- and whitespace-insensitively, so "Side Control"
    and "side control " both become "side control".

    Args:
        name: Raw tag text

    Returns:
        Lowercased, trimmed name

    Raises:
        ValidationError: If nothing is left after trimming
    """
    normalized = (name or "").strip().lower()
    if not normalized:
        raise ValidationError("Tag name cannot be empty")
    return normalized


def normalize_tag_names(names: list[str]) -> list[str]:
    """
    Normalize a list of tag names, dropping duplicates but keeping order.

    Raises:
        ValidationError: If any entry is blank
    """
    seen: list[str] = []
    for name in names:
        normalized = normalize_tag_name(name)
        if normalized not in seen:
            seen.append(normalized)
    return seen


def normalize_category_name(name: str) -> str:
    """Trim a category name; categories keep their display casing."""
    normalized = (name or "").strip()
    if not normalized:
        raise ValidationError("Category name cannot be empty")
    return normalized
