"""Name normalization and anchor ids.

Normalized names are lowercase, hyphen-separated and URL safe. They are
used for category/subcategory/group identifiers when the payload omits
them, and for the table-of-contents anchors of the card view.
"""

import re

MULTIPLE_HYPHENS = re.compile(r"-{2,}")


def normalize_name(text: str) -> str:
    """Normalize a display name.

    Spaces become hyphens, characters other than letters, digits, hyphens
    and plus signs become hyphens, runs of hyphens collapse and a trailing
    hyphen is dropped.

    Args:
        text: Display name.

    Returns:
        Normalized name (e.g. "App Definition" -> "app-definition").
    """
    chars = []
    for char in text.strip().replace(" ", "-"):
        if char.isalnum() or char in "-+":
            chars.append(char.lower())
        else:
            chars.append("-")
    normalized = MULTIPLE_HYPHENS.sub("-", "".join(chars))
    if normalized.endswith("-"):
        normalized = normalized[:-1]
    return normalized


def anchor_id(title: str, subtitle: str | None = None) -> str:
    """Build a grouped anchor id for a menu position.

    Args:
        title: Top-level menu key.
        subtitle: Optional second-level key.

    Returns:
        "title" or "title--subtitle", both normalized.
    """
    if subtitle is None:
        return normalize_name(title)
    return f"{normalize_name(title)}--{normalize_name(subtitle)}"
