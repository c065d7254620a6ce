"""
Slug derivation for catalog names.

Slugs are the uniqueness key of every moderated kind, so the derivation must be
deterministic: same name in, same slug out.
"""

import re

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(text: str) -> str:
    """
    Turn a display name into a URL slug.

    Lowercases, drops everything except word characters, whitespace and
    hyphens, collapses whitespace/underscore/hyphen runs into one hyphen and
    strips hyphens from both ends.

    Examples:
        >>> slugify("Good Smile Company")
        'good-smile-company'
        >>> slugify("  Nendoroid #1234 -- Miku!  ")
        'nendoroid-1234-miku'
    """
    slug = _NON_WORD.sub("", text.lower().strip())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")
