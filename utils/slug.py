"""URL slug generation for listing pages."""

import logging
import re
import unicodedata
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

# Nordic letters folded before decomposition so they map to their base letter
NORDIC_FOLDS = {
    "ä": "a",
    "ö": "o",
    "å": "a",
    "æ": "ae",
    "ø": "o",
    "ß": "ss",
}

NON_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(text: Optional[str]) -> str:
    """
    Convert text to a URL slug.

    Examples:
        "Mäntyläntie 5 B" → "mantylantie-5-b"
        "Bulevardi 1 A 12, Helsinki" → "bulevardi-1-a-12-helsinki"

    slugify(slugify(x)) == slugify(x) for any input.
    """
    if not text:
        return ""

    value = str(text).lower()
    for char, replacement in NORDIC_FOLDS.items():
        value = value.replace(char, replacement)

    value = unicodedata.normalize("NFKD", value)
    value = "".join(c for c in value if not unicodedata.combining(c)).lower()

    value = NON_SLUG_PATTERN.sub("-", value)
    return value.strip("-")


def unique_slug(
    base: str,
    taken: Iterable[str],
    postal_code: Optional[str] = None,
    city: Optional[str] = None,
    listing_id: Optional[str] = None,
) -> str:
    """
    Return base, or a disambiguated variant when base is already taken.

    Variants are tried in order: base-postal, base-postal-city, base-id.
    The result depends only on the inputs, so re-populating the cache from
    the same source data yields the same slugs.

    Which record keeps the bare slug depends on source order: the first one
    does. When it disappears, a record that used base-postal gets the bare
    slug on the next population. The cache keeps base-postal resolvable for
    every record (see qualified_slug) so such URLs survive the rename.
    """
    taken = set(taken)
    if base not in taken:
        return base

    candidates = []
    if postal_code:
        candidates.append(qualified_slug(base, postal_code))
    if city:
        candidates.append(
            "-".join(filter(None, [base, slugify(postal_code), slugify(city)]))
        )
    if listing_id:
        candidates.append("-".join(filter(None, [base, slugify(listing_id)])))

    for candidate in candidates:
        if candidate not in taken:
            logger.info(f"Slug collision on '{base}', using '{candidate}'")
            return candidate

    # Every variant taken: number the id-based one
    stem = candidates[-1] if candidates else base
    counter = 2
    while f"{stem}-{counter}" in taken:
        counter += 1
    logger.warning(f"Slug collision on '{base}' not resolved by postal/city/id, using '{stem}-{counter}'")
    return f"{stem}-{counter}"


def qualified_slug(base: str, postal_code: Optional[str]) -> str:
    """Base slug with the postal code appended, e.g. "mantylantie-5-b-00340"."""
    return "-".join(filter(None, [base, slugify(postal_code)]))
