# toolkit/utils/slugs.py
import re

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Maak een URL-veilige slug: 'Now is the time' -> 'now-is-the-time'."""
    if value == "":
        raise ValueError("empty string not permitted")
    slug = _SLUG_RE.sub("-", value.lower()).strip("-")
    if not slug:
        raise ValueError("after removing characters, slug is zero length")
    return slug
