import re
import unicodedata


def slugify_handle(handle: str) -> str:
    """
    Normalizes a user-chosen handle into a URL-safe slug: accents folded to
    ASCII, lower-cased, and anything outside [a-z0-9_-] removed.
    "Cook Lover 2295" -> "cooklover2295"
    """
    normalized = unicodedata.normalize("NFKD", handle).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9_-]", "", normalized.lower())
