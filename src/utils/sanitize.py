"""Sanitizers for admin-supplied strings, URLs and tags."""

import re
import unicodedata
from urllib.parse import urlsplit, urlunsplit

ALLOWED_URL_SCHEMES = ("http", "https")
LOCAL_UPLOAD_PREFIX = "/uploads/"

_HTML_TAG = re.compile(r"<[^>]*>")
_DIRECT_IMAGE = re.compile(r"\.(jpg|jpeg|png|webp|gif|bmp|svg)(\?.*)?$", re.IGNORECASE)


def sanitize_url(url) -> str | None:
    """Return a normalized http(s) URL, or None if the value is not one."""
    if not url or not isinstance(url, str):
        return None

    url = url.strip()
    try:
        parts = urlsplit(url)
    except ValueError:
        return None

    if parts.scheme.lower() not in ALLOWED_URL_SCHEMES or not parts.netloc:
        return None

    path = parts.path or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, parts.fragment))


def sanitize_image_url(url) -> str:
    """Keep local uploads and direct http(s) links to image files; anything else becomes empty."""
    if not url or not isinstance(url, str):
        return ""
    url = url.strip()
    if url.startswith(LOCAL_UPLOAD_PREFIX):
        return url
    sanitized = sanitize_url(url)
    if sanitized is None or not is_direct_image_url(sanitized):
        return ""
    return sanitized


def is_direct_image_url(url: str) -> bool:
    return isinstance(url, str) and bool(_DIRECT_IMAGE.search(url))


def sanitize_string(value) -> str:
    """Trim and strip HTML tags and stray angle brackets."""
    if not value or not isinstance(value, str):
        return ""
    value = _HTML_TAG.sub("", value.strip())
    return value.replace("<", "").replace(">", "")


def format_tags(tags) -> str:
    """Normalize tags into a lowercase comma-joined string without blanks."""
    if not tags:
        return ""
    if isinstance(tags, str):
        tags = tags.split(",")
    cleaned = [tag.strip().lower() for tag in tags if isinstance(tag, str)]
    return ",".join(tag for tag in cleaned if tag)


def slugify(name: str) -> str:
    """Build a URL slug, dropping accents: "Casa & Jardim" -> "casa-jardim"."""
    normalized = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    normalized = re.sub(r"[^a-z0-9\s-]", "", normalized.lower())
    return re.sub(r"[\s-]+", "-", normalized).strip("-")
