import re
from urllib.parse import parse_qs, unquote, urlparse

PROFILE_PATH = "/in/"
PROFILE_HOST = "www.linkedin.com"


def normalize_text(s: str) -> str:
    return " ".join(s.strip().lower().split())


def clean_field(value) -> str | None:
    """Collapse whitespace; empty or non-string values become None."""
    if not isinstance(value, str):
        return None
    cleaned = " ".join(value.split())
    return cleaned or None


def is_profile_url(url: str) -> bool:
    parsed = urlparse(url)
    return "linkedin.com" in parsed.netloc and parsed.path.startswith(PROFILE_PATH)


def unwrap_redirect(href: str) -> str | None:
    """Return the profile URL behind a search-engine redirect link, if any."""
    if is_profile_url(href):
        return href
    params = parse_qs(urlparse(href).query)
    for key in ("q", "url"):
        for value in params.get(key, []):
            if is_profile_url(value):
                return value
    return None


def canonical_profile_url(url: str) -> str:
    """
    Canonical form of a profile URL: https, www host, no query/fragment,
    no trailing slash. Country subdomains (uk.linkedin.com) collapse to www.
    """
    parsed = urlparse(url.strip())
    if not parsed.netloc:
        return url.strip()
    path = parsed.path.rstrip("/")
    return f"https://{PROFILE_HOST}{path}"


def name_from_profile_url(url: str) -> str:
    """Guess a display name from the profile slug: /in/jane-doe-4a1b2c -> Jane Doe."""
    path = urlparse(url).path
    if PROFILE_PATH not in path:
        return ""
    slug = unquote(path.split(PROFILE_PATH, 1)[1].split("/")[0])
    words = [w for w in slug.split("-") if w]
    # Drop the trailing member-id suffix LinkedIn appends to common names
    if len(words) > 1 and re.search(r"\d", words[-1]):
        words = words[:-1]
    return " ".join(w.capitalize() for w in words)
