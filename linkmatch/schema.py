from typing import Any, List
from urllib.parse import urlparse

CONTACT_STR_FIELDS = ["id", "fullName", "firstName", "lastName", "company", "jobTitle", "location"]
CONTACT_LIST_FIELDS = ["emails", "phoneNumbers"]

PROFILE_OPTIONAL_STR_FIELDS = ["email", "company", "location", "headline"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def validate_contact_record(data: Any) -> List[str]:
    """
    Validate one contact object from a JSON export.
    Returns a list of error messages. Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Contact must be an object"]

    errors: List[str] = []

    # A name is required, either whole or split
    if not any(_is_non_empty_str(data.get(f)) for f in ("fullName", "firstName", "lastName")):
        errors.append("Missing name: provide fullName or firstName/lastName")

    for f in CONTACT_STR_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    for f in CONTACT_LIST_FIELDS:
        value = data.get(f)
        if value is None:
            continue
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            errors.append(f"Field '{f}' must be a list of strings")

    return errors


def validate_profile_record(data: Any) -> List[str]:
    """
    Validate one candidate profile object (cache payloads, offline scoring input).
    Returns a list of error messages. Empty list means valid.
    """
    if not isinstance(data, dict):
        return ["Profile must be an object"]

    errors: List[str] = []

    for f in ("url", "name"):
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    for f in PROFILE_OPTIONAL_STR_FIELDS:
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    if _is_non_empty_str(data.get("url")) and not _valid_url(data["url"]):
        errors.append("Field 'url' must be a valid absolute URL (scheme + host)")

    return errors
