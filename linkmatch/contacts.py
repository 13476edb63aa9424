"""
Contact file parsing.

Reads vCard (.vcf) and JSON contact exports into Contact values for the
matching core. vCard 2.1, 3.0 and 4.0 line syntax is supported: folded
lines, property parameters, escaped characters and quoted-printable values.
"""

import json
import quopri
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .logger import get_logger
from .matching.models import Contact
from .normalize import clean_field
from .schema import validate_contact_record

logger = get_logger()

SUPPORTED_FORMATS = ("vcard", "json")

_ESCAPED = re.compile(r"\\(.)")
_ESCAPES = {"n": "\n", "N": "\n", ",": ",", ";": ";", "\\": "\\"}
_UNESCAPED_SEMICOLON = re.compile(r"(?<!\\);")

# property name -> list of (params, raw value)
Card = Dict[str, List[Tuple[Dict[str, str], str]]]


class ContactParseError(ValueError):
    """Raised when a contact file cannot be read or has the wrong shape."""
    pass


def _unescape(value: str) -> str:
    return _ESCAPED.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), value)


def _split_structured(value: str) -> List[str]:
    return [_unescape(part).strip() for part in _UNESCAPED_SEMICOLON.split(value)]


def _unfold(text: str) -> List[str]:
    """Join folded continuation lines and quoted-printable soft breaks."""
    lines: List[str] = []
    for raw in text.splitlines():
        if raw[:1] in (" ", "\t") and lines:
            lines[-1] += raw[1:]
        elif lines and lines[-1].endswith("=") and "QUOTED-PRINTABLE" in lines[-1].upper().split(":", 1)[0]:
            lines[-1] = lines[-1][:-1] + raw
        else:
            lines.append(raw)
    return lines


def _parse_line(line: str) -> Optional[Tuple[str, Dict[str, str], str]]:
    if ":" not in line:
        return None
    head, value = line.split(":", 1)
    parts = head.split(";")
    # Drop "item1." style group prefixes
    name = parts[0].split(".")[-1].strip().upper()
    params: Dict[str, str] = {}
    for param in parts[1:]:
        if "=" in param:
            key, val = param.split("=", 1)
            params[key.strip().upper()] = val.strip()
        else:
            # vCard 2.1 bare parameters, e.g. EMAIL;INTERNET;WORK
            params.setdefault("TYPE", param.strip())
    if params.get("ENCODING", "").upper() == "QUOTED-PRINTABLE":
        decoded = quopri.decodestring(value.encode("utf-8"))
        try:
            value = decoded.decode(params.get("CHARSET", "utf-8"), "replace")
        except LookupError:
            value = decoded.decode("utf-8", "replace")
    return name, params, value


def _read_cards(text: str) -> List[Card]:
    cards: List[Card] = []
    current: Optional[Card] = None
    for line in _unfold(text):
        parsed = _parse_line(line)
        if parsed is None:
            continue
        name, params, value = parsed
        if name == "BEGIN" and value.strip().upper() == "VCARD":
            current = {}
        elif name == "END" and value.strip().upper() == "VCARD":
            if current is not None:
                cards.append(current)
            current = None
        elif current is not None:
            current.setdefault(name, []).append((params, value))
    return cards


def _first(card: Card, prop: str) -> str:
    entries = card.get(prop)
    return entries[0][1] if entries else ""


def _all_values(card: Card, prop: str) -> List[str]:
    values = []
    for _, raw in card.get(prop, []):
        value = _unescape(raw).strip()
        if value.lower().startswith(("mailto:", "tel:")):
            value = value.split(":", 1)[1]
        if value:
            values.append(value)
    return values


def _location_from_adr(raw: str) -> Optional[str]:
    # post-office-box; extended; street; locality; region; postal-code; country
    parts = _split_structured(raw) + [""] * 7
    locality, region, country = parts[3], parts[4], parts[6]
    return clean_field(", ".join(p for p in (locality, region, country) if p))


def _slug(name: str) -> str:
    return "-".join(name.lower().split())


def _card_to_contact(card: Card, index: int) -> Optional[Contact]:
    n_parts = _split_structured(_first(card, "N")) + ["", ""]
    last_name, first_name = n_parts[0], n_parts[1]
    full_name = clean_field(_unescape(_first(card, "FN"))) or clean_field(f"{first_name} {last_name}")
    if not full_name:
        return None

    org = _first(card, "ORG")
    adr = _first(card, "ADR")
    return Contact(
        id=f"vcard-{index}-{_slug(full_name)}",
        full_name=full_name,
        first_name=first_name,
        last_name=last_name,
        emails=tuple(_all_values(card, "EMAIL")),
        phone_numbers=tuple(_all_values(card, "TEL")),
        company=clean_field(_split_structured(org)[0]) if org else None,
        job_title=clean_field(_unescape(_first(card, "TITLE"))),
        location=_location_from_adr(adr) if adr else None,
        source="vcard",
    )


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ContactParseError(f"Cannot read contact file {path}: {e}")


def parse_vcard(path: Path) -> List[Contact]:
    """
    Parse a vCard file.

    Cards without any usable name are skipped.

    Raises:
        ContactParseError: If the file cannot be read
    """
    path = Path(path)
    contacts: List[Contact] = []
    for index, card in enumerate(_read_cards(_read_text(path))):
        contact = _card_to_contact(card, index)
        if contact is None:
            logger.warning("Skipping vCard without a name", file=str(path), index=index)
            continue
        contacts.append(contact)
    logger.debug("Parsed vCard file", file=str(path), contacts=len(contacts))
    return contacts


def _record_to_contact(item: dict, index: int) -> Contact:
    first_name = clean_field(item.get("firstName")) or ""
    last_name = clean_field(item.get("lastName")) or ""
    full_name = clean_field(item.get("fullName")) or clean_field(f"{first_name} {last_name}")
    return Contact(
        id=item.get("id") or f"json-{index}",
        full_name=full_name,
        first_name=first_name,
        last_name=last_name,
        emails=tuple(e.strip() for e in item.get("emails") or [] if e.strip()),
        phone_numbers=tuple(p.strip() for p in item.get("phoneNumbers") or [] if p.strip()),
        company=clean_field(item.get("company")),
        job_title=clean_field(item.get("jobTitle")),
        location=clean_field(item.get("location")),
        source="json",
    )


def parse_json(path: Path) -> List[Contact]:
    """
    Parse a JSON contact export: an array of contact objects.

    Invalid records are logged and skipped.

    Raises:
        ContactParseError: If the file is unreadable, not JSON, or not an array
    """
    path = Path(path)
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as e:
        raise ContactParseError(f"Invalid JSON in {path}: {e}")

    if not isinstance(data, list):
        raise ContactParseError("JSON file must contain an array of contacts")

    contacts: List[Contact] = []
    for index, item in enumerate(data):
        errors = validate_contact_record(item)
        if errors:
            logger.warning("Skipping invalid contact", file=str(path), index=index, errors=errors)
            continue
        contacts.append(_record_to_contact(item, index))
    return contacts


def detect_format(path: Path) -> str:
    suffix = Path(path).suffix.lower()
    if suffix == ".json":
        return "json"
    # .vcf, .vcard and anything unknown are tried as vCard
    return "vcard"


def parse_contacts(path: Path, fmt: Optional[str] = None) -> List[Contact]:
    """
    Parse a contact file, auto-detecting the format from its extension.

    Args:
        path: Contact file
        fmt: "vcard" or "json" to skip detection

    Raises:
        ContactParseError: On unsupported format or unreadable file
    """
    fmt = fmt or detect_format(path)
    if fmt == "vcard":
        return parse_vcard(path)
    if fmt == "json":
        return parse_json(path)
    raise ContactParseError(f"Unsupported format: {fmt}. Use one of: {', '.join(SUPPORTED_FORMATS)}")


def filter_contacts(contacts: Iterable[Contact], name_filter: Optional[str]) -> List[Contact]:
    """Keep contacts whose full name contains name_filter (case-insensitive)."""
    contacts = list(contacts)
    if not name_filter:
        return contacts
    needle = name_filter.lower()
    return [c for c in contacts if needle in c.full_name.lower()]
