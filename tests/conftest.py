"""
Pytest configuration and shared fixtures.
"""

import pytest
import json
from pathlib import Path
from typing import Dict, Any

import requests

from linkmatch.matching import CandidateProfile, Contact


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, json_data: Any = None, text: str = ""):
        self.status_code = status_code
        self._json = json_data
        self.text = text

    def json(self):
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)


@pytest.fixture
def john_doe() -> Contact:
    """Contact with every attribute populated."""
    return Contact(
        full_name="John Doe",
        first_name="John",
        last_name="Doe",
        emails=("john.doe@acme.com",),
        company="Acme Corp",
        location="San Francisco, CA",
        job_title="Software Engineer",
    )


@pytest.fixture
def john_doe_profile() -> CandidateProfile:
    """Profile that is the same person as john_doe."""
    return CandidateProfile(
        url="https://www.linkedin.com/in/john-doe",
        name="John Doe",
        email="john.doe@acme.com",
        company="Acme Corp",
        location="San Francisco Bay Area",
    )


@pytest.fixture
def stranger_profile() -> CandidateProfile:
    """Profile sharing nothing with john_doe."""
    return CandidateProfile(
        url="https://www.linkedin.com/in/mary-jones",
        name="Mary Jones",
        company="Zebra Industries",
        location="Berlin, Germany",
    )


@pytest.fixture
def sample_vcard() -> str:
    """Mixed vCard 3.0 / 2.1 export, including a card without a name."""
    return (
        "BEGIN:VCARD\r\n"
        "VERSION:3.0\r\n"
        "FN:John Doe\r\n"
        "N:Doe;John;;;\r\n"
        "ORG:Acme Corp;Engineering\r\n"
        "TITLE:Software Engineer\r\n"
        "EMAIL;TYPE=work:john.doe@acme.com\r\n"
        "EMAIL;TYPE=home:jd@example.com\r\n"
        "TEL;TYPE=cell:+1 555 0100\r\n"
        "ADR;TYPE=work:;;1 Main St;San Francisco;CA;94105;USA\r\n"
        "END:VCARD\r\n"
        "BEGIN:VCARD\r\n"
        "VERSION:2.1\r\n"
        "N:Smith;Jane\r\n"
        "EMAIL;INTERNET:jane@example.org\r\n"
        "NOTE:folded line\r\n"
        " continues here\r\n"
        "END:VCARD\r\n"
        "BEGIN:VCARD\r\n"
        "VERSION:3.0\r\n"
        "ORG:Nameless Inc\r\n"
        "END:VCARD\r\n"
    )


@pytest.fixture
def vcard_file(tmp_path, sample_vcard) -> Path:
    path = tmp_path / "contacts.vcf"
    path.write_text(sample_vcard, encoding="utf-8")
    return path


@pytest.fixture
def contact_records() -> list:
    """JSON contact export: two valid records and one without a name."""
    return [
        {
            "id": "c-1",
            "fullName": "John Doe",
            "emails": ["john.doe@acme.com"],
            "phoneNumbers": ["+1 555 0100"],
            "company": "Acme Corp",
            "jobTitle": "Software Engineer",
            "location": "San Francisco, CA",
        },
        {"firstName": "Ann", "lastName": "Lee"},
        {"company": "No Name LLC"},
    ]


@pytest.fixture
def json_contacts_file(tmp_path, contact_records) -> Path:
    path = tmp_path / "contacts.json"
    path.write_text(json.dumps(contact_records), encoding="utf-8")
    return path


@pytest.fixture
def valid_profile_record() -> Dict[str, Any]:
    return {
        "url": "https://www.linkedin.com/in/john-doe",
        "name": "John Doe",
        "email": "john.doe@acme.com",
        "company": "Acme Corp",
        "location": "San Francisco Bay Area",
        "headline": "Software Engineer at Acme",
    }
