"""
Search-engine result fetching.

Two providers return candidate profiles for a query:
- fetch_profiles: Google Custom Search JSON API (needs key + engine id)
- scrape_profiles: the public HTML result page, parsed with BeautifulSoup

Both raise ValueError with a user-facing message on request failures.
"""

import re
from typing import List, Optional
from urllib.parse import quote_plus

import requests
from bs4 import BeautifulSoup

from .logger import get_logger
from .matching.models import CandidateProfile
from .normalize import canonical_profile_url, clean_field, is_profile_url, name_from_profile_url, unwrap_redirect
from .retry import RetryError, TransientHTTPError, exponential_backoff, should_retry_http_status

logger = get_logger()

GOOGLE_CUSTOM_SEARCH_ENDPOINT = "https://www.googleapis.com/customsearch/v1"
GOOGLE_SEARCH_URL = "https://www.google.com/search?q="
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

_LOCATION_IN_SNIPPET = re.compile(r"Location:\s*([^·\n]+)")
_TITLE_SUFFIX = re.compile(r"\s*[|\-–]\s*LinkedIn\s*$", re.IGNORECASE)


def _log_retry(attempt: int, error: Exception, delay: float):
    logger.warning(f"Search request failed, retrying in {delay:.1f}s", attempt=attempt, error=str(error))


@exponential_backoff(
    max_retries=3,
    base_delay=1.0,
    exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError, TransientHTTPError),
    on_retry=_log_retry,
)
def _fetch_with_retry(url: str, params: Optional[dict] = None, headers: Optional[dict] = None):
    """GET with automatic retry on timeouts, connection errors, 429 and 5xx."""
    logger.record_api_call()
    resp = requests.get(url, params=params, headers=headers, timeout=20)
    if should_retry_http_status(resp.status_code):
        raise TransientHTTPError(resp.status_code, url)
    return resp


def _get(url: str, provider: str, params: Optional[dict] = None, headers: Optional[dict] = None):
    """Fetch a URL and turn request failures into ValueError."""
    try:
        resp = _fetch_with_retry(url, params=params, headers=headers)
        resp.raise_for_status()
        return resp
    except RetryError as e:
        logger.error(f"{provider} request kept failing", url=url, error=str(e.__cause__ or e))
        raise
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else "HTTPError"
        logger.error(f"{provider} request failed", url=url, status=status)
        raise ValueError(f"{provider} request failed ({status})")
    except requests.exceptions.RequestException as e:
        logger.error(f"{provider} request error", url=url, error=str(e))
        raise ValueError(f"{provider} request error: {e}")


def parse_result_title(title: str) -> dict:
    """
    Split a profile result title into its parts.

    "Jane Doe - Staff Engineer - Acme | LinkedIn" ->
        name "Jane Doe", headline "Staff Engineer", company "Acme"
    """
    title = _TITLE_SUFFIX.sub("", title or "").strip()
    parts = [p.strip() for p in re.split(r"\s+[-–]\s+", title) if p.strip()]
    return {
        "name": parts[0] if parts else "",
        "headline": parts[1] if len(parts) > 1 else None,
        "company": parts[2] if len(parts) > 2 else None,
    }


def location_from_snippet(snippet: str) -> Optional[str]:
    m = _LOCATION_IN_SNIPPET.search(snippet or "")
    return clean_field(m.group(1)) if m else None


def _profile_from_result(url: str, title: str, snippet: str) -> CandidateProfile:
    parts = parse_result_title(title)
    name = parts["name"] or name_from_profile_url(url)
    # The snippet is the best headline we have when the title carries none
    headline = parts["headline"] or clean_field(snippet)
    return CandidateProfile(
        url=canonical_profile_url(url),
        name=name,
        headline=headline,
        company=parts["company"],
        location=location_from_snippet(snippet),
    )


def fetch_profiles(query: str, api_key: str, cse_id: str, num: int = 10) -> List[CandidateProfile]:
    """
    Fetch profile results via the Google Custom Search JSON API.

    Args:
        query: Search query string
        api_key: Google API key
        cse_id: Custom Search Engine ID
        num: Number of results (the API caps this at 10)

    Returns:
        Candidate profiles in result order; non-profile links are dropped
    """
    if not api_key:
        raise ValueError("Missing GOOGLE_API_KEY. Set env var or pass --api-key.")
    if not cse_id:
        raise ValueError("Missing GOOGLE_CSE_ID. Set env var or pass --cse-id.")

    params = {
        "key": api_key,
        "cx": cse_id,
        "q": query,
        "num": min(num, 10),
    }
    data = _get(GOOGLE_CUSTOM_SEARCH_ENDPOINT, "google-cse", params=params).json()

    profiles = []
    for item in data.get("items", []):
        link = item.get("link")
        if not link or not is_profile_url(link):
            continue
        profiles.append(_profile_from_result(link, item.get("title", ""), item.get("snippet", "")))
    return profiles


def parse_search_html(html: str, num: int = 10) -> List[CandidateProfile]:
    """Extract profile results from a search result page."""
    soup = BeautifulSoup(html, "html.parser")
    profiles: List[CandidateProfile] = []

    for a in soup.find_all("a", href=True):
        url = unwrap_redirect(a["href"])
        if not url:
            continue
        container = a.find_parent(class_="g") or a.find_parent(attrs={"data-sokoban-container": True})
        title = ""
        snippet = ""
        if container is not None:
            h3 = container.find("h3")
            title = h3.get_text(" ", strip=True) if h3 else ""
            snip = container.find(class_=re.compile(r"VwiC3b|yXK7lf"))
            snippet = snip.get_text(" ", strip=True) if snip else ""
        else:
            h3 = a.find("h3")
            title = h3.get_text(" ", strip=True) if h3 else ""
        profiles.append(_profile_from_result(url, title, snippet))
        if len(profiles) >= num:
            break

    return profiles


def scrape_profiles(query: str, num: int = 10) -> List[CandidateProfile]:
    """Fetch the HTML result page for a query and parse profile results."""
    resp = _get(GOOGLE_SEARCH_URL + quote_plus(query), "google-html", headers={"User-Agent": USER_AGENT})
    return parse_search_html(resp.text, num=num)
