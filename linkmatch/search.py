"""
Profile search orchestration.

Builds search-engine queries for a contact, runs them through a provider
and returns de-duplicated candidate profiles in search-rank order.
"""

import random
import time
from typing import Callable, List, Optional
from urllib.parse import quote_plus

from .google_results import fetch_profiles, scrape_profiles
from .logger import get_logger
from .matching.models import CandidateProfile, Contact
from .normalize import canonical_profile_url
from .retry import CircuitBreaker, CircuitOpenError, RetryError

logger = get_logger()

PROFILE_SITE = "site:linkedin.com/in/"
MAX_QUERIES = 2


def build_queries(contact: Contact, max_queries: int = MAX_QUERIES) -> List[str]:
    """
    Returns the search queries for a contact, most specific first.
    Name + company, name + location, name + job title; the bare name only
    when none of those are known.
    """
    name = contact.full_name.strip()
    if not name:
        return []

    queries: List[str] = []
    for qualifier in (contact.company, contact.location, contact.job_title):
        if qualifier and qualifier.strip():
            queries.append(f'{PROFILE_SITE} "{name}" "{qualifier.strip()}"')

    if not queries:
        queries.append(f'{PROFILE_SITE} "{name}"')

    return queries[:max_queries]


def build_query_urls(queries: List[str]) -> List[str]:
    base = "https://www.google.com/search?q="
    return [base + quote_plus(q) for q in queries]


class ProfileSearcher:
    """
    Runs profile searches for contacts.

    Uses the Custom Search JSON API when credentials are available and the
    HTML result page otherwise. Repeated provider failures open a circuit
    breaker so a rate-limited batch stops hammering the provider.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        cse_id: Optional[str] = None,
        results_per_query: int = 10,
        query_delay: float = 2.0,
        breaker: Optional[CircuitBreaker] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.api_key = api_key
        self.cse_id = cse_id
        self.results_per_query = results_per_query
        self.query_delay = query_delay
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=3,
            recovery_timeout=300,
            expected_exception=(ValueError, RetryError),
            name=self.provider,
        )
        self._sleep = sleep

    @property
    def provider(self) -> str:
        return "google-cse" if self.api_key and self.cse_id else "google-html"

    def _run_query(self, query: str) -> List[CandidateProfile]:
        if self.provider == "google-cse":
            return fetch_profiles(query, api_key=self.api_key, cse_id=self.cse_id, num=self.results_per_query)
        return scrape_profiles(query, num=self.results_per_query)

    def search(self, contact: Contact) -> List[CandidateProfile]:
        """
        Search profiles for a contact.

        Returns:
            Candidates in the order first seen, unique by canonical URL

        Raises:
            ValueError / RetryError: When every query failed
            CircuitOpenError: When the provider is currently blocked
        """
        queries = build_queries(contact)
        profiles: List[CandidateProfile] = []
        seen = set()
        failures: List[Exception] = []

        for i, query in enumerate(queries):
            if i > 0 and self.query_delay > 0:
                # Jitter between queries to stay under rate limits
                self._sleep(self.query_delay + random.uniform(0, self.query_delay / 2))

            logger.record_search_attempt(self.provider)
            try:
                results = self.breaker.call(self._run_query, query)
            except CircuitOpenError:
                logger.record_search_failure(self.provider, "CircuitOpen")
                raise
            except (ValueError, RetryError) as e:
                logger.record_search_failure(self.provider, type(e).__name__)
                logger.warning("Profile search failed", query=query, error=str(e))
                failures.append(e)
                continue

            logger.record_search_success(self.provider)
            for profile in results:
                key = canonical_profile_url(profile.url)
                if key not in seen:
                    seen.add(key)
                    profiles.append(profile)

        if queries and len(failures) == len(queries):
            raise failures[-1]

        logger.debug("Profile search complete", contact=contact.full_name, queries=len(queries), profiles=len(profiles))
        return profiles
