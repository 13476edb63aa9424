"""
Search result cache.

Responsibilities:
- Persist the candidate profiles found for a contact, keyed by the contact's
  name, company and location.
- Expire entries after a TTL (24 hours by default).

Non-Responsibilities:
- No searching.
- No scoring.

Invariant:
A cached entry returns exactly the profiles that were stored, in order.
"""

import hashlib
import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .database import SearchCacheEntry, get_session, init_database
from .logger import get_logger
from .matching.models import CandidateProfile, Contact
from .schema import validate_profile_record

logger = get_logger()

DEFAULT_TTL_SECONDS = 86400


def cache_key(contact: Contact) -> str:
    key_data = f"{contact.full_name}-{contact.company or ''}-{contact.location or ''}"
    return hashlib.md5(key_data.lower().encode("utf-8")).hexdigest()


class SearchCache:
    """SQLite-backed cache of profile search results."""

    def __init__(
        self,
        db_path: Path,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db_path = Path(db_path)
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self.hits = 0
        self.misses = 0
        init_database(self.db_path)

    def _is_expired(self, entry: SearchCacheEntry) -> bool:
        return entry.created_at < self._clock() - self.ttl

    def _load_profiles(self, entry: SearchCacheEntry) -> List[CandidateProfile]:
        try:
            records = json.loads(entry.profiles_json)
        except json.JSONDecodeError as e:
            logger.warning("Corrupt cache entry", cache_key=entry.cache_key, error=str(e))
            return []

        profiles = []
        for record in records if isinstance(records, list) else []:
            errors = validate_profile_record(record)
            if errors:
                logger.warning("Skipping invalid cached profile", cache_key=entry.cache_key, errors=errors)
                continue
            profiles.append(CandidateProfile.from_dict(record))
        return profiles

    def get(self, contact: Contact) -> Optional[List[CandidateProfile]]:
        """Cached profiles for a contact, or None when absent or expired."""
        session = get_session(self.db_path)
        try:
            entry = session.get(SearchCacheEntry, cache_key(contact))
            if entry is None or self._is_expired(entry):
                self.misses += 1
                logger.record_cache_miss()
                return None
            self.hits += 1
            logger.record_cache_hit()
            return self._load_profiles(entry)
        finally:
            session.close()

    def set(self, contact: Contact, profiles: List[CandidateProfile]) -> None:
        session = get_session(self.db_path)
        try:
            session.merge(SearchCacheEntry(
                cache_key=cache_key(contact),
                contact_name=contact.full_name,
                profiles_json=json.dumps([p.to_dict() for p in profiles], ensure_ascii=False),
                created_at=self._clock(),
            ))
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def has(self, contact: Contact) -> bool:
        session = get_session(self.db_path)
        try:
            entry = session.get(SearchCacheEntry, cache_key(contact))
            return entry is not None and not self._is_expired(entry)
        finally:
            session.close()

    def clear(self) -> int:
        """Delete every entry. Returns the number removed."""
        session = get_session(self.db_path)
        try:
            removed = session.query(SearchCacheEntry).delete()
            session.commit()
        finally:
            session.close()
        self.hits = 0
        self.misses = 0
        logger.info("Cache cleared", removed=removed)
        return removed

    def purge_expired(self) -> int:
        """
        Remove entries older than the TTL.

        Returns:
            Number of entries removed
        """
        cutoff = self._clock() - self.ttl
        session = get_session(self.db_path)
        try:
            removed = (
                session.query(SearchCacheEntry)
                .filter(SearchCacheEntry.created_at < cutoff)
                .delete(synchronize_session=False)
            )
            session.commit()
        finally:
            session.close()
        logger.debug("Purged expired cache entries", removed=removed, cutoff=cutoff.isoformat())
        return removed

    def stats(self) -> Dict[str, int]:
        cutoff = self._clock() - self.ttl
        session = get_session(self.db_path)
        try:
            entries = session.query(SearchCacheEntry).count()
            expired = session.query(SearchCacheEntry).filter(SearchCacheEntry.created_at < cutoff).count()
        finally:
            session.close()
        return {
            "entries": entries,
            "expired": expired,
            "hits": self.hits,
            "misses": self.misses,
        }
