"""
Tests for the search result cache.
"""

from datetime import datetime, timedelta

import pytest

from linkmatch.cache import SearchCache, cache_key
from linkmatch.database import SearchCacheEntry, get_session
from linkmatch.matching import CandidateProfile, Contact


class Clock:
    """Settable clock for TTL tests."""

    def __init__(self):
        self.now = datetime(2024, 1, 15, 12, 0, 0)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def cache(tmp_path, clock):
    return SearchCache(tmp_path / "cache.db", ttl_seconds=3600, clock=clock)


@pytest.fixture
def profiles():
    return [
        CandidateProfile(url="https://www.linkedin.com/in/john-doe", name="John Doe", company="Acme Corp"),
        CandidateProfile(url="https://www.linkedin.com/in/jd-2", name="J. Doe", headline="Engineer"),
    ]


class TestCacheKey:
    """Test cache key derivation."""

    def test_case_insensitive(self):
        a = Contact(full_name="John Doe", company="Acme")
        b = Contact(full_name="JOHN DOE", company="acme")
        assert cache_key(a) == cache_key(b)

    def test_depends_on_company_and_location(self):
        base = Contact(full_name="John Doe")
        assert cache_key(base) != cache_key(Contact(full_name="John Doe", company="Acme"))
        assert cache_key(base) != cache_key(Contact(full_name="John Doe", location="Austin"))

    def test_ignores_other_fields(self):
        a = Contact(full_name="John Doe", emails=("a@b.com",))
        assert cache_key(a) == cache_key(Contact(full_name="John Doe", job_title="CTO"))

    def test_md5_hex(self):
        assert len(cache_key(Contact(full_name="x"))) == 32


class TestSearchCache:
    """Test cache operations."""

    def test_creates_database(self, tmp_path):
        db_path = tmp_path / "nested" / "cache.db"
        SearchCache(db_path)
        assert db_path.exists()

    def test_miss_then_hit(self, cache, john_doe, profiles):
        assert cache.get(john_doe) is None
        cache.set(john_doe, profiles)
        assert cache.get(john_doe) == profiles
        assert (cache.hits, cache.misses) == (1, 1)

    def test_empty_result_is_cached(self, cache, john_doe):
        cache.set(john_doe, [])
        assert cache.get(john_doe) == []
        assert cache.has(john_doe)

    def test_set_overwrites(self, cache, john_doe, profiles):
        cache.set(john_doe, profiles)
        cache.set(john_doe, profiles[:1])
        assert cache.get(john_doe) == profiles[:1]

    def test_expired_entries_are_misses(self, cache, clock, john_doe, profiles):
        cache.set(john_doe, profiles)
        clock.advance(hours=2)
        assert not cache.has(john_doe)
        assert cache.get(john_doe) is None

    def test_purge_expired(self, cache, clock, john_doe, profiles):
        cache.set(john_doe, profiles)
        clock.advance(minutes=90)
        fresh = Contact(full_name="Jane Smith")
        cache.set(fresh, profiles)

        assert cache.purge_expired() == 1
        assert cache.has(fresh)
        assert cache.stats()["entries"] == 1

    def test_clear(self, cache, john_doe, profiles):
        cache.set(john_doe, profiles)
        cache.set(Contact(full_name="Jane Smith"), profiles)
        assert cache.clear() == 2
        assert not cache.has(john_doe)

    def test_stats(self, cache, clock, john_doe, profiles):
        cache.set(john_doe, profiles)
        cache.get(john_doe)
        clock.advance(hours=2)
        assert cache.stats() == {"entries": 1, "expired": 1, "hits": 1, "misses": 0}

    def test_invalid_cached_profiles_skipped(self, cache, clock, john_doe):
        session = get_session(cache.db_path)
        session.add(SearchCacheEntry(
            cache_key=cache_key(john_doe),
            contact_name="John Doe",
            profiles_json='[{"url": "not-a-url", "name": "X"}, {"url": "https://www.linkedin.com/in/x", "name": "X"}]',
            created_at=clock(),
        ))
        session.commit()
        session.close()

        assert [p.url for p in cache.get(john_doe)] == ["https://www.linkedin.com/in/x"]

    def test_persists_across_instances(self, tmp_path, clock, john_doe, profiles):
        SearchCache(tmp_path / "cache.db", clock=clock).set(john_doe, profiles)
        assert SearchCache(tmp_path / "cache.db", clock=clock).get(john_doe) == profiles
