"""In-memory, content-addressed cache of gap analysis results (TTL 30 minutes).

Keys combine the job URL with a 64-bit BLAKE2b digest of the posting's
textual fields, so page churn outside those fields keeps the entry while an
edited description forces recomputation. Two different postings sharing a URL
and a 64-bit digest would collide; at this cache's size that probability is
negligible and accepted.

Entries are held serialized and validated on read: a malformed entry is
dropped and reported as a miss.
"""

import hashlib
import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable

from pydantic import ValidationError

from skillgap.config import Settings, settings as default_settings
from skillgap.models.analysis import CacheEntry, GapAnalysisResult
from skillgap.models.job import JobText

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def content_hash(content: JobText) -> str:
    """Stable 16-hex-digit digest of title, company, description and requirements.

    Each field is length-prefixed, so text moving across a field boundary
    ("Engineer|" + "Acme" vs "Engineer" + "|Acme") changes the digest.
    """
    digest = hashlib.blake2b(digest_size=8)
    for field in (content.title, content.company, content.description, content.requirements):
        data = field.encode("utf-8")
        digest.update(len(data).to_bytes(8, "big"))
        digest.update(data)
    return digest.hexdigest()


def cache_key(url: str, digest: str) -> str:
    return f"{url}:{digest}"


class AnalysisCache:
    """Per page-context result cache with TTL expiry and bounded size."""

    def __init__(
        self,
        ttl_minutes: int | None = None,
        max_entries: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
        config: Settings | None = None,
    ) -> None:
        config = config or default_settings
        self.ttl = timedelta(minutes=config.cache_ttl_minutes if ttl_minutes is None else ttl_minutes)
        self.max_entries = config.cache_max_entries if max_entries is None else max_entries
        self._evict_fraction = config.cache_evict_fraction
        self._clock = clock
        self._entries: dict[str, str] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def _read(self, key: str) -> CacheEntry | None:
        raw = self._entries.get(key)
        if raw is None:
            return None
        try:
            return CacheEntry.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Dropping malformed cache entry %s: %s", key, e.error_count())
            del self._entries[key]
            return None

    def lookup(self, url: str, content: JobText) -> GapAnalysisResult | None:
        """Cached result for this URL and content, or None on miss or expiry."""
        key = cache_key(url, content_hash(content))
        entry = self._read(key)
        if entry is not None and entry.is_expired(self._clock()):
            logger.debug("Cache entry expired: %s", key)
            del self._entries[key]
            entry = None

        if entry is None:
            self.misses += 1
            return None
        self.hits += 1
        logger.debug("Cache hit: %s", key)
        return entry.analysis

    def store(self, url: str, content: JobText, analysis: GapAnalysisResult) -> None:
        digest = content_hash(content)
        key = cache_key(url, digest)
        if key not in self._entries and len(self._entries) >= self.max_entries:
            self._evict()

        now = self._clock()
        entry = CacheEntry(
            job_url=url,
            content_hash=digest,
            analysis=analysis,
            created_at=now,
            expires_at=now + self.ttl,
        )
        self._entries[key] = entry.model_dump_json()

    def _evict(self) -> None:
        """Drop expired entries; when none are expired drop the oldest share by creation time."""
        now = self._clock()
        live: list[tuple[datetime, str]] = []
        for key in list(self._entries):
            entry = self._read(key)
            if entry is None:
                continue
            if entry.is_expired(now):
                del self._entries[key]
            else:
                live.append((entry.created_at, key))

        if len(self._entries) < self.max_entries:
            logger.debug("Evicted expired cache entries, %d remain", len(self._entries))
            return

        count = max(1, math.floor(self.max_entries * self._evict_fraction))
        live.sort()
        for _, key in live[:count]:
            del self._entries[key]
        logger.debug("Evicted %d oldest cache entries", count)

    def get_or_compute(
        self,
        url: str,
        content: JobText,
        compute_fn: Callable[[], GapAnalysisResult],
        force_refresh: bool = False,
    ) -> GapAnalysisResult:
        """Return the cached analysis, or compute, store and return a fresh one.

        force_refresh skips the lookup but still stores the new result.
        """
        if not force_refresh:
            cached = self.lookup(url, content)
            if cached is not None:
                return cached
        result = compute_fn()
        self.store(url, content, result)
        return result

    async def get_or_compute_async(
        self,
        url: str,
        content: JobText,
        compute_fn: Callable[[], Awaitable[GapAnalysisResult]],
        force_refresh: bool = False,
    ) -> GapAnalysisResult:
        if not force_refresh:
            cached = self.lookup(url, content)
            if cached is not None:
                return cached
        result = await compute_fn()
        self.store(url, content, result)
        return result

    def invalidate(self, url: str) -> int:
        """Drop every entry for a URL. Returns the number removed."""
        keys = [k for k in self._entries if k.rsplit(":", 1)[0] == url]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def stats(self) -> dict:
        total = self.hits + self.misses
        return {
            "size": len(self._entries),
            "max_size": self.max_entries,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hits / total if total else 0.0,
        }
