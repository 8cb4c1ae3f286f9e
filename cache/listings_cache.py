"""Read-through cache of mapped listings, indexed by locale and slug."""

import asyncio
import logging
import time
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from models.constants import DEFAULT_LOCALE, LOCALES
from models.localized import lpick
from models.metadata import CacheSnapshot, CacheStatus, SyncResult
from models.property import Property, is_rental
from sources import get_source
from sources.base import ListingsSource, SourceFetchError
from sources.linear.mapper import LinearMapper
from utils.slug import qualified_slug, unique_slug

from .aliases import load_slug_aliases
from .queries import count_by_status

logger = logging.getLogger(__name__)

DEFAULT_STALE_AFTER = 600.0
DEFAULT_SYNC_INTERVAL = 600.0
DEFAULT_SYNC_TIMEOUT = 30.0
DEFAULT_RETRY_AFTER = 60.0


class ListingsCache:
    """
    In-memory listing index with single-flight population.

    The whole index lives in one immutable CacheSnapshot that is replaced in a
    single assignment, so readers see either the previous generation or the
    next one, never a mix. At most one population runs at a time: concurrent
    callers await the same task. A failed population leaves the previous
    snapshot in place.
    """

    def __init__(
        self,
        source: ListingsSource,
        mapper: Optional[LinearMapper] = None,
        aliases: Optional[Dict[str, str]] = None,
        stale_after: float = DEFAULT_STALE_AFTER,
        sync_interval: float = DEFAULT_SYNC_INTERVAL,
        sync_timeout: float = DEFAULT_SYNC_TIMEOUT,
        retry_after: float = DEFAULT_RETRY_AFTER,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache. Nothing is fetched until the first read.

        Args:
            source: Listing source to populate from
            mapper: Raw record → Property mapper
            aliases: Alias slug → canonical slug table
            stale_after: Seconds after a successful sync before data is stale
            sync_interval: Seconds between background syncs
            sync_timeout: Upper bound in seconds for one upstream fetch
            retry_after: Seconds to wait after a failure before a read retries
            clock: Monotonic time source (seconds)
        """
        self.source = source
        self.mapper = mapper or LinearMapper()
        self.aliases: Dict[str, str] = dict(aliases or {})
        self.stale_after = stale_after
        self.sync_interval = sync_interval
        self.sync_timeout = sync_timeout
        self.retry_after = retry_after
        self._clock = clock

        self._snapshot: Optional[CacheSnapshot] = None
        self._inflight: Optional[asyncio.Task] = None
        self._auto_sync_task: Optional[asyncio.Task] = None

        # Sync bookkeeping (monotonic seconds)
        self._last_success: Optional[float] = None
        self._last_failure: Optional[float] = None

        # Sync bookkeeping for the status report
        self._last_sync_time: Optional[datetime] = None
        self._last_attempt_time: Optional[datetime] = None
        self._last_sync_duration_ms: Optional[int] = None
        self._last_error: Optional[str] = None

    # ========== READ API ==========

    async def ensure_initialized(self) -> bool:
        """
        Make sure a usable snapshot exists, refreshing it when stale.

        Returns:
            True if a snapshot is available afterwards (possibly an old one)
        """
        if not self.needs_refresh():
            return True

        if self._inflight is None and self._in_retry_backoff():
            logger.debug("Skipping refresh, last sync failed less than retry_after ago")
            return self._snapshot is not None

        await self._join_population()
        return self._snapshot is not None

    async def get_by_slug(self, slug: str, locale: str = DEFAULT_LOCALE) -> Optional[Property]:
        """
        Look up one listing by slug (or alias slug) in a locale.

        Returns:
            The Property, or None when no listing has that slug

        Raises:
            ValueError: If locale is not supported
        """
        self._check_locale(locale)
        await self.ensure_initialized()

        snapshot = self._snapshot
        if snapshot is None:
            return None

        canonical = self.aliases.get(slug, slug)
        if canonical != slug:
            logger.debug(f"Resolved slug alias {slug} -> {canonical}")

        index = snapshot.by_locale[locale]
        prop = index.get(canonical)
        if prop is None and canonical in snapshot.slug_fallbacks:
            prop = index.get(snapshot.slug_fallbacks[canonical])
        return prop

    async def get_all(self, locale: str = DEFAULT_LOCALE) -> List[Property]:
        """Return every listing for a locale, in source order."""
        self._check_locale(locale)
        await self.ensure_initialized()

        snapshot = self._snapshot
        if snapshot is None:
            return []
        return list(snapshot.by_locale[locale].values())

    async def trigger_sync(self) -> SyncResult:
        """
        Re-populate now, regardless of staleness.

        Joins a population that is already running instead of starting a
        second one. Readers keep getting the old snapshot until the swap.
        """
        logger.info("Manual sync triggered")
        return await self._join_population()

    def needs_refresh(self) -> bool:
        """True when no sync has succeeded yet or the snapshot is stale."""
        if self._snapshot is None or self._last_success is None:
            return True
        return self._clock() - self._last_success >= self.stale_after

    def status(self) -> CacheStatus:
        snapshot = self._snapshot
        return CacheStatus(
            listings_count=snapshot.listings_count if snapshot else 0,
            last_sync_time=self._last_sync_time,
            sync_in_progress=self._inflight is not None and not self._inflight.done(),
            auto_sync_active=self._auto_sync_task is not None and not self._auto_sync_task.done(),
            needs_refresh=self.needs_refresh(),
            last_error=self._last_error,
            last_sync_duration_ms=self._last_sync_duration_ms,
            last_attempt_time=self._last_attempt_time,
            source=self.source.get_source_name(),
            aliases_count=len(self.aliases),
        )

    def status_report(self) -> Dict[str, Any]:
        """
        JSON-ready status for the operational endpoint.

        Adds per-status counts and the sale/rental split to status().
        """
        status = self.status()
        snapshot = self._snapshot
        listings = list(snapshot.by_locale[DEFAULT_LOCALE].values()) if snapshot else []

        rentals = sum(1 for p in listings if is_rental(p))
        status.counts = {
            "by_status": count_by_status(listings),
            "sale": len(listings) - rentals,
            "rental": rentals,
            "warnings": snapshot.warnings_count if snapshot else 0,
        }
        return status.to_dict()

    # ========== AUTO-SYNC ==========

    def start_auto_sync(self) -> None:
        """Start periodic background re-population every sync_interval seconds."""
        if self._auto_sync_task is not None and not self._auto_sync_task.done():
            logger.debug("Auto-sync already running")
            return
        logger.info(f"Starting auto-sync every {self.sync_interval:.0f}s")
        self._auto_sync_task = asyncio.create_task(self._auto_sync_loop())

    async def stop_auto_sync(self) -> None:
        task = self._auto_sync_task
        self._auto_sync_task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Auto-sync stopped")

    async def _auto_sync_loop(self) -> None:
        while True:
            await asyncio.sleep(self.sync_interval)
            try:
                result = await self._join_population()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Auto-sync iteration failed: {e}", exc_info=True)
                continue
            if not result.success:
                logger.warning(f"Auto-sync failed: {result.error}")

    async def close(self) -> None:
        """Stop background sync, cancel a running population and close the source."""
        await self.stop_auto_sync()

        task = self._inflight
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        await self.source.close()

    # ========== POPULATION ==========

    async def _join_population(self) -> SyncResult:
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self._populate())
        # Shielded so a cancelled reader does not cancel the shared population
        return await asyncio.shield(self._inflight)

    async def _populate(self) -> SyncResult:
        started = self._clock()
        self._last_attempt_time = datetime.now()
        logger.info(f"Populating listings cache from {self.source.get_source_name()}")

        try:
            try:
                raw_listings = await asyncio.wait_for(
                    self.source.fetch_listings(), timeout=self.sync_timeout
                )
            except asyncio.TimeoutError:
                return self._record_failure(
                    started, f"Fetch timed out after {self.sync_timeout:.0f}s"
                )
            except SourceFetchError as e:
                return self._record_failure(started, str(e))
            except Exception as e:
                logger.error(f"Unexpected error fetching listings: {e}", exc_info=True)
                return self._record_failure(started, f"{type(e).__name__}: {e}")

            snapshot = self._build_snapshot(raw_listings)
            self._snapshot = snapshot

            duration_ms = int((self._clock() - started) * 1000)
            self._last_success = self._clock()
            self._last_sync_time = snapshot.created_at
            self._last_sync_duration_ms = duration_ms
            self._last_error = None

            logger.info(
                f"Listings cache populated: {snapshot.listings_count} listings "
                f"in {duration_ms}ms ({snapshot.warnings_count} warnings)"
            )
            return SyncResult(
                success=True,
                listings_count=snapshot.listings_count,
                duration_ms=duration_ms,
            )
        finally:
            self._inflight = None

    def _record_failure(self, started: float, error: str) -> SyncResult:
        duration_ms = int((self._clock() - started) * 1000)
        self._last_failure = self._clock()
        self._last_error = error
        self._last_sync_duration_ms = duration_ms

        kept = self._snapshot.listings_count if self._snapshot else 0
        logger.error(f"Listings sync failed: {error} (keeping {kept} cached listings)")
        return SyncResult(
            success=False,
            listings_count=kept,
            duration_ms=duration_ms,
            error=error,
        )

    def _build_snapshot(self, raw_listings: List[Dict[str, Any]]) -> CacheSnapshot:
        """Map every record for every locale and index by unique slug."""
        by_locale: Dict[str, Dict[str, Property]] = {locale: {} for locale in LOCALES}
        warnings_count = 0
        listings_count = 0
        qualified: Dict[str, str] = {}

        for index, raw in enumerate(raw_listings):
            if not isinstance(raw, dict):
                logger.warning(f"Skipping listing #{index}: not an object")
                continue

            try:
                mapped: Dict[str, Property] = {}
                for locale in LOCALES:
                    prop, warnings = self.mapper.map_with_warnings(raw, locale)
                    mapped[locale] = prop
                    if locale == DEFAULT_LOCALE:
                        warnings_count += len(warnings)
            except Exception as e:
                logger.error(f"Failed to map listing #{index}: {e}", exc_info=True)
                continue

            primary = mapped[DEFAULT_LOCALE]
            slug = unique_slug(
                primary.slug,
                by_locale[DEFAULT_LOCALE].keys(),
                postal_code=primary.postal_code,
                city=lpick(primary.city, DEFAULT_LOCALE),
                listing_id=primary.id,
            )
            for locale, prop in mapped.items():
                if prop.slug != slug:
                    prop = replace(prop, slug=slug)
                by_locale[locale][slug] = prop
            listings_count += 1

            # Postal-qualified form stays resolvable even when not needed now
            qualified.setdefault(qualified_slug(primary.slug, primary.postal_code), slug)

        dangling = [a for a, c in self.aliases.items() if c not in by_locale[DEFAULT_LOCALE]]
        if dangling:
            logger.warning(f"{len(dangling)} slug aliases point to unknown listings: {dangling[:5]}")

        index = by_locale[DEFAULT_LOCALE]
        slug_fallbacks = {q: slug for q, slug in qualified.items() if q not in index}

        return CacheSnapshot.build(
            by_locale=by_locale,
            listings_count=listings_count,
            warnings_count=warnings_count,
            slug_fallbacks=slug_fallbacks,
        )

    def _in_retry_backoff(self) -> bool:
        if self._last_failure is None:
            return False
        if self._last_success is not None and self._last_success > self._last_failure:
            return False
        return self._clock() - self._last_failure < self.retry_after

    @staticmethod
    def _check_locale(locale: str) -> None:
        if locale not in LOCALES:
            raise ValueError(f"Unsupported locale: {locale}")


def create_cache(config: Dict[str, Any]) -> ListingsCache:
    """
    Build a ListingsCache from the configuration dictionary.

    Args:
        config: Full configuration from config.json

    Returns:
        Cache wired to the configured source and alias table
    """
    cache_config = config.get("cache", {})
    return ListingsCache(
        source=get_source(config),
        aliases=load_slug_aliases(config.get("aliases_file")),
        stale_after=float(cache_config.get("stale_after", DEFAULT_STALE_AFTER)),
        sync_interval=float(cache_config.get("sync_interval", DEFAULT_SYNC_INTERVAL)),
        sync_timeout=float(cache_config.get("sync_timeout", DEFAULT_SYNC_TIMEOUT)),
        retry_after=float(cache_config.get("retry_after", DEFAULT_RETRY_AFTER)),
    )
