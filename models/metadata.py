"""Cache snapshot and sync bookkeeping."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .property import Property


@dataclass(frozen=True)
class CacheSnapshot:
    """
    One complete, immutable generation of the listing index.

    by_locale maps locale → slug → Property. Slugs keep source order, so
    iterating a locale index yields listings in the order the source sent them.
    slug_fallbacks maps postal-qualified slugs to the indexed slug of records
    that did not need the qualified form themselves.
    """

    by_locale: Mapping[str, Mapping[str, Property]]
    created_at: datetime
    listings_count: int
    warnings_count: int = 0
    slug_fallbacks: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        by_locale: Dict[str, Dict[str, Property]],
        listings_count: int,
        warnings_count: int = 0,
        created_at: Optional[datetime] = None,
        slug_fallbacks: Optional[Dict[str, str]] = None,
    ) -> "CacheSnapshot":
        frozen = MappingProxyType(
            {locale: MappingProxyType(dict(index)) for locale, index in by_locale.items()}
        )
        return cls(
            by_locale=frozen,
            created_at=created_at or datetime.now(),
            listings_count=listings_count,
            warnings_count=warnings_count,
            slug_fallbacks=MappingProxyType(dict(slug_fallbacks or {})),
        )


@dataclass
class SyncResult:
    """Outcome of one population attempt."""

    success: bool
    listings_count: int
    duration_ms: int
    error: Optional[str] = None


@dataclass
class CacheStatus:
    """Operational view of the cache, served by the status endpoint."""

    listings_count: int
    last_sync_time: Optional[datetime]
    sync_in_progress: bool
    auto_sync_active: bool
    needs_refresh: bool

    # Diagnostics
    last_error: Optional[str] = None
    last_sync_duration_ms: Optional[int] = None
    last_attempt_time: Optional[datetime] = None
    source: Optional[str] = None
    aliases_count: int = 0
    counts: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("last_sync_time", "last_attempt_time"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data
