"""Cache key and TTL rules for assembled feed pages."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from .models import FeedItem, PageRequest

# Stands in for an absent cursor component so keys stay unambiguous.
_ABSENT = "-"


def cache_key(request: PageRequest, prefix: str = "user-posts") -> str:
    """Deterministic key built from every PageRequest field."""
    cursor = request.cursor
    return ":".join(
        [
            prefix,
            request.content_type.value,
            request.username,
            str(request.limit),
            cursor.author if cursor else _ABSENT,
            cursor.permlink if cursor else _ABSENT,
        ]
    )


@dataclass(frozen=True)
class CacheTtlPolicy:
    """Long TTL for pages made only of final content, short otherwise.

    Hive content is immutable once it is older than the payout window; a
    page containing anything newer (or nothing at all) can still change.
    """

    long_ttl_seconds: int = 30 * 24 * 3600
    short_ttl_seconds: int = 5 * 60
    final_age: timedelta = timedelta(days=7)

    def is_final(self, item: FeedItem, now: datetime) -> bool:
        created_at = item.created_at
        if created_at is None:
            return False
        return now - created_at > self.final_age

    def ttl_for(self, items: Sequence[FeedItem], now: datetime) -> int:
        if items and all(self.is_final(item, now) for item in items):
            return self.long_ttl_seconds
        return self.short_ttl_seconds
