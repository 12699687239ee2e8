"""Domain models for the user feed.

Pure value objects describing blog feed entries, cursors and pages,
independent of the RPC transport and the cache store.  All dataclasses
use frozen=True for immutability.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

from ..common.errors import InvalidRequestError

# A raw blog entry exactly as condenser_api returns it.
RawItem = Mapping[str, Any]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ContentType(str, Enum):
    """Client-selected filter applied after raw retrieval."""

    POSTS = "posts"
    REBLOGS = "reblogs"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Cursor:
    """Position in the upstream reverse-chronological blog feed."""

    author: str
    permlink: str

    def matches(self, raw: RawItem) -> bool:
        return raw.get("author") == self.author and raw.get("permlink") == self.permlink

    @classmethod
    def of(cls, raw: RawItem) -> "Cursor":
        return cls(author=raw["author"], permlink=raw["permlink"])


def parse_hive_timestamp(value: Any) -> datetime | None:
    """Parse Hive's ``2024-05-01T12:34:56`` timestamps (implicitly UTC)."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class FeedItem:
    """A blog entry shown to the client.  Identity is ``(author, permlink)``."""

    author: str
    permlink: str
    title: str = ""
    body: str = ""
    created: str = ""
    reblogged_by: tuple[str, ...] | None = None
    id: int | None = None
    url: str | None = None

    @property
    def created_at(self) -> datetime | None:
        return parse_hive_timestamp(self.created)

    @classmethod
    def from_raw(cls, raw: RawItem, blog_base_url: str | None = None) -> "FeedItem":
        author = raw["author"]
        permlink = raw["permlink"]
        marker = reblog_marker(raw)
        url = f"{blog_base_url.rstrip('/')}/@{author}/{permlink}" if blog_base_url else None
        return cls(
            author=author,
            permlink=permlink,
            title=raw.get("title") or "",
            body=raw.get("body") or "",
            created=raw.get("created") or "",
            reblogged_by=marker or None,
            id=raw.get("id"),
            url=url,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "author": self.author,
            "permlink": self.permlink,
            "title": self.title,
            "body": self.body,
            "created": self.created,
            "url": self.url,
            "reblogged_by": list(self.reblogged_by) if self.reblogged_by else [],
        }


def reblog_marker(raw: RawItem) -> tuple[str, ...]:
    """Normalise the ``reblogged_by`` field to a tuple of usernames.

    Upstream data is not always well-formed: a bare string is treated as a
    one-name marker, anything else non-list as no marker at all.
    """
    value = raw.get("reblogged_by")
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, (list, tuple)):
        return tuple(name for name in value if isinstance(name, str) and name)
    return ()


@dataclass(frozen=True)
class RawPage:
    """One upstream batch, before classification."""

    items: tuple[RawItem, ...]
    upstream_has_more: bool


@dataclass(frozen=True)
class PageRequest:
    """What the client asked for."""

    username: str
    content_type: ContentType
    limit: int
    cursor: Cursor | None = None

    def __post_init__(self) -> None:
        if not self.username:
            raise InvalidRequestError("username must not be empty")
        if self.limit <= 0:
            raise InvalidRequestError(f"limit must be a positive integer, got {self.limit}")

    @classmethod
    def from_query_params(
        cls,
        *,
        username: str | None,
        limit: str | None,
        start_author: str | None = None,
        start_permlink: str | None = None,
        content_type: str | None = None,
    ) -> "PageRequest":
        """Validate raw query-string values.

        Empty strings count as absent; the front-end sends
        ``start_author=&start_permlink=`` on its first load.
        """
        username = (username or "").strip().lstrip("@").lower()
        if not username or not limit:
            raise InvalidRequestError("Missing required parameters 'username' and 'limit'")

        try:
            parsed_limit = int(limit)
        except ValueError:
            raise InvalidRequestError(f"limit must be a positive integer, got {limit!r}") from None

        try:
            parsed_type = ContentType((content_type or ContentType.POSTS.value).strip().lower())
        except ValueError:
            allowed = ", ".join(ct.value for ct in ContentType)
            raise InvalidRequestError(
                f"contentType must be one of: {allowed}; got {content_type!r}"
            ) from None

        start_author = (start_author or "").strip()
        start_permlink = (start_permlink or "").strip()
        if bool(start_author) != bool(start_permlink):
            raise InvalidRequestError(
                "start_author and start_permlink must be given together"
            )
        cursor = Cursor(start_author, start_permlink) if start_author else None

        return cls(
            username=username,
            content_type=parsed_type,
            limit=parsed_limit,
            cursor=cursor,
        )


@dataclass(frozen=True)
class PageResponse:
    """Client-facing page plus pagination metadata."""

    items: tuple[FeedItem, ...]
    next_cursor: Cursor | None
    has_more: bool

    def __post_init__(self) -> None:
        if not self.has_more and self.next_cursor is not None:
            raise ValueError("a page without more items cannot carry a next cursor")
        if self.has_more and self.next_cursor is None:
            raise ValueError("a page with more items needs a next cursor")

    def to_payload(self) -> dict[str, Any]:
        return {
            "posts": [item.to_payload() for item in self.items],
            "nextStartAuthor": self.next_cursor.author if self.next_cursor else None,
            "nextStartPermlink": self.next_cursor.permlink if self.next_cursor else None,
            "hasMore": self.has_more,
        }


__all__ = [
    "RawItem",
    "ContentType",
    "Cursor",
    "FeedItem",
    "RawPage",
    "PageRequest",
    "PageResponse",
    "parse_hive_timestamp",
    "reblog_marker",
]
