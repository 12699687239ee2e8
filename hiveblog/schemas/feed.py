"""Pydantic schemas for the feed endpoints."""

from typing import List, Optional

from pydantic import BaseModel


class FeedItemResponse(BaseModel):
    """A post as rendered by the front-end."""

    id: Optional[int] = None
    author: str
    permlink: str
    title: str
    body: str
    created: str
    url: Optional[str] = None
    reblogged_by: List[str] = []


class UserPostsResponse(BaseModel):
    """One page of a user's blog, with the raw-feed cursor for the next page."""

    posts: List[FeedItemResponse]
    nextStartAuthor: Optional[str] = None
    nextStartPermlink: Optional[str] = None
    hasMore: bool


class SinglePostResponse(BaseModel):
    id: Optional[int] = None
    author: str
    permlink: str
    title: str
    body: str
    created: str
    url: Optional[str] = None
