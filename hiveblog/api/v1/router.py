"""Aggregate v1 router."""
from fastapi import APIRouter

from . import chain, posts

router = APIRouter()
router.include_router(posts.router, tags=["posts"])
router.include_router(chain.router, tags=["chain"])
