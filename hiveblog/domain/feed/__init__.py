"""Feed domain: classification, pagination and caching rules for a user's blog."""

from .models import *  # noqa: F401,F403
from .classifier import classify, drop_cursor_echo, is_original_post, is_reblog  # noqa: F401
from .pagination import MAX_RAW_PAGE_SIZE, assemble, build_page, next_cursor  # noqa: F401
from .cache_policy import CacheTtlPolicy, cache_key  # noqa: F401
from .ports import FeedSource, PageCache  # noqa: F401
