"""
Feed API endpoints.

Serves a user's blog as paginated original posts or reblogs, and single
posts by author/permlink.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from ...domain.common.deadline import Deadline
from ...domain.common.errors import HiveBlogError
from ...domain.feed.models import PageRequest
from ...schemas.common import ErrorResponse
from ...schemas.feed import SinglePostResponse, UserPostsResponse
from ...use_cases.feed.get_single_post import GetSinglePostQuery, GetSinglePostUseCase
from ...use_cases.feed.get_user_posts import GetUserPostsUseCase
from ...wiring.bootstrap import (
    get_get_single_post_use_case,
    get_get_user_posts_use_case,
    get_request_deadline,
)
from .errors import domain_error_response, error_response

logger = logging.getLogger(__name__)
router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get(
    "/get-user-posts",
    response_model=UserPostsResponse,
    responses=_ERROR_RESPONSES,
)
async def get_user_posts(
    username: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    start_author: Optional[str] = Query(None),
    start_permlink: Optional[str] = Query(None),
    content_type: Optional[str] = Query(None, alias="contentType"),
    use_case: GetUserPostsUseCase = Depends(get_get_user_posts_use_case),
    deadline: Deadline = Depends(get_request_deadline),
):
    """
    Get one page of a user's original posts or reblogs.

    Pass ``nextStartAuthor``/``nextStartPermlink`` from the previous page as
    ``start_author``/``start_permlink`` to continue.
    """
    try:
        request = PageRequest.from_query_params(
            username=username,
            limit=limit,
            start_author=start_author,
            start_permlink=start_permlink,
            content_type=content_type,
        )
        result = await use_case.execute(request, deadline)
    except HiveBlogError as e:
        return domain_error_response(e)
    except Exception as e:
        logger.error(f"Error getting user posts: {e}", exc_info=True)
        return error_response(500, "Internal server error", str(e))

    return Response(
        content=result.body,
        media_type="application/json",
        headers={"X-Cache": "HIT" if result.cache_hit else "MISS"},
    )


@router.get(
    "/get-single-post",
    response_model=SinglePostResponse,
    responses={**_ERROR_RESPONSES, 404: {"model": ErrorResponse}},
)
async def get_single_post(
    author: Optional[str] = Query(None),
    permlink: Optional[str] = Query(None),
    use_case: GetSinglePostUseCase = Depends(get_get_single_post_use_case),
    deadline: Deadline = Depends(get_request_deadline),
):
    """Get a single post with its full body."""
    try:
        item = await use_case.execute(GetSinglePostQuery(author=author, permlink=permlink), deadline)
    except HiveBlogError as e:
        return domain_error_response(e)
    except Exception as e:
        logger.error(f"Error getting single post: {e}", exc_info=True)
        return error_response(500, "Internal server error", str(e))

    return SinglePostResponse(
        id=item.id,
        author=item.author,
        permlink=item.permlink,
        title=item.title,
        body=item.body,
        created=item.created,
        url=item.url,
    )
