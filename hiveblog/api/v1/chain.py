"""
Chain-state API endpoints.
"""
import logging

from fastapi import APIRouter, Depends

from ...domain.common.deadline import Deadline
from ...domain.common.errors import HiveBlogError
from ...schemas.chain import HiveInfoResponse
from ...schemas.common import ErrorResponse, MessageResponse
from ...use_cases.chain.get_chain_info import GetChainInfoUseCase
from ...wiring.bootstrap import get_get_chain_info_use_case, get_request_deadline
from .errors import domain_error_response, error_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    "/get-hive-info",
    response_model=HiveInfoResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_hive_info(
    use_case: GetChainInfoUseCase = Depends(get_get_chain_info_use_case),
    deadline: Deadline = Depends(get_request_deadline),
):
    """Get the latest block number and the node that reported it."""
    try:
        head = await use_case.execute(deadline)
    except HiveBlogError as e:
        return domain_error_response(e)
    except Exception as e:
        logger.error(f"Error getting chain info: {e}", exc_info=True)
        return error_response(500, "Internal server error", str(e))

    return HiveInfoResponse(
        message="Hive blockchain information retrieved successfully.",
        headBlockNumber=head.head_block_number,
        nodeUsed=head.node,
    )


@router.get("/hello", response_model=MessageResponse)
async def hello():
    """Smoke-test endpoint."""
    return MessageResponse(message="Hello from the Hive blog API!")
