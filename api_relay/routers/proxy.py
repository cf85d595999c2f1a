"""
Request relay API routes.

Provides the endpoint that executes a described HTTP request on the
caller's behalf. Recording the exchange in history is left to the caller.
"""

from fastapi import APIRouter

from ..exceptions import ErrorResponse
from ..schemas.proxy import ProxyRequest, ProxyResponse
from ..services.relay import execute


router = APIRouter(prefix="/proxy", tags=["proxy"])


@router.post(
    "/send",
    response_model=ProxyResponse,
    responses={
        200: {"model": ProxyResponse, "description": "Upstream response or relay failure"},
        422: {"model": ErrorResponse, "description": "Invalid request description"},
    }
)
async def send_request(request: ProxyRequest):
    """
    Relay an HTTP request and return the response envelope.

    Upstream error statuses and transport failures are both reported in
    the envelope body with a 200 response; only an invalid request
    description is rejected.

    Args:
        request: The request description to execute

    Returns:
        ProxyResponse with status, headers, body, timing and size
    """
    return await execute(request)
