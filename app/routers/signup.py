# =============================================================================
# app/routers/signup.py - Event Signup Endpoint
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from app.dependencies import ClientIpDep, cors, get_signup_service
from core.models.signup import SignupCreate, SignupResponse
from core.services.signup_service import SignupService

router = APIRouter()


@router.post(
    "/signup",
    response_model=SignupResponse,
    dependencies=[Depends(cors("POST"))],
)
async def signup(
    payload: SignupCreate,
    response: Response,
    client_ip: ClientIpDep,
    service: Annotated[SignupService, Depends(get_signup_service)],
):
    """
    Register for the event.

    Returns 409 when the email address is already registered and 429 when
    the client exceeded its signup quota.
    """
    result, quota = service.register(payload, identity=client_ip)

    if quota is not None:
        response.headers.update(quota.headers())

    return result
