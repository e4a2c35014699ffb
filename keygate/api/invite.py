"""
Public registration endpoints
"""
from typing import Optional

from fastapi import APIRouter, Depends

from keygate.core.errors import UpstreamError
from keygate.models import InviteRequest, InviteResponse, RegistrationStatus
from keygate.services.registration import RegistrationService

from .deps import get_registration_service

router = APIRouter()


@router.get("/registration-status", response_model=RegistrationStatus)
async def registration_status(service: RegistrationService = Depends(get_registration_service)):
    """Whether public registration is open"""
    return await service.status()


@router.post("/invite", response_model=InviteResponse)
async def invite(
    body: Optional[InviteRequest] = None,
    service: RegistrationService = Depends(get_registration_service)
):
    """
    Create an OpenRouter key for an email that has not registered yet
    """
    try:
        return await service.invite(body.email if body else None)
    except UpstreamError as e:
        raise e.during("Failed to create API key") from e
