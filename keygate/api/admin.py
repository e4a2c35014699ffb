"""
Admin key management endpoints, gated by the x-admin-token header
"""
from fastapi import APIRouter, Depends

from keygate.core.errors import UpstreamError
from keygate.models import BulkResponse, KeyListing
from keygate.services.admin import KeyAdminService

from .deps import get_admin_service, require_admin_token

router = APIRouter(dependencies=[Depends(require_admin_token)])


def _dump(keys) -> list:
    return [key.model_dump(exclude_unset=True) for key in keys]


@router.get("/keys", response_model=KeyListing)
async def list_keys(service: KeyAdminService = Depends(get_admin_service)):
    """Every provisioned key, disabled ones included"""
    try:
        keys = await service.list_keys()
    except UpstreamError as e:
        raise e.during("Failed to list keys") from e
    return {"data": _dump(keys)}


@router.post("/keys/delete-all", response_model=BulkResponse, response_model_exclude_none=True)
async def delete_all_keys(service: KeyAdminService = Depends(get_admin_service)):
    try:
        result = await service.delete_all()
    except UpstreamError as e:
        raise e.during("Failed to delete keys") from e

    return BulkResponse(
        message=f"Deleted {result.succeeded} of {result.attempted} keys ({result.failed} failed)",
        summary=result
    )


@router.post("/keys/disable-all", response_model=BulkResponse)
async def disable_all_keys(service: KeyAdminService = Depends(get_admin_service)):
    """
    Disable every enabled key, then return the fresh listing
    """
    try:
        result = await service.disable_all()
        keys = await service.list_keys()
    except UpstreamError as e:
        raise e.during("Failed to disable keys") from e

    return BulkResponse(
        message=f"Disabled {result.succeeded} of {result.attempted} keys ({result.failed} failed)",
        summary=result,
        data=_dump(keys)
    )
