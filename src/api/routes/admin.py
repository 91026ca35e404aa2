"""
Admin API Routes - Role Management and Maintenance

These endpoints are for internal callers (admin back office, schedulers).
Authentication is via Admin API Key.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.api.utils.admin_auth import verify_admin_api_key
from src.api.utils.identifiers import parse_identifier_or_raise
from src.app.services.identity_synchronizer import IdentitySynchronizer
from src.app.services.otp_manager import OtpManager
from src.app.services.reset_token_manager import ResetTokenManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.identity import (
    ChangeUserRoleResponse,
    ChangeUserRoleUseCase,
    SyncRoleResponse,
    SyncRoleUseCase,
)
from src.app.use_cases.maintenance import (
    SweepExpiredRecordsResponse,
    SweepExpiredRecordsUseCase,
)
from src.depends import (
    get_identity_synchronizer,
    get_otp_manager,
    get_reset_token_manager,
    get_unit_of_work,
)

router = APIRouter(prefix="/admin", tags=["Admin"])


class ChangeUserRoleRequest(BaseModel):
    role: str = Field(..., description="New role: user or admin")


@router.patch(
    "/users/{identifier}/role",
    status_code=status.HTTP_200_OK,
    response_model=ChangeUserRoleResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def change_user_role(
    identifier: str,
    request: ChangeUserRoleRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    synchronizer: IdentitySynchronizer = Depends(get_identity_synchronizer),
):
    """
    Change User Role

    Updates the role in the primary store, then mirrors it to the secondary
    identity store when the user is linked there.

    Requires: X-Admin-API-Key header

    Raises:
        - 400 Bad Request: INVALID_ROLE or malformed identifier
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: NOT_FOUND
    """
    user_identifier = parse_identifier_or_raise(identifier)

    use_case = ChangeUserRoleUseCase(uow, synchronizer)
    result = await use_case.execute(user_identifier, request.role)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class SyncRoleRequest(BaseModel):
    secondary_store_id: str = Field(..., description="Account id in the secondary identity store")
    role: str = Field(..., description="Role to mirror: user or admin")


@router.post(
    "/identity/sync-role",
    status_code=status.HTTP_200_OK,
    response_model=SyncRoleResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def sync_role(
    request: SyncRoleRequest,
    synchronizer: IdentitySynchronizer = Depends(get_identity_synchronizer),
):
    """
    Sync Role

    Mirrors a role to the secondary identity store for a caller that already
    updated the primary record. Partial and failed syncs are reported in
    `warnings` with a 200 response.

    Requires: X-Admin-API-Key header
    """
    use_case = SyncRoleUseCase(synchronizer)
    result = await use_case.execute(request.secondary_store_id, request.role)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/maintenance/sweep",
    status_code=status.HTTP_200_OK,
    response_model=SweepExpiredRecordsResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def sweep_expired_records(
    uow: UnitOfWork = Depends(get_unit_of_work),
    otp_manager: OtpManager = Depends(get_otp_manager),
    token_manager: ResetTokenManager = Depends(get_reset_token_manager),
):
    """
    Sweep Expired Records

    Deletes expired one-time codes and reset tokens.

    Requires: X-Admin-API-Key header
    """
    use_case = SweepExpiredRecordsUseCase(uow, otp_manager, token_manager)
    result = await use_case.execute()

    if result.is_err():
        raise_for_error(result.error)

    return result.value
