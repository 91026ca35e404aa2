from typing import Optional, Union

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel, Field

from src.api.error import raise_for_error
from src.api.utils.identifiers import parse_identifier_or_raise
from src.app.services.identity_synchronizer import IdentitySynchronizer
from src.app.services.notification_dispatcher import INotificationDispatcher
from src.app.services.otp_manager import OtpManager
from src.app.services.password_hasher import PasswordHasher
from src.app.services.reset_token_manager import ResetTokenManager
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.password_reset import (
    CompletePasswordResetCommand,
    CompletePasswordResetResponse,
    CompletePasswordResetUseCase,
    RequestPasswordResetResponse,
    RequestPasswordResetUseCase,
    VerifyResetCodeResponse,
    VerifyResetCodeUseCase,
)
from config import ApplicationConfig
from src.depends import (
    get_identity_synchronizer,
    get_notification_dispatcher,
    get_otp_manager,
    get_password_hasher,
    get_reset_token_manager,
    get_unit_of_work,
)

router = APIRouter(prefix="/auth/password-reset", tags=["Password Reset"])


class RequestPasswordResetRequest(BaseModel):
    """
    Request password reset HTTP request payload

    Identifier may be an email address or a numeric user id.
    """

    identifier: Union[int, str] = Field(..., description="Email address or numeric user id")


@router.post("/request", status_code=status.HTTP_200_OK, response_model=RequestPasswordResetResponse)
async def request_password_reset(
    request: RequestPasswordResetRequest,
    background_tasks: BackgroundTasks,
    uow: UnitOfWork = Depends(get_unit_of_work),
    otp_manager: OtpManager = Depends(get_otp_manager),
    dispatcher: INotificationDispatcher = Depends(get_notification_dispatcher),
):
    """
    Request Password Reset

    Issues a one-time code and sends it to the account's email address.

    Security:
        - No identifier enumeration (same response for known/unknown identifiers)
        - Email is sent after the response, so timing is the same as well
        - Rate limiting should be applied at middleware layer

    Returns:
        - 200 OK: Always returns the generic acknowledgment
        - 400 Bad Request: Malformed identifier
    """
    identifier = parse_identifier_or_raise(request.identifier)

    use_case = RequestPasswordResetUseCase(uow, otp_manager, dispatcher)
    result = await use_case.execute(identifier, schedule=background_tasks.add_task)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class VerifyResetCodeRequest(BaseModel):
    """
    Verify reset code HTTP request payload
    """

    identifier: Union[int, str] = Field(..., description="Email address or numeric user id")
    code: str = Field(..., description="Numeric code from the reset email")


@router.post("/verify", status_code=status.HTTP_200_OK, response_model=VerifyResetCodeResponse)
async def verify_reset_code(
    request: VerifyResetCodeRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    otp_manager: OtpManager = Depends(get_otp_manager),
    token_manager: ResetTokenManager = Depends(get_reset_token_manager),
):
    """
    Verify Reset Code

    Exchanges a valid code for a short-lived reset token. The code is
    single-use and the token is required by the complete step.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR or MISMATCH
        - 410 Gone: EXPIRED
        - 429 Too Many Requests: TOO_MANY_ATTEMPTS
    """
    identifier = parse_identifier_or_raise(request.identifier)

    use_case = VerifyResetCodeUseCase(uow, otp_manager, token_manager)
    result = await use_case.execute(identifier, request.code)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class CompletePasswordResetRequest(BaseModel):
    """
    Complete password reset HTTP request payload

    Password policy is enforced by the use case so violations surface as
    WEAK_PASSWORD rather than a schema error.
    """

    identifier: Union[int, str] = Field(..., description="Email address or numeric user id")
    token: str = Field(..., description="Reset token from the verify step")
    new_password: str = Field(..., description="New password")
    confirm_password: Optional[str] = Field(None, description="Must equal new_password if given")


@router.post(
    "/complete", status_code=status.HTTP_200_OK, response_model=CompletePasswordResetResponse
)
async def complete_password_reset(
    request: CompletePasswordResetRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    token_manager: ResetTokenManager = Depends(get_reset_token_manager),
    hasher: PasswordHasher = Depends(get_password_hasher),
    synchronizer: IdentitySynchronizer = Depends(get_identity_synchronizer),
):
    """
    Complete Password Reset

    Consumes the reset token and stores the new password. When the account is
    linked to the secondary identity store the change is mirrored there; a
    failed mirror is reported in `warnings` and does not fail the request.

    Raises:
        - 400 Bad Request: INVALID, WEAK_PASSWORD or VALIDATION_ERROR
        - 500 Internal Server Error: HASHING_FAILURE
    """
    identifier = parse_identifier_or_raise(request.identifier)

    command = CompletePasswordResetCommand(
        identifier=identifier,
        token=request.token,
        new_password=request.new_password,
        confirm_password=request.confirm_password,
    )

    use_case = CompletePasswordResetUseCase(
        uow,
        token_manager,
        hasher,
        synchronizer,
        min_password_length=ApplicationConfig.PASSWORD_MIN_LENGTH,
        max_password_length=ApplicationConfig.PASSWORD_MAX_LENGTH,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
