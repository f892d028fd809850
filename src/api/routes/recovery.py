from datetime import timedelta

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.api.error import raise_for_error
from src.app.services.notifier import INotifier
from src.app.services.password_hasher import MAX_SECRET_BYTES, IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.recovery import (
    RequestRecoveryUseCase,
    VerifyRecoveryCodeUseCase,
    ConsumeResetTokenUseCase,
    DiscloseUsernameUseCase,
    VerifySecurityQuestionUseCase,
    RequestRecoveryResponse,
    VerifyRecoveryCodeResponse,
    ConsumeResetTokenResponse,
    DiscloseUsernameResponse,
    VerifySecurityQuestionResponse,
)
from src.depends import (
    get_notifier,
    get_password_hasher,
    get_recovery_window,
    get_unit_of_work,
)
from src.domain.entities import RecoveryKind

router = APIRouter(prefix="/auth", tags=["Recovery"])

VERIFICATION_CODE_PATTERN = r"^\d{6}$"


CODE_ERROR_STATUS = {
    "INVALID_CODE": status.HTTP_400_BAD_REQUEST,
    "TOO_MANY_ATTEMPTS": status.HTTP_429_TOO_MANY_REQUESTS,
}

REQUEST_ERROR_STATUS = {
    "DELIVERY_FAILED": status.HTTP_503_SERVICE_UNAVAILABLE,
}


class RecoveryEmailRequest(BaseModel):
    """
    Recovery request HTTP payload

    Shared by password reset and username recovery requests.
    """

    email: EmailStr = Field(..., description="Email address of the account")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class VerifyCodeRequest(BaseModel):
    """
    Verify code HTTP payload

    The code must be exactly 6 digits.
    """

    email: EmailStr = Field(..., description="Email address the code was sent to")
    verification_code: str = Field(
        ..., pattern=VERIFICATION_CODE_PATTERN, description="6-digit verification code"
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


@router.post(
    "/request-password-reset",
    status_code=status.HTTP_200_OK,
    response_model=RequestRecoveryResponse,
)
async def request_password_reset(
    request: RecoveryEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
    recovery_window: timedelta = Depends(get_recovery_window),
):
    """
    Request Password Reset

    Creates a password reset record and sends its code by email.
    Older pending password resets of the account stop working.

    Security:
        - No email enumeration (same response for valid/invalid emails)

    Raises:
        - 503 Service Unavailable: Code could not be delivered
        - 500 Internal Server Error: Server error
    """
    use_case = RequestRecoveryUseCase(uow, notifier, recovery_window=recovery_window)
    result = await use_case.execute(RecoveryKind.password, request.email)

    if result.is_err():
        raise_for_error(result.error, REQUEST_ERROR_STATUS)

    return result.value


@router.post(
    "/verify-reset-code",
    status_code=status.HTTP_200_OK,
    response_model=VerifyRecoveryCodeResponse,
)
async def verify_reset_code(
    request: VerifyCodeRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Verify Password Reset Code

    Exchanges the emailed code for a reset token.

    Raises:
        - 400 Bad Request: Invalid or expired code
        - 429 Too Many Requests: Record locked out after 5 failed attempts
        - 500 Internal Server Error: Server error
    """
    use_case = VerifyRecoveryCodeUseCase(uow)
    result = await use_case.execute(
        request.email, RecoveryKind.password, request.verification_code
    )

    if result.is_err():
        raise_for_error(result.error, CODE_ERROR_STATUS)

    return result.value


class ResetPasswordRequest(BaseModel):
    """
    Reset password HTTP payload

    Validates incoming password reset submission.
    """

    reset_token: str = Field(..., min_length=1, description="Token from code verification")
    new_password: str = Field(..., min_length=8, description="New password (min 8 chars)")

    @field_validator("new_password")
    @classmethod
    def validate_password_size(cls, v: str) -> str:
        if len(v.encode()) > MAX_SECRET_BYTES:
            raise ValueError(f"Password must be at most {MAX_SECRET_BYTES} bytes")
        return v


@router.post(
    "/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=ConsumeResetTokenResponse,
)
async def reset_password(
    request: ResetPasswordRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Reset Password

    Consumes the reset token and stores the new password hash.
    Each token works once.

    Raises:
        - 400 Bad Request: Invalid, used or expired token
        - 500 Internal Server Error: Server error
    """
    use_case = ConsumeResetTokenUseCase(uow, hasher)
    result = await use_case.execute(request.reset_token, request.new_password)

    if result.is_err():
        raise_for_error(result.error, {"INVALID_TOKEN": status.HTTP_400_BAD_REQUEST})

    return result.value


@router.post(
    "/request-username-recovery",
    status_code=status.HTTP_200_OK,
    response_model=RequestRecoveryResponse,
)
async def request_username_recovery(
    request: RecoveryEmailRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    notifier: INotifier = Depends(get_notifier),
    recovery_window: timedelta = Depends(get_recovery_window),
):
    """
    Request Username Recovery

    Creates a username recovery record and sends its code by email.

    Security:
        - No email enumeration (same response for valid/invalid emails)

    Raises:
        - 503 Service Unavailable: Code could not be delivered
        - 500 Internal Server Error: Server error
    """
    use_case = RequestRecoveryUseCase(uow, notifier, recovery_window=recovery_window)
    result = await use_case.execute(RecoveryKind.username, request.email)

    if result.is_err():
        raise_for_error(result.error, REQUEST_ERROR_STATUS)

    return result.value


@router.post(
    "/verify-username-recovery",
    status_code=status.HTTP_200_OK,
    response_model=DiscloseUsernameResponse,
)
async def verify_username_recovery(
    request: VerifyCodeRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Verify Username Recovery Code

    Returns the username and retires the recovery record.

    Raises:
        - 400 Bad Request: Invalid or expired code
        - 429 Too Many Requests: Record locked out after 5 failed attempts
        - 500 Internal Server Error: Server error
    """
    use_case = DiscloseUsernameUseCase(uow)
    result = await use_case.execute(request.email, request.verification_code)

    if result.is_err():
        raise_for_error(result.error, CODE_ERROR_STATUS)

    return result.value


class SecurityQuestionRequest(BaseModel):
    """
    Security question HTTP payload

    Surrounding whitespace is stripped before validation.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    email_or_username: str = Field(..., min_length=1, description="Email or username")
    security_answer: str = Field(..., min_length=1, description="Answer to the security question")


@router.post(
    "/verify-security-question",
    status_code=status.HTTP_200_OK,
    response_model=VerifySecurityQuestionResponse,
)
async def verify_security_question(
    request: SecurityQuestionRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Verify Security Question

    Alternative recovery path using the account's security answer.
    The answer is compared case-insensitively.

    Raises:
        - 400 Bad Request: Unknown account, no question set or wrong answer
        - 500 Internal Server Error: Server error
    """
    use_case = VerifySecurityQuestionUseCase(uow, hasher)
    result = await use_case.execute(request.email_or_username, request.security_answer)

    if result.is_err():
        raise_for_error(result.error, {"INVALID_SECURITY_ANSWER": status.HTTP_400_BAD_REQUEST})

    return result.value
