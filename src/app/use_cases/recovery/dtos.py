"""
Recovery Use Case DTOs (Data Transfer Objects)

All Response classes for the recovery domain.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


# ============================================================================
# Response DTOs
# ============================================================================


class RequestRecoveryResponse(BaseModel):
    """
    Response for request recovery use case.

    Same fields whether or not the account exists.
    """

    status: str
    message: str
    expires_at: datetime


class VerifyRecoveryCodeResponse(BaseModel):
    """Response for verify recovery code use case"""

    status: str
    message: str
    reset_token: str


class ConsumeResetTokenResponse(BaseModel):
    """Response for consume reset token use case"""

    status: str
    message: str


class DiscloseUsernameResponse(BaseModel):
    """Response for username disclosure use case"""

    status: str
    message: str
    username: str


class VerifySecurityQuestionResponse(BaseModel):
    """Response for security question verification use case"""

    status: str
    message: str
    user_id: UUID
    email: str
    username: str
    security_question: str
