"""
Recovery Use Cases

Password reset, username recovery and security question verification.
"""

from .request_recovery_use_case import RequestRecoveryUseCase
from .verify_recovery_code_use_case import VerifyRecoveryCodeUseCase
from .consume_reset_token_use_case import ConsumeResetTokenUseCase
from .disclose_username_use_case import DiscloseUsernameUseCase
from .verify_security_question_use_case import VerifySecurityQuestionUseCase
from .code_matching import match_recovery_code
from .dtos import (
    RequestRecoveryResponse,
    VerifyRecoveryCodeResponse,
    ConsumeResetTokenResponse,
    DiscloseUsernameResponse,
    VerifySecurityQuestionResponse,
)

__all__ = [
    # Use Cases
    "RequestRecoveryUseCase",
    "VerifyRecoveryCodeUseCase",
    "ConsumeResetTokenUseCase",
    "DiscloseUsernameUseCase",
    "VerifySecurityQuestionUseCase",
    "match_recovery_code",
    # DTOs - Responses
    "RequestRecoveryResponse",
    "VerifyRecoveryCodeResponse",
    "ConsumeResetTokenResponse",
    "DiscloseUsernameResponse",
    "VerifySecurityQuestionResponse",
]
