"""
Verify Security Question Use Case

Fallback recovery path that checks the account's security answer.
"""

import logging

from libs.result import Error, Result, Return
from src.app.services.password_hasher import IPasswordHasher
from src.app.services.unit_of_work import UnitOfWork
from .dtos import VerifySecurityQuestionResponse

logger = logging.getLogger(__name__)

INVALID_ANSWER_MESSAGE = "Invalid credentials or security answer"


class VerifySecurityQuestionUseCase:
    """
    Use case for verifying a security answer.

    Business Rules:
    - Identifier may be the email or the username
    - Answers compare case-insensitively through the password hasher
    - Unknown account, no question configured and wrong answer all report
      the same error; only the log tells them apart
    - No attempt limiting on this path
    """

    def __init__(self, uow: UnitOfWork, hasher: IPasswordHasher):
        self.uow = uow
        self.hasher = hasher

    async def execute(self, identifier: str, answer: str) -> Result[VerifySecurityQuestionResponse]:
        """
        Execute verify security question use case.

        Errors:
            - INVALID_SECURITY_ANSWER: No such account, no question set or wrong answer
        """
        async with self.uow:
            user = await self.uow.users.get_by_username_or_email(identifier)

            if user is None:
                logger.info("Security question check for unknown account")
                return Return.err(Error("INVALID_SECURITY_ANSWER", INVALID_ANSWER_MESSAGE))

            if not user.security_answer_hash:
                logger.info("Security question check for user %s without a question set", user.id)
                return Return.err(Error("INVALID_SECURITY_ANSWER", INVALID_ANSWER_MESSAGE))

            if not self.hasher.verify(answer.lower(), user.security_answer_hash):
                logger.info("Wrong security answer for user %s", user.id)
                return Return.err(Error("INVALID_SECURITY_ANSWER", INVALID_ANSWER_MESSAGE))

            return Return.ok(
                VerifySecurityQuestionResponse(
                    status="verified",
                    message="Security question verified successfully",
                    user_id=user.id,
                    email=user.email,
                    username=user.username,
                    security_question=user.security_question or "",
                )
            )
