"""
Recovery message notifiers.

LoggingNotifier is meant for local development: it writes the code to the
application log instead of sending anything. SendGridNotifier delivers the
code by email.
"""

import logging
from datetime import datetime
from fastapi.concurrency import run_in_threadpool
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from src.app.services.notifier import DeliveryResult, INotifier
from src.domain.entities import RecoveryKind

logger = logging.getLogger(__name__)

SUBJECTS = {
    RecoveryKind.password: "Your password reset code",
    RecoveryKind.username: "Your username recovery code",
}


class LoggingNotifier(INotifier):
    """Writes the recovery code to the log instead of delivering it"""

    async def send_recovery_message(
        self,
        address: str,
        code: str,
        kind: RecoveryKind,
        expires_at: datetime,
    ) -> DeliveryResult:
        logger.info(
            "Recovery code for %s (kind %s): %s, expires %s",
            address,
            kind.value,
            code,
            expires_at.isoformat(),
        )
        return DeliveryResult(success=True)


class SendGridNotifier(INotifier):
    """Delivers recovery codes by email via SendGrid."""

    def __init__(self, api_key: str, from_email: str, app_name: str):
        self.api_key = api_key
        self.from_email = from_email
        self.app_name = app_name

    async def send_recovery_message(
        self,
        address: str,
        code: str,
        kind: RecoveryKind,
        expires_at: datetime,
    ) -> DeliveryResult:
        message = Mail(
            from_email=self.from_email,
            to_emails=address,
            subject=f"{self.app_name} - {SUBJECTS[kind]}",
            html_content=self._build_html(kind=kind, code=code, expires_at=expires_at),
        )

        try:
            client = SendGridAPIClient(self.api_key)
            await run_in_threadpool(client.send, message)
        except Exception as e:
            # Provider errors stay in the log, the caller only sees the failure
            logger.exception("Recovery email to %s failed: %s", address, e)
            return DeliveryResult(success=False)

        logger.info("Recovery email sent to %s", address)
        return DeliveryResult(success=True)

    def _build_html(self, *, kind: RecoveryKind, code: str, expires_at: datetime) -> str:
        action = "reset your password" if kind == RecoveryKind.password else "recover your username"
        return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>{SUBJECTS[kind]}</h2>
            <p>Use the code below to {action} for your {self.app_name} account.</p>
            <p style="font-size: 28px; letter-spacing: 6px; margin: 30px 0;"><strong>{code}</strong></p>
            <p>The code expires at {expires_at:%Y-%m-%d %H:%M} UTC.</p>
            <p>If you didn't request this, you can safely ignore this email.</p>
        </div>
        """


def build_notifier(config) -> INotifier:
    """Pick the notifier named by NOTIFIER_BACKEND"""
    backend = config.NOTIFIER_BACKEND
    if backend == "sendgrid":
        return SendGridNotifier(
            api_key=config.SENDGRID_API_KEY,
            from_email=config.SENDGRID_FROM_EMAIL,
            app_name=config.APP_NAME,
        )
    if backend == "log":
        return LoggingNotifier()
    raise ValueError(f"Unknown NOTIFIER_BACKEND: {backend}")
