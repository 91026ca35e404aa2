"""
Email Notification Dispatchers

Deliver password reset codes. Delivery problems are reported as False,
never raised, so a mail outage cannot break the reset request flow.
"""

import logging
from typing import Optional

import httpx

from src.app.services.notification_dispatcher import INotificationDispatcher

logger = logging.getLogger(__name__)

SUBJECT = "Password Reset Code"


def _mask(address: str) -> str:
    local, _, domain = address.partition("@")
    return f"{local[:1]}***@{domain}" if domain else "***"


def render_bodies(code: str, expires_in_minutes: int) -> tuple[str, str]:
    text = (
        f"Your password reset code is: {code}. "
        f"This code will expire in {expires_in_minutes} minutes. "
        "If you didn't request this, please ignore this email."
    )
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        "<h2>Password Reset Code</h2>"
        "<p>You've requested to reset your password.</p>"
        '<div style="padding: 15px; text-align: center; font-size: 24px; '
        f'letter-spacing: 5px; font-weight: bold;">{code}</div>'
        f"<p>This code will expire in {expires_in_minutes} minutes.</p>"
        "<p>If you didn't request this password reset, please ignore this email.</p>"
        "</div>"
    )
    return text, html


class HttpEmailDispatcher(INotificationDispatcher):
    """Transactional email API over httpx"""

    def __init__(
        self,
        api_url: str,
        api_token: str,
        from_address: str,
        from_name: str,
        expires_in_minutes: int,
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_token = api_token
        self.from_address = from_address
        self.from_name = from_name
        self.expires_in_minutes = expires_in_minutes
        self.timeout_seconds = timeout_seconds
        self.transport = transport

    async def send(self, address: str, code: str) -> bool:
        if not self.api_url or not self.api_token:
            logger.error("Email dispatch failed: email API is not configured")
            return False

        text_body, html_body = render_bodies(code, self.expires_in_minutes)
        payload = {
            "from": {"address": self.from_address, "name": self.from_name},
            "to": [{"email_address": {"address": address}}],
            "subject": SUBJECT,
            "textbody": text_body,
            "htmlbody": html_body,
        }
        headers = {"Authorization": self.api_token, "Content-Type": "application/json"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(self.api_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            logger.error(f"Email dispatch to {_mask(address)} failed: {type(exc).__name__}")
            return False

        if response.is_success:
            logger.info(f"Password reset code sent to {_mask(address)}")
            return True

        logger.error(f"Email dispatch to {_mask(address)} failed: HTTP {response.status_code}")
        return False


class LogNotificationDispatcher(INotificationDispatcher):
    """Development dispatcher: writes the code to the log instead of mailing it"""

    async def send(self, address: str, code: str) -> bool:
        logger.info(f"Password reset code for {_mask(address)} issued (log backend)")
        logger.debug(f"Password reset code for {address}: {code}")
        return True
