from __future__ import annotations

from typing import Optional

from ..core.constants import DEFAULT_EMAIL_FROM
from ..setup.service import SetupService
from .model import NotificationSettings


class NotificationService:
    """Reads notification channel settings from the system settings document.

    Delivery itself is outside this package; callers ask whether a channel
    may be used for a given contact before sending.
    """

    def __init__(self, setup: SetupService):
        self._setup = setup

    def get_notification_settings(self) -> NotificationSettings:
        settings = self._setup.get_system_settings()
        if not settings:
            return NotificationSettings()

        # A channel is on unless it was explicitly switched off.
        return NotificationSettings(
            enable_sms=settings.get("enableSMSNotifications") is not False,
            enable_email=settings.get("enableEmailNotifications") is not False,
            sms_api_key=settings.get("smsApiKey"),
            sms_api_url=settings.get("smsApiUrl"),
            email_service=settings.get("emailService"),
            email_from=settings.get("emailFrom") or DEFAULT_EMAIL_FROM,
        )

    def can_send_sms(self, phone: Optional[str]) -> bool:
        return bool(phone) and self.get_notification_settings().enable_sms

    def can_send_email(self, email: Optional[str]) -> bool:
        return bool(email) and self.get_notification_settings().enable_email
