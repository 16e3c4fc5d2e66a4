from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_EMAIL_FROM


@dataclass(frozen=True)
class NotificationSettings:
    enable_sms: bool = True
    enable_email: bool = True
    sms_api_key: Optional[str] = None
    sms_api_url: Optional[str] = None
    email_service: Optional[str] = None
    email_from: str = DEFAULT_EMAIL_FROM
