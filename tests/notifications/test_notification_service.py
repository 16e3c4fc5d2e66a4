from __future__ import annotations

import pytest

from src.school_records.school_records.notifications.model import NotificationSettings


@pytest.fixture
def notifications(container):
    return container.notification_service


def test_defaults_without_system_settings(notifications):
    settings = notifications.get_notification_settings()

    assert settings == NotificationSettings()
    assert settings.enable_sms and settings.enable_email
    assert settings.email_from == "noreply@school.com"


def test_channels_follow_system_settings(container, notifications):
    container.setup_service.update_system_settings(
        {"enableSMSNotifications": False, "emailFrom": "office@brainhub.edu.gh", "smsApiKey": "k"}
    )

    settings = notifications.get_notification_settings()

    assert settings.enable_sms is False
    assert settings.enable_email is True
    assert settings.email_from == "office@brainhub.edu.gh"
    assert settings.sms_api_key == "k"


def test_can_send_checks_contact_and_channel(container, notifications):
    container.setup_service.update_system_settings({"enableEmailNotifications": False})

    assert notifications.can_send_sms("+233 24 123 4567") is True
    assert notifications.can_send_sms("") is False
    assert notifications.can_send_email("ama@example.com") is False
