import time

from paralegal.core import notification_service as notifications
from paralegal.core.notification_service import NotificationService
from paralegal.models.settings import Settings
from paralegal.models.violations import ViolationAlert


def test_violation_alert_requires_email_and_opt_in():
    settings = Settings()
    service = NotificationService(settings)
    alerts = [ViolationAlert(title="FMLA interference", severity="High")]

    assert service.notify_new_violations(alerts, "12345") is False

    settings.user_email = "me@example.com"
    assert service.notify_new_violations(alerts, "12345") is True
    assert service.active_toasts()[0].title == "New High-Severity Violation Alert in Case 12345"

    settings.notify_on_violations = False
    assert service.notify_new_violations(alerts, "12345") is False
    assert len(service.active_toasts()) == 1


def test_toasts_expire_and_can_be_dismissed(monkeypatch):
    service = NotificationService(Settings())
    first = service.add_toast("Saved", "Case file saved", "success")
    second = service.add_toast("Error", "Something failed", "error")

    assert service.remove_toast(first.id) is True
    assert service.remove_toast(first.id) is False
    assert [toast.id for toast in service.active_toasts()] == [second.id]

    later = time.time() + notifications.TOAST_LIFETIME_SECONDS + 1
    monkeypatch.setattr(notifications.time, "time", lambda: later)
    assert service.active_toasts() == []
