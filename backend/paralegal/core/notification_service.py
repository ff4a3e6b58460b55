import logging
import time
from typing import List, Literal

from pydantic import BaseModel, Field

from paralegal.models.settings import Settings
from paralegal.models.violations import ViolationAlert

# Configure logging
logger = logging.getLogger("notification_service")

TOAST_LIFETIME_SECONDS = 6.0

ToastType = Literal["info", "success", "error"]


class Toast(BaseModel):
    id: int
    title: str
    message: str
    type: ToastType = "info"
    created_at: float = Field(default_factory=time.time)


class NotificationService:
    """
    Simulated e-mail notifications plus short-lived toast messages.
    """

    def __init__(self, settings: Settings):
        """
        Initialize the notification service.

        Args:
            settings: Shared user settings (recipient address and notification toggles)
        """
        self.settings = settings
        self.toasts: List[Toast] = []
        self._next_id = 0

    def notify(self, subject: str, body: str, user_email: str) -> bool:
        """
        Simulate sending an e-mail and show a toast about it.

        Args:
            subject: The subject of the e-mail
            body: The body content of the e-mail
            user_email: The recipient's e-mail address

        Returns:
            True if the notification was sent
        """
        if not user_email:
            logger.warning("⚠️ CANNOT SEND NOTIFICATION: user email is not set")
            return False

        logger.info(f"📧 SIMULATED EMAIL NOTIFICATION: to={user_email}, subject={subject}")
        logger.info(f"📧 BODY: {body}")

        self.add_toast(subject, f"Email alert sent to {user_email}", "info")
        return True

    def notify_new_violations(self, alerts: List[ViolationAlert], case_number: str = "") -> bool:
        """
        Send one alert for newly found high-severity violations, if the user opted in.

        Args:
            alerts: The new high-severity alerts
            case_number: Identifier shown in the subject line
        """
        if not alerts:
            return False
        if not self.settings.notify_on_violations or not self.settings.user_email:
            logger.info(f"🔕 VIOLATION NOTIFICATION SKIPPED: count={len(alerts)}")
            return False

        subject = f"New High-Severity Violation Alert in Case {case_number}".strip()
        body = (
            f"The AI has identified {len(alerts)} new high-severity violation(s):\n\n"
            + "\n".join(f"- {alert.title}" for alert in alerts)
        )
        return self.notify(subject, body, self.settings.user_email)

    def add_toast(self, title: str, message: str, type: ToastType = "info") -> Toast:
        toast = Toast(id=self._next_id, title=title, message=message, type=type)
        self._next_id += 1
        self.toasts.append(toast)
        return toast

    def remove_toast(self, toast_id: int) -> bool:
        remaining = [toast for toast in self.toasts if toast.id != toast_id]
        removed = len(remaining) != len(self.toasts)
        self.toasts = remaining
        return removed

    def active_toasts(self) -> List[Toast]:
        """Toasts younger than their lifetime; expired ones are dropped."""
        cutoff = time.time() - TOAST_LIFETIME_SECONDS
        self.toasts = [toast for toast in self.toasts if toast.created_at >= cutoff]
        return list(self.toasts)
