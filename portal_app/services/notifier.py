from __future__ import annotations
import logging
import requests
from ..config import NOTIFY_API_URL, REQUEST_TIMEOUT
from ..errors import NotificationError
from ..models import Notification
from ..ports import Notifier

logger = logging.getLogger(__name__)


class HttpNotifier(Notifier):
    """Posts decisions to the notification service's ``/api/send-email``."""

    def __init__(self, url: str = NOTIFY_API_URL, timeout: float = REQUEST_TIMEOUT):
        self.url = url
        self.timeout = timeout

    def send(self, notification: Notification) -> None:
        try:
            resp = requests.post(self.url, json=notification.to_payload(), timeout=self.timeout)
        except requests.RequestException as e:
            raise NotificationError(f"Email service unreachable: {e}") from e
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = None
            detail = body.get("error") if isinstance(body, dict) else None
            detail = detail or resp.text[:200]
            raise NotificationError(f"Email service error ({resp.status_code}): {detail}")
        logger.info("Notified %s of %s decision", notification.recipient_email, notification.verdict.value)
