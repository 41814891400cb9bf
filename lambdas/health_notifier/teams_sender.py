# lambdas/health_notifier/teams_sender.py
import logging
from typing import Any, Dict

import requests

from .formatter import build_webhook_payload

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """Raised when the webhook is unreachable, times out, or answers with a non-200 status."""
    pass


class TeamsSender:
    """Posts Adaptive Cards to a Microsoft Teams incoming webhook. One attempt per call."""

    def __init__(self, webhook_url: str, timeout: float = 10):
        self.webhook_url = webhook_url
        self.timeout = timeout

    def send(self, card: Dict[str, Any]) -> None:
        """
        Sends the card to the webhook.

        Raises:
            DeliveryError: If the request fails or the status is not 200.
        """
        payload = build_webhook_payload(card)

        try:
            response = requests.post(
                self.webhook_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error("❌ Could not reach the Teams webhook: %s", e)
            raise DeliveryError(f"Failed to send message to Teams: {e}") from e

        if response.status_code != 200:
            logger.error("❌ Teams webhook returned status %s: %s", response.status_code, response.text[:200])
            raise DeliveryError(f"Teams webhook returned status {response.status_code}")

        logger.info("✅ Message sent to Teams successfully.")
