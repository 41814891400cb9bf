# lambdas/health_notifier/formatter.py
import logging
from typing import Any, Dict, List

from .models import SimplifiedSummary

logger = logging.getLogger(__name__)

ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"
ADAPTIVE_CARD_VERSION = "1.4"
HEALTH_DASHBOARD_URL = "https://phd.aws.amazon.com/phd/home"

# Checked in order, first match wins.
STATUS_COLOR_RULES = (
    (("resolved", "completed"), "Good"),
    (("in progress", "ongoing"), "Warning"),
    (("scheduled", "planned"), "Default"),
)
DEFAULT_STATUS_COLOR = "Attention"


def status_color(status: str) -> str:
    """Maps a free-text status to an Adaptive Card colour name."""
    status_lower = (status or "").lower()
    for keywords, color in STATUS_COLOR_RULES:
        if any(keyword in status_lower for keyword in keywords):
            return color
    return DEFAULT_STATUS_COLOR


def _text_block(text: str, size: str, **extra: Any) -> Dict[str, Any]:
    block = {"type": "TextBlock", "text": text, "size": size}
    block.update(extra)
    block["wrap"] = True
    return block


def build_adaptive_card(summary: SimplifiedSummary) -> Dict[str, Any]:
    """Builds a Teams Adaptive Card from a simplified summary."""
    # Computed but not attached to any block.
    logger.debug("Status '%s' maps to card colour %s", summary.status, status_color(summary.status))

    affected_services = ", ".join(summary.affected_services) if summary.affected_services else "None specified"
    recommendation_blocks: List[Dict[str, Any]] = [
        _text_block(f"• {rec}", "Small", color="Default")
        for rec in summary.recommendations
    ]

    body = [
        _text_block(summary.title, "Large", weight="Bolder", color="Accent"),
        _text_block(summary.summary, "Medium"),
        {
            "type": "FactSet",
            "facts": [
                {"title": "Status", "value": summary.status},
                {"title": "Impact", "value": summary.impact},
                {"title": "Timeframe", "value": summary.timeframe},
            ],
        },
        _text_block("Affected Services:", "Medium", weight="Bolder"),
        _text_block(affected_services, "Small", color="Default"),
        _text_block("Recommendations:", "Medium", weight="Bolder"),
        *recommendation_blocks,
    ]

    return {
        "type": "AdaptiveCard",
        "version": ADAPTIVE_CARD_VERSION,
        "body": body,
        "actions": [
            {
                "type": "Action.OpenUrl",
                "title": "View AWS Health Dashboard",
                "url": HEALTH_DASHBOARD_URL,
            }
        ],
    }


def build_webhook_payload(card: Dict[str, Any]) -> Dict[str, Any]:
    """Wraps an Adaptive Card in the Teams incoming-webhook message envelope."""
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": ADAPTIVE_CARD_CONTENT_TYPE,
                "content": card,
            }
        ],
    }
