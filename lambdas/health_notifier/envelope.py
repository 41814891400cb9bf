# lambdas/health_notifier/envelope.py
"""
Normalises the shapes this Lambda can be invoked with into one of three
variants, so the pipeline only ever sees HealthEvent objects:

- SingleEvent: an EventBridge AWS Health event delivered directly.
- BatchEvent: a ``Records`` envelope (SQS, SNS or EventBridge replay) whose
  records carry health events in ``body``, ``detail`` or ``Sns.Message``.
- UnsupportedEventShape: anything else. Logged and ignored, not an error.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from .models import HealthEvent

logger = logging.getLogger(__name__)

HEALTH_EVENT_SOURCE = "aws.health"


@dataclass(frozen=True)
class SingleEvent:
    event: HealthEvent


@dataclass(frozen=True)
class BatchEvent:
    events: Tuple[HealthEvent, ...]


@dataclass(frozen=True)
class UnsupportedEventShape:
    reason: str


Envelope = Union[SingleEvent, BatchEvent, UnsupportedEventShape]


def _is_health_event(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("source") == HEALTH_EVENT_SOURCE


def _parse_record(record: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Pulls the embedded notification out of one batch record.
    Handles both direct SQS bodies and SNS messages (raw or wrapped in SQS).
    """
    embedded = record.get("body") or record.get("detail")
    if embedded is None and isinstance(record.get("Sns"), dict):
        embedded = record["Sns"].get("Message")
    if embedded is None:
        return None

    payload = json.loads(embedded) if isinstance(embedded, (str, bytes)) else embedded

    # SNS-to-SQS delivery wraps the notification once more
    if isinstance(payload, dict) and "Message" in payload and "source" not in payload:
        message = payload["Message"]
        payload = json.loads(message) if isinstance(message, str) else message
    return payload


def normalize_event(raw: Any) -> Envelope:
    """Classifies the raw Lambda event into one of the recognised envelope variants."""
    if not isinstance(raw, dict):
        return UnsupportedEventShape(reason=f"Event is a {type(raw).__name__}, not an object.")

    if _is_health_event(raw):
        return SingleEvent(event=HealthEvent.from_dict(raw))

    records = raw.get("Records")
    if isinstance(records, list) and records:
        events = []
        for i, record in enumerate(records):
            if not isinstance(record, dict):
                logger.warning("⚠️ Record #%d is not an object. Skipping.", i + 1)
                continue
            try:
                payload = _parse_record(record)
            except (ValueError, TypeError) as e:
                logger.warning("⚠️ Failed to parse record #%d: %s. Skipping.", i + 1, e)
                continue
            if _is_health_event(payload):
                events.append(HealthEvent.from_dict(payload))
            else:
                logger.info("Record #%d is not an AWS Health event. Skipping.", i + 1)
        return BatchEvent(events=tuple(events))

    return UnsupportedEventShape(reason="Event is neither an AWS Health event nor a Records batch.")
