# lambdas/health_notifier/app.py
import json
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict

from .envelope import BatchEvent, SingleEvent, UnsupportedEventShape, normalize_event
from .models import NotifierSettings, load_settings
from .processor import HealthEventProcessor

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> NotifierSettings:
    """Resolves configuration once per execution environment."""
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    return settings


@lru_cache(maxsize=1)
def get_processor() -> HealthEventProcessor:
    """Clients are built once and reused across warm invocations."""
    return HealthEventProcessor.from_settings(get_settings())


def build_response(status_code: int, body: dict) -> dict:
    """Helper function to build the Lambda proxy response."""
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def handler(event: Dict[str, Any], context: object) -> Dict[str, Any]:
    """
    Main Lambda handler, triggered by EventBridge AWS Health events or a
    Records batch carrying them.
    """
    logger.info("--- Health Notifier Lambda Triggered ---")

    try:
        processor = get_processor()
        logger.debug("Received event: %s", json.dumps(event, default=str))

        envelope = normalize_event(event)
        body: Dict[str, Any] = {"message": "Health events processed successfully"}

        if isinstance(envelope, SingleEvent):
            body["notified"] = processor.process_one(envelope.event)
        elif isinstance(envelope, BatchEvent):
            if envelope.events:
                result = processor.process_batch(envelope.events)
                body.update({
                    "received": result.received,
                    "relevant": result.relevant,
                    "succeeded": result.succeeded,
                    "failed": result.failed,
                })
            else:
                logger.info("ℹ️ No AWS Health events found in the batch. Nothing to process.")
        elif isinstance(envelope, UnsupportedEventShape):
            logger.info("ℹ️ Unsupported event format, skipping processing: %s", envelope.reason)

        body["processedAt"] = _now_iso()
        return build_response(200, body)

    except Exception as e:
        logger.exception("❌ Error in Lambda handler: %s", e)
        return build_response(500, {
            'error': 'Internal server error',
            'message': str(e),
            'timestamp': _now_iso(),
        })
