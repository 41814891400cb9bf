# lambdas/health_notifier/processor.py
import json
import logging
import time
from typing import Callable, Iterable

from .bedrock_simplifier import BedrockSimplifier
from .classifier import filter_maintenance_events, is_maintenance_relevant
from .formatter import build_adaptive_card
from .models import BatchResult, HealthEvent, NotifierSettings
from .teams_sender import TeamsSender

logger = logging.getLogger(__name__)


class HealthEventProcessor:
    """
    Runs health events through classify -> simplify -> format -> send.

    Batches are drained one event at a time with a fixed pause after each
    event, so Bedrock and the webhook never see more than one request from
    this function at once.
    """

    def __init__(self, simplifier: BedrockSimplifier, sender: TeamsSender,
                 delay_seconds: float = 1.0, sleep: Callable[[float], None] = time.sleep):
        self.simplifier = simplifier
        self.sender = sender
        self.delay_seconds = delay_seconds
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings: NotifierSettings) -> "HealthEventProcessor":
        """Wires the Bedrock and Teams clients from resolved settings."""
        simplifier = BedrockSimplifier(
            model_id=settings.bedrock_model_id,
            region_name=settings.bedrock_region,
            timeout_seconds=settings.bedrock_timeout_seconds,
        )
        sender = TeamsSender(settings.teams_webhook_url, timeout=settings.webhook_timeout_seconds)
        return cls(simplifier, sender, delay_seconds=settings.event_delay_seconds)

    def process_one(self, event: HealthEvent) -> bool:
        """
        Processes a single event. Errors from Bedrock or Teams propagate.

        Returns:
            True if a notification was sent, False if the event was skipped.
        """
        logger.info("Processing AWS Health event: %s", event.id)

        if not is_maintenance_relevant(event):
            logger.info("Skipping non-maintenance event %s (%s / %s)",
                        event.id, event.event_type_category, event.event_type_code)
            return False

        self._notify(event)
        return True

    def _notify(self, event: HealthEvent) -> None:
        summary = self.simplifier.simplify(event)
        logger.info("Simplified message generated for %s: %s", event.id, json.dumps(summary.to_dict()))

        card = build_adaptive_card(summary)
        self.sender.send(card)
        logger.info("✅ Health event %s processed successfully.", event.id)

    def process_batch(self, events: Iterable[HealthEvent]) -> BatchResult:
        """
        Processes a batch of events sequentially. Per-event failures are
        logged and never stop the batch.
        """
        events = list(events)
        maintenance_events = filter_maintenance_events(events)
        result = BatchResult(received=len(events), relevant=len(maintenance_events))
        logger.info("Processing batch of %d health events, %d maintenance events to process",
                    result.received, result.relevant)

        for i, event in enumerate(maintenance_events):
            logger.info("--- Processing event #%d/%d: %s ---", i + 1, result.relevant, event.id)
            try:
                self._notify(event)
                result.succeeded.append(event.id)
            except Exception as e:
                logger.exception("❌ Failed to process event %s: %s", event.id, e)
                result.failed.append(event.id)
            self.sleep(self.delay_seconds)  # Pace Bedrock and Teams calls

        logger.info("Batch complete: %d succeeded, %d failed.", len(result.succeeded), len(result.failed))
        return result
