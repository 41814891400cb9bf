# lambdas/health_notifier/classifier.py
from typing import Iterable, List

from .models import HealthEvent

MAINTENANCE_CATEGORIES = frozenset({
    "scheduledChange",
    "maintenance",
    "plannedChange",
    "investigation",
})

MAINTENANCE_EVENT_TYPES = frozenset({
    "AWS_EC2_INSTANCE_MAINTENANCE_SCHEDULED",
    "AWS_EC2_INSTANCE_MAINTENANCE_PENDING",
    "AWS_EC2_INSTANCE_MAINTENANCE_IN_PROGRESS",
    "AWS_EC2_INSTANCE_MAINTENANCE_COMPLETED",
    "AWS_RDS_MAINTENANCE_SCHEDULED",
    "AWS_RDS_MAINTENANCE_IN_PROGRESS",
    "AWS_RDS_MAINTENANCE_COMPLETED",
})

# Catches type codes missing from the list above
MAINTENANCE_KEYWORDS = ("maintenance", "scheduled")


def is_maintenance_relevant(event: HealthEvent) -> bool:
    """
    Decides whether a health event is about planned or ongoing maintenance.
    False positives only cost an extra notification.
    """
    if event.event_type_category in MAINTENANCE_CATEGORIES:
        return True

    type_code = event.event_type_code or ""
    if type_code in MAINTENANCE_EVENT_TYPES:
        return True

    lowered = type_code.lower()
    return any(keyword in lowered for keyword in MAINTENANCE_KEYWORDS)


def filter_maintenance_events(events: Iterable[HealthEvent]) -> List[HealthEvent]:
    """Keeps the maintenance-relevant events, preserving their order."""
    return [event for event in events if is_maintenance_relevant(event)]
