# tests/test_classifier.py
import pytest

from lambdas.health_notifier.classifier import (
    MAINTENANCE_CATEGORIES,
    MAINTENANCE_EVENT_TYPES,
    filter_maintenance_events,
    is_maintenance_relevant,
)


@pytest.mark.parametrize("category", sorted(MAINTENANCE_CATEGORIES))
def test_allow_listed_categories_are_relevant(make_event, category):
    """Any allow-listed category is enough, whatever the type code says."""
    event = make_event(category=category, type_code="AWS_LAMBDA_OPERATIONAL_ISSUE")
    assert is_maintenance_relevant(event)


@pytest.mark.parametrize("type_code", sorted(MAINTENANCE_EVENT_TYPES))
def test_known_type_codes_are_relevant(make_event, type_code):
    event = make_event(category="issue", type_code=type_code)
    assert is_maintenance_relevant(event)


@pytest.mark.parametrize("type_code", [
    "AWS_ELASTICACHE_UPDATE_MAINTENANCE_WINDOW",
    "aws_redshift_maintenance_notice",
    "AWS_DIRECTCONNECT_Scheduled_UPGRADE",
])
def test_keyword_fallback_is_case_insensitive(make_event, type_code):
    """Unlisted codes that obviously describe maintenance are still caught."""
    event = make_event(category="accountNotification", type_code=type_code)
    assert is_maintenance_relevant(event)


@pytest.mark.parametrize("category,type_code", [
    ("issue", "AWS_EC2_OPERATIONAL_ISSUE"),
    ("accountNotification", "AWS_IAM_ACCESS_KEY_EXPOSED"),
    ("ScheduledChange", "AWS_S3_OPERATIONAL_NOTIFICATION"),
    ("", ""),
])
def test_unrelated_events_are_not_relevant(make_event, category, type_code):
    """Category matching is exact, so a differently cased category does not count."""
    event = make_event(category=category, type_code=type_code)
    assert not is_maintenance_relevant(event)


def test_filter_preserves_order(make_event):
    events = [
        make_event("a", category="issue", type_code="AWS_EC2_OPERATIONAL_ISSUE"),
        make_event("b", category="maintenance"),
        make_event("c", category="issue", type_code="AWS_S3_OPERATIONAL_ISSUE"),
        make_event("d", category="issue", type_code="AWS_RDS_MAINTENANCE_COMPLETED"),
    ]

    assert [e.id for e in filter_maintenance_events(events)] == ["b", "d"]
