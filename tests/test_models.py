# tests/test_models.py
import os
from unittest.mock import patch

import pytest

from lambdas.health_notifier.models import (
    ConfigurationError,
    HealthEvent,
    SimplifiedSummary,
    load_settings,
)


def test_health_event_from_eventbridge_dict(sample_event_dict):
    event = HealthEvent.from_dict(sample_event_dict)

    assert event.id == "7bf73129-1428-4cd3-a780-95db273d1602"
    assert event.event_type_category == "scheduledChange"
    assert event.event_type_code == "AWS_EC2_INSTANCE_MAINTENANCE_SCHEDULED"
    assert event.service == "EC2"
    assert event.description.startswith("One or more of your Amazon EC2 instances")
    assert event.descriptions[0].language == "en_US"
    assert event.affected_entities == ("i-0abcd1234efgh5678", "i-0ijkl9012mnop3456")
    assert event.status_code == "upcoming"
    assert event.region == "us-east-1"


def test_health_event_stringifies_entity_values():
    event = HealthEvent.from_dict({
        "id": "x",
        "source": "aws.health",
        "detail": {"affectedEntities": [{"entityValue": 123456789012}, {"entityValue": "i-1"}]},
    })

    assert event.affected_entities == ("123456789012", "i-1")


def test_health_event_tolerates_missing_detail():
    event = HealthEvent.from_dict({"id": "x", "source": "aws.health"})

    assert event.event_type_code == ""
    assert event.descriptions == ()
    assert event.description is None
    assert event.start_time is None


def test_summary_defaults_are_fully_populated():
    summary = SimplifiedSummary.from_model_output({})

    assert summary.title == "Maintenance Update"
    assert summary.summary == "No summary available"
    assert summary.impact == "Impact not specified"
    assert summary.timeframe == "Timeframe not specified"
    assert summary.status == "Status unknown"
    assert summary.affected_services == ()
    assert summary.recommendations == ()


def test_summary_treats_null_and_blank_values_as_missing():
    summary = SimplifiedSummary.from_model_output({
        "title": None,
        "impact": "   ",
        "affectedServices": "EC2",
        "recommendations": ["Reboot early", "", None],
    })

    assert summary.title == "Maintenance Update"
    assert summary.impact == "Impact not specified"
    assert summary.affected_services == ("EC2",)
    assert summary.recommendations == ("Reboot early", "")


def test_summary_keeps_list_items_as_sent():
    summary = SimplifiedSummary.from_model_output({"recommendations": ["A", " "]})

    assert summary.recommendations == ("A", " ")


def test_summary_to_dict_uses_camel_case_keys():
    summary = SimplifiedSummary(affected_services=("EC2",), recommendations=("Stop and start",))

    assert summary.to_dict()["affectedServices"] == ["EC2"]
    assert summary.to_dict()["recommendations"] == ["Stop and start"]


@patch.dict(os.environ, {}, clear=True)
def test_missing_webhook_url_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="TEAMS_WEBHOOK_URL"):
        load_settings(_env_file=None)


@patch.dict(os.environ, {"TEAMS_WEBHOOK_URL": ""}, clear=True)
def test_empty_webhook_url_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        load_settings(_env_file=None)


@patch.dict(os.environ, {
    "TEAMS_WEBHOOK_URL": "https://example.webhook.office.com/webhookb2/abc",
    "BEDROCK_REGION": "eu-west-1",
    "EVENT_DELAY_SECONDS": "0.5",
}, clear=True)
def test_settings_read_from_environment():
    settings = load_settings(_env_file=None)

    assert settings.teams_webhook_url == "https://example.webhook.office.com/webhookb2/abc"
    assert settings.bedrock_region == "eu-west-1"
    assert settings.bedrock_model_id == "amazon.titan-text-express-v1"
    assert settings.event_delay_seconds == 0.5
    assert settings.webhook_timeout_seconds == 10.0
