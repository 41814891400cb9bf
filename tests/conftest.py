# tests/conftest.py
import io
import json
import os
from unittest.mock import MagicMock

import pytest

from lambdas.health_notifier.models import HealthEvent

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))


@pytest.fixture
def sample_event_dict() -> dict:
    """The EventBridge AWS Health event shipped with the repo."""
    with open(os.path.join(TESTS_DIR, "sample_health_event.json"), "r") as f:
        return json.load(f)


@pytest.fixture
def make_event():
    """Factory for HealthEvent objects with sensible maintenance defaults."""
    def _make_event(event_id="evt-1", category="scheduledChange",
                    type_code="AWS_EC2_INSTANCE_MAINTENANCE_SCHEDULED", **kwargs) -> HealthEvent:
        kwargs.setdefault("service", "EC2")
        return HealthEvent(
            id=event_id,
            event_type_category=category,
            event_type_code=type_code,
            **kwargs,
        )
    return _make_event


def bedrock_response(body) -> dict:
    """Mimics the invoke_model response, whose body is a streaming object."""
    raw = body if isinstance(body, (str, bytes)) else json.dumps(body)
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    return {"body": io.BytesIO(raw), "contentType": "application/json"}


def titan_reply(text: str) -> dict:
    return bedrock_response({
        "inputTextTokenCount": 250,
        "results": [{"tokenCount": 120, "outputText": text, "completionReason": "FINISH"}],
    })


@pytest.fixture
def bedrock_runtime() -> MagicMock:
    return MagicMock()
