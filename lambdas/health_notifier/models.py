# lambdas/health_notifier/models.py
"""
Plain-dataclass models and the settings class for the Health Notifier.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


class NotifierSettings(BaseSettings):
    """
    Manages env vars using Pydantic BaseSettings.
    Only the Lambda entry point builds this; every component receives it.
    """
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore', populate_by_name=True)

    teams_webhook_url: str = Field(..., alias='TEAMS_WEBHOOK_URL', min_length=1)
    bedrock_region: str = Field("us-east-1", alias='BEDROCK_REGION')
    bedrock_model_id: str = Field("amazon.titan-text-express-v1", alias='BEDROCK_MODEL_ID')
    bedrock_timeout_seconds: float = Field(10.0, alias='BEDROCK_TIMEOUT_SECONDS', gt=0)
    webhook_timeout_seconds: float = Field(10.0, alias='WEBHOOK_TIMEOUT_SECONDS', gt=0)
    event_delay_seconds: float = Field(1.0, alias='EVENT_DELAY_SECONDS', ge=0)
    log_level: str = Field("INFO", alias='LOG_LEVEL')
    environment: str = Field("dev", alias='ENVIRONMENT')


def load_settings(**overrides: Any) -> NotifierSettings:
    """
    Builds the settings from the environment, turning validation problems
    into a ConfigurationError.
    """
    try:
        return NotifierSettings(**overrides)
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(f"Invalid or missing configuration: {', '.join(missing)}") from e


# Data models
@dataclass(frozen=True)
class EventDescription:
    language: str
    latest_description: str


@dataclass(frozen=True)
class HealthEvent:
    """
    One AWS Health notification as delivered by EventBridge.
    The pipeline only ever reads it.
    """
    id: str
    event_type_category: str
    event_type_code: str
    service: str
    descriptions: Tuple[EventDescription, ...] = ()
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    last_updated_time: Optional[str] = None
    status_code: Optional[str] = None
    affected_entities: Tuple[str, ...] = ()
    # Envelope fields, informational only
    source: str = "aws.health"
    detail_type: str = "AWS Health Event"
    account: Optional[str] = None
    region: Optional[str] = None
    time: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "HealthEvent":
        """Builds a HealthEvent from the EventBridge JSON shape."""
        detail = raw.get("detail") or {}

        descriptions = tuple(
            EventDescription(
                language=d.get("language", ""),
                latest_description=d.get("latestDescription", ""),
            )
            for d in detail.get("eventDescription") or []
            if isinstance(d, dict)
        )
        affected_entities = tuple(
            str(e["entityValue"])
            for e in detail.get("affectedEntities") or []
            if isinstance(e, dict) and e.get("entityValue")
        )

        return cls(
            id=str(raw.get("id", "")),
            event_type_category=detail.get("eventTypeCategory", ""),
            event_type_code=detail.get("eventTypeCode", ""),
            service=detail.get("service", ""),
            descriptions=descriptions,
            start_time=detail.get("startTime"),
            end_time=detail.get("endTime"),
            last_updated_time=detail.get("lastUpdatedTime"),
            status_code=detail.get("statusCode"),
            affected_entities=affected_entities,
            source=raw.get("source", "aws.health"),
            detail_type=raw.get("detail-type", "AWS Health Event"),
            account=raw.get("account"),
            region=raw.get("region"),
            time=raw.get("time"),
        )

    @property
    def description(self) -> Optional[str]:
        """Text of the first description entry, if any."""
        if self.descriptions and self.descriptions[0].latest_description:
            return self.descriptions[0].latest_description
        return None


DEFAULT_TITLE = "Maintenance Update"
DEFAULT_SUMMARY = "No summary available"
DEFAULT_IMPACT = "Impact not specified"
DEFAULT_TIMEFRAME = "Timeframe not specified"
DEFAULT_STATUS = "Status unknown"


def _as_text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = value if isinstance(value, str) else str(value)
    return text if text.strip() else default


def _as_text_list(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(item) for item in value if item is not None)


@dataclass(frozen=True)
class SimplifiedSummary:
    """
    The user-facing rewrite of one HealthEvent.
    Every field is populated; missing values take the DEFAULT_* strings.
    """
    title: str = DEFAULT_TITLE
    summary: str = DEFAULT_SUMMARY
    impact: str = DEFAULT_IMPACT
    timeframe: str = DEFAULT_TIMEFRAME
    status: str = DEFAULT_STATUS
    affected_services: Tuple[str, ...] = field(default_factory=tuple)
    recommendations: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_model_output(cls, parsed: Dict[str, Any]) -> "SimplifiedSummary":
        """Maps the model's JSON keys onto the summary, defaulting whatever is absent."""
        return cls(
            title=_as_text(parsed.get("title"), DEFAULT_TITLE),
            summary=_as_text(parsed.get("summary"), DEFAULT_SUMMARY),
            impact=_as_text(parsed.get("impact"), DEFAULT_IMPACT),
            timeframe=_as_text(parsed.get("timeframe"), DEFAULT_TIMEFRAME),
            status=_as_text(parsed.get("status"), DEFAULT_STATUS),
            affected_services=_as_text_list(parsed.get("affectedServices")),
            recommendations=_as_text_list(parsed.get("recommendations")),
        )

    @classmethod
    def from_raw_text(cls, raw_text: str) -> "SimplifiedSummary":
        """Fallback used when the model reply holds no usable JSON object."""
        return cls(summary=_as_text(raw_text, DEFAULT_SUMMARY))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "summary": self.summary,
            "affectedServices": list(self.affected_services),
            "impact": self.impact,
            "timeframe": self.timeframe,
            "status": self.status,
            "recommendations": list(self.recommendations),
        }


@dataclass
class BatchResult:
    """Outcome of draining one batch through the pipeline."""
    received: int = 0
    relevant: int = 0
    succeeded: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
