# lambdas/health_notifier/bedrock_simplifier.py
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .models import HealthEvent, SimplifiedSummary

logger = logging.getLogger(__name__)

PROMPT_PATH = Path(__file__).parent / "prompt.txt"

# Generation parameters shared by every model family
MAX_OUTPUT_TOKENS = 1000
TEMPERATURE = 0.3
TOP_P = 0.9

# Greedy: first "{" to last "}"
JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)


class GenerationError(Exception):
    """Raised when the Bedrock call itself fails (network, auth, throttling, bad request)."""
    pass


class BedrockSimplifier:
    """
    Uses AWS Bedrock to rewrite an AWS Health event into a short,
    user-facing maintenance summary.

    The model is treated as an unreliable formatter: whatever it replies is
    turned into a complete SimplifiedSummary. Only a failed service call is
    reported, as a GenerationError.
    """
    def __init__(self, model_id: str, region_name: str = "us-east-1",
                 timeout_seconds: float = 10.0, bedrock_runtime=None):
        """Initializes the Bedrock client and loads the prompt template."""
        self.model_id = model_id
        if bedrock_runtime is None:
            bedrock_runtime = boto3.client(
                service_name="bedrock-runtime",
                region_name=region_name,
                config=Config(
                    connect_timeout=timeout_seconds,
                    read_timeout=timeout_seconds,
                    retries={"max_attempts": 2, "mode": "standard"},
                ),
            )
        self.bedrock_runtime = bedrock_runtime
        self.prompt_template = PROMPT_PATH.read_text(encoding="utf-8")

    def simplify(self, event: HealthEvent) -> SimplifiedSummary:
        """
        Generates a SimplifiedSummary for the given event.

        Raises:
            GenerationError: If the Bedrock API call fails.
        """
        prompt = self.build_prompt(event)
        request_body = self._build_request_body(prompt)

        try:
            response = self.bedrock_runtime.invoke_model(
                modelId=self.model_id,
                body=json.dumps(request_body),
                accept="application/json",
                contentType="application/json",
            )
            raw_body = response["body"].read()
        except (BotoCoreError, ClientError) as e:
            logger.error("❌ Bedrock call failed for event %s: %s", event.id, e)
            raise GenerationError(f"Failed to simplify maintenance message: {e}") from e

        raw_text = self._read_output_text(raw_body)
        return self.parse_summary(raw_text)

    def build_prompt(self, event: HealthEvent) -> str:
        """Fills the prompt template with the event's details."""
        return self.prompt_template.format(
            service=event.service,
            event_type_code=event.event_type_code,
            event_type_category=event.event_type_category,
            description=event.description or "No description available",
            start_time=event.start_time or "Not specified",
            end_time=event.end_time or "Not specified",
            status_code=event.status_code or "Unknown",
            affected_entities=", ".join(event.affected_entities) or "None specified",
        )

    def _build_request_body(self, prompt: str) -> Dict[str, Any]:
        """
        Returns the JSON payload required by the configured model family.
        Amazon Titan is the default.
        """
        if "amazon.nova" in self.model_id:
            return {
                "messages": [{"role": "user", "content": [{"text": prompt}]}],
                "inferenceConfig": {
                    "maxTokens": MAX_OUTPUT_TOKENS,
                    "temperature": TEMPERATURE,
                    "topP": TOP_P,
                    "stopSequences": [],
                },
            }
        if "anthropic." in self.model_id:
            return {
                "anthropic_version": "bedrock-2023-05-31",
                "messages": [{"role": "user", "content": [{"type": "text", "text": prompt}]}],
                "max_tokens": MAX_OUTPUT_TOKENS,
                "temperature": TEMPERATURE,
                "top_p": TOP_P,
                "stop_sequences": [],
            }
        return {
            "inputText": prompt,
            "textGenerationConfig": {
                "maxTokenCount": MAX_OUTPUT_TOKENS,
                "stopSequences": [],
                "temperature": TEMPERATURE,
                "topP": TOP_P,
            },
        }

    def _read_output_text(self, raw_body) -> str:
        """Decodes the response body and pulls out the model's text."""
        if isinstance(raw_body, bytes):
            raw_body = raw_body.decode("utf-8", errors="replace")
        try:
            body = json.loads(raw_body)
        except (TypeError, ValueError):
            logger.warning("⚠️ Bedrock response body is not JSON, using it as plain text.")
            return str(raw_body or "")

        if not isinstance(body, dict):
            return ""
        return self._extract_text_from_response(body) or ""

    @staticmethod
    def _extract_text_from_response(body: Dict[str, Any]) -> Optional[str]:
        """
        Safely extracts the reply text from the known Bedrock response structures.
        """
        # Amazon Titan
        results_list = body.get("results")
        if isinstance(results_list, list) and results_list:
            first_item = results_list[0]
            if isinstance(first_item, dict) and first_item.get("outputText"):
                return first_item["outputText"]

        # Amazon Nova
        if "output" in body:
            blocks = (
                (body.get("output") or {})
                .get("message", {})
                .get("content", [])
            )
            for block in blocks:
                if isinstance(block, dict) and block.get("text"):
                    return block["text"]

        # Anthropic Claude
        content = body.get("content")
        if isinstance(content, list) and content:
            first = content[0]
            if isinstance(first, dict) and first.get("text"):
                return first["text"]

        # Older completion-style bodies
        for key in ("completion", "text"):
            if isinstance(body.get(key), str):
                return body[key]
        return None

    @staticmethod
    def parse_summary(raw_text: str) -> SimplifiedSummary:
        """
        Turns the model's reply into a SimplifiedSummary.
        Never raises: anything unparseable becomes the fallback summary.
        """
        match = JSON_OBJECT_PATTERN.search(raw_text or "")
        if not match:
            logger.warning("⚠️ No JSON object in Bedrock reply, using the raw text as summary.")
            return SimplifiedSummary.from_raw_text(raw_text)

        try:
            parsed = json.loads(match.group(0))
        except ValueError as e:
            logger.warning("⚠️ Could not parse JSON in Bedrock reply: %s. Using the raw text as summary.", e)
            return SimplifiedSummary.from_raw_text(raw_text)

        if not isinstance(parsed, dict):
            return SimplifiedSummary.from_raw_text(raw_text)
        return SimplifiedSummary.from_model_output(parsed)
