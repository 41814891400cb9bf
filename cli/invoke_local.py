# cli/invoke_local.py
import argparse
import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load TEAMS_WEBHOOK_URL, BEDROCK_REGION and AWS credentials from a .env file for local testing
load_dotenv()

from lambdas.health_notifier.app import handler

DEFAULT_EVENT_PATH = Path(__file__).resolve().parent.parent / "tests" / "sample_health_event.json"


def invoke_local(event_path: Path) -> dict:
    """
    Runs the health notifier handler against a saved event using your live
    AWS credentials and the configured Teams webhook.
    """
    event = json.loads(event_path.read_text(encoding="utf-8"))
    print(f"--- Invoking health notifier with {event_path.name} ---")
    result = handler(event, None)
    print(json.dumps(result, indent=2))

    if result["statusCode"] == 200:
        print("✅ Handler processed the event successfully.")
    else:
        print(f"❌ Handler returned error status: {result['statusCode']}")
    return result


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Invoke the health notifier Lambda locally.")
    parser.add_argument("event", nargs="?", type=Path, default=DEFAULT_EVENT_PATH,
                        help="Path to an AWS Health event (or Records batch) JSON file.")
    parser.add_argument("--debug", action="store_true", help="Log at DEBUG level.")
    args = parser.parse_args()
    if args.debug:
        os.environ["LOG_LEVEL"] = "DEBUG"

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    invoke_local(args.event)
