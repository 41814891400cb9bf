# infra_cdk/app.py
import os

import aws_cdk as cdk

from infra_cdk.health_notifier_stack import HealthNotifierStack

app = cdk.App()
environment = app.node.try_get_context("environment") or "dev"

HealthNotifierStack(app, f"HealthNotifierStack-{environment}",
    bedrock_region=app.node.try_get_context("bedrockRegion") or "us-east-1",
    bedrock_model_id=app.node.try_get_context("bedrockModelId") or "amazon.titan-text-express-v1",
    environment=environment,
    env=cdk.Environment(
        account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
        region=os.environ.get("CDK_DEFAULT_REGION"),
    ),
)

app.synth()
