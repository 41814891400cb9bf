# infra_cdk/health_notifier_stack.py
from aws_cdk import (
    Stack,
    Duration,
    CfnParameter,
    aws_cloudwatch as cloudwatch,
    aws_events as events,
    aws_events_targets as targets,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_logs as logs,
    CfnOutput
)
from constructs import Construct

# Must stay in line with lambdas/health_notifier/classifier.py
MAINTENANCE_CATEGORIES = ["scheduledChange", "maintenance", "plannedChange", "investigation"]
MAINTENANCE_EVENT_TYPES = [
    "AWS_EC2_INSTANCE_MAINTENANCE_SCHEDULED",
    "AWS_EC2_INSTANCE_MAINTENANCE_PENDING",
    "AWS_EC2_INSTANCE_MAINTENANCE_IN_PROGRESS",
    "AWS_EC2_INSTANCE_MAINTENANCE_COMPLETED",
    "AWS_RDS_MAINTENANCE_SCHEDULED",
    "AWS_RDS_MAINTENANCE_IN_PROGRESS",
    "AWS_RDS_MAINTENANCE_COMPLETED",
]


def _rule_invocations(rule: events.Rule) -> cloudwatch.Metric:
    return cloudwatch.Metric(namespace="AWS/Events", metric_name="Invocations",
        dimensions_map={"RuleName": rule.rule_name}, statistic="Sum")


class HealthNotifierStack(Stack):

    def __init__(self, scope: Construct, construct_id: str, bedrock_region: str = "us-east-1",
                 bedrock_model_id: str = "amazon.titan-text-express-v1", environment: str = "dev",
                 **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # === Parameters for Deployment ===
        teams_webhook_param = CfnParameter(self, "TeamsWebhookUrl", type="String", no_echo=True,
            description="The Microsoft Teams incoming webhook URL that receives the maintenance cards.")

        # === Shared Lambda Layer ===
        # Built with: pip install requests pydantic pydantic-settings -t lambda_layer/python
        dependencies_layer = _lambda.LayerVersion(self, "DependenciesLayer",
            code=_lambda.Code.from_asset("lambda_layer"),
            compatible_runtimes=[_lambda.Runtime.PYTHON_3_12],
            description="Third-party packages for the health notifier"
        )

        # === Processor Lambda ===
        health_processor_function = _lambda.Function(self, "HealthProcessorFunction",
            runtime=_lambda.Runtime.PYTHON_3_12,
            code=_lambda.Code.from_asset("lambdas", exclude=["**/__pycache__"]),
            handler="health_notifier.app.handler",
            timeout=Duration.minutes(5),
            memory_size=512,
            environment={
                "TEAMS_WEBHOOK_URL": teams_webhook_param.value_as_string,
                "BEDROCK_REGION": bedrock_region,
                "BEDROCK_MODEL_ID": bedrock_model_id,
                "ENVIRONMENT": environment,
                "LOG_LEVEL": "INFO",
            },
            log_retention=logs.RetentionDays.ONE_WEEK,
            layers=[dependencies_layer],
            description="Processes AWS Health events and sends simplified messages to Teams via Bedrock",
        )
        health_processor_function.add_to_role_policy(iam.PolicyStatement(
            actions=["bedrock:InvokeModel"],
            resources=[f"arn:aws:bedrock:{bedrock_region}::foundation-model/{bedrock_model_id}"],
        ))

        # === EventBridge Rules ===
        health_event_rule = events.Rule(self, "HealthEventRule",
            event_pattern=events.EventPattern(
                source=["aws.health"],
                detail_type=["AWS Health Event"],
                detail={"eventTypeCategory": MAINTENANCE_CATEGORIES},
            ),
            description="Captures AWS Health maintenance and scheduled change events",
        )
        health_event_rule.add_target(targets.LambdaFunction(health_processor_function))

        maintenance_event_rule = events.Rule(self, "MaintenanceEventRule",
            event_pattern=events.EventPattern(
                source=["aws.health"],
                detail_type=["AWS Health Event"],
                detail={"eventTypeCode": MAINTENANCE_EVENT_TYPES},
            ),
            description="Captures specific AWS maintenance event types",
        )
        maintenance_event_rule.add_target(targets.LambdaFunction(health_processor_function))

        # === Dashboard ===
        dashboard = cloudwatch.Dashboard(self, "HealthNotifierDashboard",
            dashboard_name=f"{self.stack_name}-dashboard",
            widgets=[
                [
                    cloudwatch.GraphWidget(title="Lambda Invocations",
                        left=[health_processor_function.metric_invocations()],
                        right=[health_processor_function.metric_errors()], width=12),
                    cloudwatch.GraphWidget(title="Lambda Duration",
                        left=[health_processor_function.metric_duration()], width=12),
                ],
                [
                    cloudwatch.GraphWidget(title="EventBridge Events",
                        left=[_rule_invocations(health_event_rule)],
                        right=[_rule_invocations(maintenance_event_rule)], width=12),
                    cloudwatch.GraphWidget(title="Lambda Throttles",
                        left=[health_processor_function.metric_throttles()], width=12),
                ],
            ],
        )

        # === Outputs ===
        CfnOutput(self, "LambdaFunctionArn", value=health_processor_function.function_arn,
            description="ARN of the Health Processor Lambda function")
        CfnOutput(self, "LambdaFunctionName", value=health_processor_function.function_name,
            description="Name of the Health Processor Lambda function")
        CfnOutput(self, "EventBridgeRuleArn", value=health_event_rule.rule_arn,
            description="ARN of the Health Event EventBridge rule")
        CfnOutput(self, "CloudWatchDashboardName", value=dashboard.dashboard_name,
            description="Name of the CloudWatch dashboard")
