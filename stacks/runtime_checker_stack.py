"""CDK Stack for the EC2 Runtime Checker Lambda."""

import os

from aws_cdk import (
    Stack,
    Duration,
    aws_lambda as lambda_,
    aws_iam as iam,
    aws_sns as sns,
    aws_events as events,
    aws_events_targets as targets,
    aws_logs as logs,
    aws_cloudwatch as cloudwatch,
    aws_cloudwatch_actions as cw_actions,
    CfnParameter,
    CfnOutput,
)
from constructs import Construct


LAMBDA_ASSET_PATH = os.path.join(os.path.dirname(__file__), "..", "lambda")
FUNCTION_NAME = "LambdaEC2RuntimeChecker"


class RuntimeCheckerStack(Stack):
    """
    CDK Stack for policy-driven EC2 runtime limits.

    Runs the checker on an EventBridge schedule with:
    - Policies passed inline as JSON
    - Optional VPC scoping
    - SNS report on every cycle with findings
    - Configurable dry-run mode (on by default)

    Reserved concurrency of 1 keeps a single active runner, so two
    invocations never race on the same terminations.
    """

    def __init__(self, scope: Construct, construct_id: str, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Parameters
        dry_run_param = CfnParameter(
            self, "DryRunMode",
            type="String",
            default="true",
            allowed_values=["true", "false"],
            description="[SAFETY] Report only, never terminate. Set to 'false' only when the policies have been validated in dry-run."
        )

        policies_param = CfnParameter(
            self, "Policies",
            type="String",
            default='[{"maxRuntimeHours": 24}]',
            description="[POLICY] JSON array of policies: instanceType, name (glob with *), tags, maxRuntimeHours. First matching policy wins."
        )

        vpc_id_param = CfnParameter(
            self, "VpcId",
            type="String",
            default="",
            description="[SCOPE] Only inspect instances in this VPC. Leave empty to inspect the whole region."
        )

        schedule_rate_param = CfnParameter(
            self, "ScheduleRateMinutes",
            type="Number",
            default=15,
            min_value=1,
            description="[SCHEDULING] Execution frequency in minutes."
        )

        log_retention_param = CfnParameter(
            self, "LogRetentionDays",
            type="Number",
            default=30,
            allowed_values=["1", "3", "7", "14", "30", "60", "90"],
            description="[LOGGING] CloudWatch log retention period in days."
        )

        log_level_param = CfnParameter(
            self, "LogLevel",
            type="String",
            default="INFO",
            allowed_values=["DEBUG", "INFO", "WARNING", "ERROR"],
            description="[LOGGING] Log verbosity. DEBUG includes the DescribeInstances filters and per-page counts."
        )

        # SNS Topic for reports; subscribe manually after deployment
        sns_topic = sns.Topic(
            self, "RuntimeCheckerTopic",
            topic_name="EC2RuntimeCheckerNotifications",
            display_name="Long-Running EC2 Instances Alert"
        )

        # IAM Role for Lambda
        lambda_role = iam.Role(
            self, "RuntimeCheckerRole",
            role_name="RoleEC2RuntimeChecker",
            assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
            managed_policies=[
                iam.ManagedPolicy.from_aws_managed_policy_name(
                    "service-role/AWSLambdaBasicExecutionRole"
                )
            ]
        )

        lambda_role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=[
                "ec2:DescribeInstances",
                "ec2:TerminateInstances",
            ],
            resources=["*"]
        ))

        lambda_role.add_to_policy(iam.PolicyStatement(
            effect=iam.Effect.ALLOW,
            actions=["sns:Publish"],
            resources=[sns_topic.topic_arn]
        ))

        # Powertools is not part of the Lambda runtime
        powertools_layer = lambda_.LayerVersion.from_layer_version_arn(
            self, "PowertoolsLayer",
            f"arn:aws:lambda:{self.region}:017000801446:layer:AWSLambdaPowertoolsPythonV3-python313-arm64:7"
        )

        checker_lambda = lambda_.Function(
            self, "RuntimeCheckerLambda",
            function_name=FUNCTION_NAME,
            description="Terminates EC2 instances running longer than their policy allows",
            runtime=lambda_.Runtime.PYTHON_3_13,
            architecture=lambda_.Architecture.ARM_64,
            handler="ec2_runtime_checker.handler.lambda_handler",
            code=lambda_.Code.from_asset(LAMBDA_ASSET_PATH),
            role=lambda_role,
            layers=[powertools_layer],
            timeout=Duration.seconds(300),
            memory_size=256,
            reserved_concurrent_executions=1,
            environment={
                "DRY_RUN": dry_run_param.value_as_string,
                "POLICIES_JSON": policies_param.value_as_string,
                "VPC_ID": vpc_id_param.value_as_string,
                "SNS_TOPIC_ARN": sns_topic.topic_arn,
                "LOG_LEVEL": log_level_param.value_as_string,
                "POWERTOOLS_METRICS_NAMESPACE": "EC2RuntimeChecker",
            }
        )

        # RetentionDays enum values cannot be chosen from a deploy-time
        # parameter, so the function's log group is declared directly
        log_group = logs.CfnLogGroup(
            self, "RuntimeCheckerLogGroup",
            log_group_name=f"/aws/lambda/{FUNCTION_NAME}",
            retention_in_days=log_retention_param.value_as_number
        )
        checker_lambda.node.add_dependency(log_group)

        schedule_rule = events.Rule(
            self, "RuntimeCheckerScheduleRule",
            rule_name="EC2RuntimeCheckerSchedule",
            description="Runs the EC2 runtime check on a fixed rate",
            schedule=events.Schedule.rate(Duration.minutes(schedule_rate_param.value_as_number)),
            enabled=True
        )

        # No retries: the next scheduled run is the retry
        schedule_rule.add_target(targets.LambdaFunction(
            checker_lambda,
            retry_attempts=0,
            max_event_age=Duration.hours(1)
        ))

        lambda_errors_alarm = cloudwatch.Alarm(
            self, "LambdaErrorsAlarm",
            alarm_name="EC2RuntimeChecker-LambdaErrors",
            alarm_description="Alert when the runtime checker Lambda fails (usually invalid policy configuration)",
            metric=checker_lambda.metric_errors(
                period=Duration.minutes(15),
                statistic="Sum"
            ),
            threshold=1,
            evaluation_periods=1,
            treat_missing_data=cloudwatch.TreatMissingData.NOT_BREACHING
        )
        lambda_errors_alarm.add_alarm_action(cw_actions.SnsAction(sns_topic))

        # Outputs
        CfnOutput(
            self, "LambdaFunctionName",
            description="Name of the Lambda function",
            value=checker_lambda.function_name,
            export_name="EC2RuntimeCheckerLambdaName"
        )

        CfnOutput(
            self, "SNSTopicArn",
            description="ARN of the SNS topic for notifications",
            value=sns_topic.topic_arn
        )

        CfnOutput(
            self, "DryRunModeOutput",
            description="Current dry-run mode setting",
            value=dry_run_param.value_as_string
        )
