"""
Construct building blocks shared by the stacks.

Each helper takes the stack's ``StackSettings`` explicitly and merges the
caller's construct properties over its own defaults.
"""

from typing import Iterable, Optional, Tuple

from aws_cdk import (
    CfnOutput,
    Duration,
    Stack,
    Tags,
    aws_cloudwatch as cloudwatch,
    aws_iam as iam,
    aws_kms as kms,
    aws_logs as logs,
    aws_sns as sns,
    aws_sns_subscriptions as subscriptions,
    aws_sqs as sqs,
)

from stacks.settings import ErrorMessage, StackSettings


def apply_settings(stack: Stack, settings: StackSettings) -> cloudwatch.Dashboard:
    """Record package metadata and tags on ``stack`` and create its dashboard."""
    package = settings.package
    stack.add_metadata(
        "Package",
        {
            "Name": package.name,
            "Author": package.author,
            "Version": package.version,
            "RepositoryUrl": package.repository_url,
        },
    )

    for key, value in settings.tags.items():
        Tags.of(stack).add(key, value)

    dashboard = cloudwatch.Dashboard(stack, "Dashboard")
    dashboard.add_widgets(
        cloudwatch.TextWidget(
            markdown=(
                f"# {package.name}-{package.version}\n"
                f"**Stack** {stack.stack_name} / **Region** {stack.region} / "
                f"**Stage** {settings.stage.value} / "
                f"**Data Classification** {settings.data_classification.value} / "
                f"**Removal Policy** {settings.removal_policy_name}"
            ),
            height=2,
            width=24,
        )
    )
    dashboard.apply_removal_policy(settings.removal_policy)
    return dashboard


def export(stack: Stack, name: str, value: str) -> CfnOutput:
    """Create an output exported as ``<stack name>:<name>``."""
    return CfnOutput(stack, name, export_name=f"{stack.stack_name}:{name}", value=value)


def create_key(
    stack: Stack,
    settings: StackSettings,
    key_arn: Optional[str] = None,
    key_props: Optional[dict] = None,
) -> kms.IKey:
    """Create a rotating KMS key, or import ``key_arn`` when given."""
    if key_arn:
        return kms.Key.from_key_arn(stack, "Key", key_arn)

    return kms.Key(
        stack,
        "Key",
        **{
            "enable_key_rotation": True,
            "removal_policy": settings.removal_policy,
            **(key_props or {}),
        },
    )


def create_topic(
    stack: Stack,
    settings: StackSettings,
    key: kms.IKey,
    topic_arn: Optional[str] = None,
    topic_props: Optional[dict] = None,
    email_subscribers: Iterable[str] = (),
) -> sns.ITopic:
    """Create a topic encrypted with ``key``, or import ``topic_arn``."""
    email_subscribers = list(email_subscribers)
    if any(not address or not address.strip() for address in email_subscribers):
        raise ValueError(ErrorMessage.EMAIL_SUBSCRIBER_REQUIRED.value)

    if topic_arn:
        topic = sns.Topic.from_topic_arn(stack, "Topic", topic_arn)
    else:
        topic = sns.Topic(stack, "Topic", **{"master_key": key, **(topic_props or {})})
        topic.node.add_dependency(key)
        topic.apply_removal_policy(settings.removal_policy)

    for address in email_subscribers:
        topic.add_subscription(subscriptions.EmailSubscription(address))

    return topic


def create_queue(
    stack: Stack,
    settings: StackSettings,
    key: kms.IKey,
    queue_arn: Optional[str] = None,
    queue_props: Optional[dict] = None,
    dead_letter_queue_enabled: bool = True,
    dead_letter_queue_props: Optional[dict] = None,
) -> Tuple[sqs.IQueue, Optional[sqs.IQueue]]:
    """Create a KMS-encrypted queue and its dead-letter queue.

    When ``queue_arn`` is given the queue is imported and no dead-letter
    queue is created.

    Returns:
        The queue and the dead-letter queue (or None).
    """
    if queue_arn:
        return sqs.Queue.from_queue_arn(stack, "Queue", queue_arn), None

    dead_letter_queue = None
    if dead_letter_queue_enabled:
        dead_letter_queue = sqs.Queue(
            stack,
            "DeadLetterQueue",
            **{
                "encryption": sqs.QueueEncryption.KMS,
                "encryption_master_key": key,
                "retention_period": Duration.days(14),
                **(dead_letter_queue_props or {}),
            },
        )
        dead_letter_queue.apply_removal_policy(settings.removal_policy)

    queue = sqs.Queue(
        stack,
        "Queue",
        **{
            "encryption": sqs.QueueEncryption.KMS,
            "encryption_master_key": key,
            "dead_letter_queue": (
                sqs.DeadLetterQueue(max_receive_count=5, queue=dead_letter_queue)
                if dead_letter_queue
                else None
            ),
            "retention_period": Duration.days(14),
            **(queue_props or {}),
        },
    )
    queue.apply_removal_policy(settings.removal_policy)
    return queue, dead_letter_queue


def create_log_group(
    stack: Stack,
    settings: StackSettings,
    key: kms.IKey,
    log_group_arn: Optional[str] = None,
    log_group_props: Optional[dict] = None,
) -> logs.ILogGroup:
    """Create an encrypted, infrequent-access log group kept for two years."""
    if log_group_arn:
        return logs.LogGroup.from_log_group_arn(stack, "LogGroup", log_group_arn)

    log_group = logs.LogGroup(
        stack,
        "LogGroup",
        **{
            "encryption_key": key,
            "log_group_class": logs.LogGroupClass.INFREQUENT_ACCESS,
            "removal_policy": settings.removal_policy,
            "retention": logs.RetentionDays.TWO_YEARS,
            **(log_group_props or {}),
        },
    )
    log_group.node.add_dependency(key)

    # CloudWatch Logs needs the key to encrypt events
    key.grant_encrypt_decrypt(iam.ServicePrincipal(f"logs.{stack.region}.amazonaws.com"))
    return log_group


def add_topic_metrics(dashboard: cloudwatch.Dashboard, topic: sns.ITopic) -> None:
    dimensions_map = {"TopicName": topic.topic_name}

    def sns_metric(metric_name, statistic, label=None):
        return cloudwatch.Metric(
            namespace="AWS/SNS",
            metric_name=metric_name,
            dimensions_map=dimensions_map,
            statistic=statistic,
            label=label,
        )

    publish_size = sns_metric("PublishSize", "min")

    dashboard.add_widgets(
        cloudwatch.GraphWidget(
            title=f"SNS / Messages ({topic.topic_name})",
            width=12,
            height=5,
            left=[
                sns_metric("NumberOfMessagesPublished", "sum", "Published"),
                sns_metric("NumberOfNotificationsDelivered", "sum", "Delivered"),
            ],
            right=[sns_metric("NumberOfNotificationsFailed", "sum", "Failed")],
        ),
        cloudwatch.GraphWidget(
            title=f"SNS / Message Size ({topic.topic_name})",
            width=12,
            height=5,
            left=[
                publish_size,
                publish_size.with_(statistic="avg"),
                publish_size.with_(statistic="max"),
            ],
            right=[publish_size.with_(statistic="sum")],
        ),
    )


def add_queue_metrics(dashboard: cloudwatch.Dashboard, *queues: sqs.IQueue) -> None:
    """Graph visible and oldest-message metrics for each queue."""

    def sqs_metric(queue, metric_name, statistic):
        return cloudwatch.Metric(
            namespace="AWS/SQS",
            metric_name=metric_name,
            dimensions_map={"QueueName": queue.queue_name},
            statistic=statistic,
            period=Duration.minutes(5),
        )

    dashboard.add_widgets(
        *[
            cloudwatch.GraphWidget(
                title=f"SQS / Messages ({queue.queue_name})",
                width=12,
                height=5,
                left=[
                    sqs_metric(queue, "ApproximateNumberOfMessagesVisible", "max"),
                    sqs_metric(queue, "NumberOfMessagesReceived", "sum"),
                ],
                right=[sqs_metric(queue, "ApproximateAgeOfOldestMessage", "max")],
            )
            for queue in queues
        ]
    )


def add_log_metrics(dashboard: cloudwatch.Dashboard, log_group: logs.ILogGroup) -> None:
    dimensions_map = {"LogGroupName": log_group.log_group_name}

    incoming_bytes = cloudwatch.Metric(
        namespace="AWS/Logs",
        metric_name="IncomingBytes",
        dimensions_map=dimensions_map,
        statistic="min",
    )
    incoming_log_events = cloudwatch.Metric(
        namespace="AWS/Logs",
        metric_name="IncomingLogEvents",
        dimensions_map=dimensions_map,
        statistic="sum",
    )

    dashboard.add_widgets(
        cloudwatch.GraphWidget(
            title=f"Cloudwatch / Events ({log_group.log_group_name})",
            width=12,
            height=5,
            left=[incoming_log_events],
        ),
        cloudwatch.GraphWidget(
            title=f"Cloudwatch / Bytes ({log_group.log_group_name})",
            width=12,
            height=5,
            left=[
                incoming_bytes,
                incoming_bytes.with_(statistic="avg"),
                incoming_bytes.with_(statistic="max"),
            ],
        ),
    )
