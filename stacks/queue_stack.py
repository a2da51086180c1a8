#!/usr/bin/env python3
from typing import Optional

from aws_cdk import Stack, aws_sns_subscriptions as subscriptions
from constructs import Construct

from stacks.components import (
    add_queue_metrics,
    add_topic_metrics,
    apply_settings,
    create_key,
    create_queue,
    create_topic,
    export,
)
from stacks.settings import StackSettings


class QueueStack(Stack):
    """
    An encrypted SQS queue, with a dead-letter queue, subscribed to a topic.

    The key and topic are created here unless existing ARNs are given, which
    lets several queue stacks share one topic stack.
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: Optional[StackSettings] = None,
        key_arn: Optional[str] = None,
        topic_arn: Optional[str] = None,
        queue_arn: Optional[str] = None,
        queue_props: Optional[dict] = None,
        dead_letter_queue_enabled: bool = True,
        dead_letter_queue_props: Optional[dict] = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.settings = settings or StackSettings()
        self.dashboard = apply_settings(self, self.settings)

        self.key = create_key(self, self.settings, key_arn=key_arn)
        self.topic = create_topic(self, self.settings, self.key, topic_arn=topic_arn)
        add_topic_metrics(self.dashboard, self.topic)

        self.queue, self.dead_letter_queue = create_queue(
            self,
            self.settings,
            self.key,
            queue_arn=queue_arn,
            queue_props=queue_props,
            dead_letter_queue_enabled=dead_letter_queue_enabled,
            dead_letter_queue_props=dead_letter_queue_props,
        )
        self.topic.add_subscription(subscriptions.SqsSubscription(self.queue))

        # Outputs
        export(self, "KeyArn", self.key.key_arn)
        export(self, "TopicArn", self.topic.topic_arn)
        export(self, "QueueName", self.queue.queue_name)
        export(self, "QueueArn", self.queue.queue_arn)
        export(self, "QueueUrl", self.queue.queue_url)

        if self.dead_letter_queue:
            add_queue_metrics(self.dashboard, self.queue, self.dead_letter_queue)
            export(self, "DeadLetterQueueName", self.dead_letter_queue.queue_name)
            export(self, "DeadLetterQueueArn", self.dead_letter_queue.queue_arn)
            export(self, "DeadLetterQueueUrl", self.dead_letter_queue.queue_url)
        else:
            add_queue_metrics(self.dashboard, self.queue)
