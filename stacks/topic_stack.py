#!/usr/bin/env python3
from typing import Iterable, Optional

from aws_cdk import Stack
from constructs import Construct

from stacks.components import add_topic_metrics, apply_settings, create_key, create_topic, export
from stacks.settings import StackSettings


class TopicStack(Stack):
    """An SNS topic encrypted with a KMS key, graphed on the stack dashboard."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: Optional[StackSettings] = None,
        key_arn: Optional[str] = None,
        key_props: Optional[dict] = None,
        topic_arn: Optional[str] = None,
        topic_props: Optional[dict] = None,
        email_subscribers: Iterable[str] = (),
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.settings = settings or StackSettings()
        self.dashboard = apply_settings(self, self.settings)

        self.key = create_key(self, self.settings, key_arn=key_arn, key_props=key_props)
        self.topic = create_topic(
            self,
            self.settings,
            self.key,
            topic_arn=topic_arn,
            topic_props=topic_props,
            email_subscribers=email_subscribers,
        )

        add_topic_metrics(self.dashboard, self.topic)

        # Outputs
        export(self, "KeyArn", self.key.key_arn)
        export(self, "TopicArn", self.topic.topic_arn)
