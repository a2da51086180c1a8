#!/usr/bin/env python3
from typing import Optional

from aws_cdk import Stack
from constructs import Construct

from stacks.components import add_log_metrics, apply_settings, create_key, create_log_group, export
from stacks.settings import StackSettings


class LogGroupStack(Stack):
    """A KMS-encrypted log group with its metrics on the stack dashboard."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: Optional[StackSettings] = None,
        key_arn: Optional[str] = None,
        log_group_arn: Optional[str] = None,
        log_group_props: Optional[dict] = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.settings = settings or StackSettings()
        self.dashboard = apply_settings(self, self.settings)

        self.key = create_key(self, self.settings, key_arn=key_arn)
        self.log_group = create_log_group(
            self,
            self.settings,
            self.key,
            log_group_arn=log_group_arn,
            log_group_props=log_group_props,
        )

        add_log_metrics(self.dashboard, self.log_group)

        export(self, "KeyArn", self.key.key_arn)
        export(self, "LogGroupArn", self.log_group.log_group_arn)
