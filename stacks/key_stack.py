#!/usr/bin/env python3
from typing import Optional

from aws_cdk import Stack
from constructs import Construct

from stacks.components import apply_settings, create_key, export
from stacks.settings import StackSettings


class KeyStack(Stack):
    """A KMS key with rotation and the configured removal policy."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        settings: Optional[StackSettings] = None,
        key_arn: Optional[str] = None,
        key_props: Optional[dict] = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.settings = settings or StackSettings()
        self.dashboard = apply_settings(self, self.settings)

        # KMS key, or an existing one by ARN
        self.key = create_key(self, self.settings, key_arn=key_arn, key_props=key_props)

        export(self, "KeyArn", self.key.key_arn)
