#!/usr/bin/env python3
import logging
import os

import aws_cdk as cdk

from stacks.apps import create_apps
from stacks.settings import settings_from_context

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

app = cdk.App()

# Environment configuration
env = cdk.Environment(
    account=app.node.try_get_context("account") or os.environ.get("CDK_DEFAULT_ACCOUNT"),
    region=app.node.try_get_context("region") or os.environ.get("CDK_DEFAULT_REGION"),
)

# Stack settings shared by every stack of the selected app
settings = settings_from_context(app.node)

create_apps(app, app.node.try_get_context("apps"), settings, env=env)

app.synth()
