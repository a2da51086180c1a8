"""Sample applications selectable with ``cdk synth -c apps=<name>``."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from aws_cdk import App, Environment, Stack

from stacks.key_stack import KeyStack
from stacks.log_group_stack import LogGroupStack
from stacks.queue_stack import QueueStack
from stacks.settings import ErrorMessage, StackSettings
from stacks.topic_stack import TopicStack

logger = logging.getLogger(__name__)


@dataclass
class StackResult:
    """The stacks an app created and a short description of it."""

    description: str
    stacks: List[Stack] = field(default_factory=list)


def key_app(app: App, settings: StackSettings, env: Optional[Environment] = None) -> StackResult:
    return StackResult(
        description="Creates a KMS key with rotation and a removal policy.",
        stacks=[KeyStack(app, "ks", settings=settings, env=env)],
    )


def topic_app(app: App, settings: StackSettings, env: Optional[Environment] = None) -> StackResult:
    return StackResult(
        description="Creates an SNS topic encrypted via KMS. Adds topic metrics to a CloudWatch dashboard.",
        stacks=[TopicStack(app, "ts", settings=settings, env=env)],
    )


def log_group_app(app: App, settings: StackSettings, env: Optional[Environment] = None) -> StackResult:
    return StackResult(
        description="Creates a log group encrypted via KMS.",
        stacks=[LogGroupStack(app, "lgs", settings=settings, env=env)],
    )


def queue_app(app: App, settings: StackSettings, env: Optional[Environment] = None) -> StackResult:
    return StackResult(
        description="Creates an encrypted SQS queue with a supporting dead-letter queue.",
        stacks=[QueueStack(app, "qs", settings=settings, env=env)],
    )


def queues_app(app: App, settings: StackSettings, env: Optional[Environment] = None) -> StackResult:
    """Two queue stacks sharing the key and topic of a topic stack."""
    topic_stack = TopicStack(app, "ts1", settings=settings, env=env)
    queue_stacks = [
        QueueStack(
            app,
            construct_id,
            settings=settings,
            key_arn=topic_stack.key.key_arn,
            topic_arn=topic_stack.topic.topic_arn,
            env=env,
        )
        for construct_id in ("qs1", "qs2")
    ]
    return StackResult(
        description="Creates an SNS topic stack with two SQS queues attached.",
        stacks=[topic_stack, *queue_stacks],
    )


APPS: Dict[str, Callable[..., StackResult]] = {
    "keyApp": key_app,
    "logGroupApp": log_group_app,
    "queueApp": queue_app,
    "queuesApp": queues_app,
    "topicApp": topic_app,
}


def create_apps(
    app: App,
    name: Optional[str],
    settings: StackSettings,
    env: Optional[Environment] = None,
) -> Optional[StackResult]:
    """Create the sample app called ``name``.

    Unknown names log the available apps and create nothing.
    """
    creator = APPS.get(name or "")
    if creator is None:
        logger.warning("%s %r. Please try one of: %s", ErrorMessage.UNKNOWN_APP.value, name, ", ".join(sorted(APPS)))
        return None

    result = creator(app, settings, env)
    logger.info(
        "Created %d %s: %s",
        len(result.stacks),
        "stacks" if len(result.stacks) > 1 else "stack",
        [stack.stack_name for stack in result.stacks],
    )
    return result
