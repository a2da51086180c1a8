"""
Explicit stack configuration.

Every stack receives a ``StackSettings`` instead of reading package metadata
or the environment itself. Settings are immutable; ``merged`` layers
overrides on top of an existing value.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from aws_cdk import RemovalPolicy


class Stage(str, Enum):
    """SDLC stage of an application."""

    DEVELOPMENT = "dev"
    STAGING = "staging"
    PRODUCTION = "prod"


class DataClassification(str, Enum):
    """Classification of the data an application stores."""

    CONFIDENTIAL = "confidential"
    INTERNAL = "internal"
    PRIVATE = "private"
    PUBLIC = "public"
    RESTRICTED = "restricted"


class ErrorMessage(str, Enum):
    EMAIL_SUBSCRIBER_REQUIRED = "Email subscribers must be non-empty email addresses."
    UNKNOWN_APP = "Unknown app."


@dataclass(frozen=True)
class PackageInfo:
    """Package metadata recorded on every stack."""

    name: str = "aws-stacks"
    author: str = "Zach Arbon"
    version: str = "1.0.0"
    repository_url: str = "https://github.com/arbon/aws-stacks"


@dataclass(frozen=True)
class StackSettings:
    package: PackageInfo = field(default_factory=PackageInfo)
    stage: Stage = Stage.DEVELOPMENT
    data_classification: DataClassification = DataClassification.PRIVATE
    # By default, removed resources are physically destroyed
    removal_policy: RemovalPolicy = RemovalPolicy.DESTROY

    def merged(self, **overrides) -> "StackSettings":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @property
    def removal_policy_name(self) -> str:
        # CDK names such as RETAIN_ON_UPDATE_OR_DELETE -> retain-on-update-or-delete
        return self.removal_policy.name.lower().replace("_", "-")

    @property
    def tags(self) -> dict:
        return {
            "app:data:classification": self.data_classification.value,
            "app:data:removal-policy": self.removal_policy_name,
            "app:package:author": self.package.author,
            "app:package:name": self.package.name,
            "app:package:version": self.package.version,
            "app:stage": self.stage.value,
        }


def settings_from_context(node, base: Optional[StackSettings] = None) -> StackSettings:
    """Layer the ``stage``, ``data_classification`` and ``version`` context values over ``base``."""
    base = base or StackSettings()
    stage = node.try_get_context("stage")
    data_classification = node.try_get_context("data_classification")
    version = node.try_get_context("version")

    return base.merged(
        package=replace(base.package, version=version) if version else None,
        stage=Stage(stage) if stage else None,
        data_classification=DataClassification(data_classification) if data_classification else None,
    )
