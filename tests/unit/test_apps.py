"""
Unit tests for the sample app registry
Tests app selection and multi-stack apps
"""

import logging

import aws_cdk as core
import aws_cdk.assertions as assertions
import pytest

from stacks.apps import APPS, create_apps
from stacks.queue_stack import QueueStack
from stacks.settings import StackSettings
from stacks.topic_stack import TopicStack


class TestCreateApps:
    """Test class for create_apps"""

    @pytest.fixture
    def app(self):
        """Create CDK app for testing"""
        return core.App()

    @pytest.fixture
    def settings(self):
        return StackSettings()

    @pytest.mark.parametrize("name", sorted(APPS))
    def test_every_app_creates_stacks(self, app, settings, name):
        result = create_apps(app, name, settings)
        assert result is not None
        assert result.stacks
        assert result.description

    def test_unknown_app(self, app, settings, caplog):
        with caplog.at_level(logging.WARNING):
            assert create_apps(app, "nopeApp", settings) is None
        assert "queueApp" in caplog.text
        assert not [child for child in app.node.children if isinstance(child, core.Stack)]

    def test_missing_app_name(self, app, settings):
        assert create_apps(app, None, settings) is None

    def test_queues_app_shares_topic(self, app, settings):
        result = create_apps(app, "queuesApp", settings)
        topic_stack, *queue_stacks = result.stacks

        assert isinstance(topic_stack, TopicStack)
        assert [stack.stack_name for stack in queue_stacks] == ["qs1", "qs2"]
        assert all(isinstance(stack, QueueStack) for stack in queue_stacks)

        template = assertions.Template.from_stack(queue_stacks[0])
        template.resource_count_is("AWS::SNS::Topic", 0)
        template.resource_count_is("AWS::KMS::Key", 0)
        template.resource_count_is("AWS::SQS::Queue", 2)
