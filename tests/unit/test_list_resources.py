"""
Unit tests for the resource lister
Tests service grouping, colors and the command line interface
"""

import json

from click.testing import CliRunner

from tools.list_resources import DEFAULT_COLOR, format_group, group_services, main, service_prefix


class TestGroupServices:
    """Test class for group_services"""

    def test_service_prefix(self):
        assert service_prefix("AWS::SQS::QueuePolicy") == "AWS::SQS"

    def test_groups_sorted_and_counted(self):
        groups = group_services(
            ["AWS::SQS::Queue", "AWS::KMS::Key", "AWS::SQS::Queue", "AWS::SQS::QueuePolicy"]
        )
        assert [group.prefix for group in groups] == ["AWS::KMS", "AWS::SQS"]
        assert groups[0].services == [("AWS::KMS::Key", 1)]
        assert groups[1].services == [("AWS::SQS::Queue", 2), ("AWS::SQS::QueuePolicy", 1)]

    def test_colors(self):
        groups = group_services(["AWS::S3::Bucket", "Custom::Thing"])
        assert groups[0].color == 106
        assert groups[1].color == DEFAULT_COLOR

    def test_empty(self):
        assert group_services([]) == []

    def test_format_group_counts(self):
        (group,) = group_services(["AWS::SQS::Queue", "AWS::SQS::Queue", "AWS::SQS::QueuePolicy"])
        lines = format_group(group).splitlines()
        assert "AWS::SQS::Queue" in lines[0] and lines[0].endswith(" (2)")
        assert lines[1].endswith("AWS::SQS::QueuePolicy\x1b[0m")


class TestListResourcesCli:
    """Test class for the list-resources command"""

    def test_lists_each_stack(self, tmp_path):
        (tmp_path / "qs.template.json").write_text(
            json.dumps(
                {
                    "Resources": {
                        "Queue": {"Type": "AWS::SQS::Queue"},
                        "DeadLetterQueue": {"Type": "AWS::SQS::Queue"},
                        "Key": {"Type": "AWS::KMS::Key"},
                    }
                }
            )
        )
        (tmp_path / "manifest.json").write_text(
            json.dumps(
                {
                    "artifacts": {
                        "qs": {
                            "type": "aws:cloudformation:stack",
                            "properties": {"templateFile": "qs.template.json"},
                        }
                    }
                }
            )
        )

        result = CliRunner().invoke(main, ["--cdk-out", str(tmp_path)])

        assert result.exit_code == 0
        assert "Stack qs.template.json / 3 Resources" in result.output
        assert "AWS::KMS::Key" in result.output
        assert "AWS::SQS::Queue (2)" in result.output

    def test_missing_manifest(self, tmp_path):
        result = CliRunner().invoke(main, ["--cdk-out", str(tmp_path)])
        assert result.exit_code == 1
