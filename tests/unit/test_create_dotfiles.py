"""
Unit tests for the DOT file writer
Tests single writes, batch isolation and the command line interface
"""

import json
import logging

import pytest
from click.testing import CliRunner

from tools.create_dotfiles import create_dot_files, main, write_dot_file
from tools.errors import OutputWriteError

TEMPLATE = {
    "Resources": {
        "Key": {"Type": "AWS::KMS::Key", "Properties": {"EnableKeyRotation": True}},
        "Topic": {"Type": "AWS::SNS::Topic", "DependsOn": ["Key"]},
        "CDKMetadata": {"Type": "AWS::CDK::Metadata", "Properties": {"Analytics": "v2"}},
    }
}


class TestCreateDotFiles:
    """Test class for DOT file creation"""

    @pytest.fixture
    def cdk_out(self, tmp_path):
        """Create a cloud assembly with one valid and one broken template"""
        (tmp_path / "ts.template.json").write_text(json.dumps(TEMPLATE))
        (tmp_path / "bad.template.json").write_text("{")
        (tmp_path / "manifest.json").write_text(
            json.dumps(
                {
                    "artifacts": {
                        "bad.assets": {
                            "type": "cdk:asset-manifest",
                            "properties": {"file": "bad.assets.json"},
                        },
                        "ts.assets": {
                            "type": "cdk:asset-manifest",
                            "properties": {"file": "ts.assets.json"},
                        },
                    }
                }
            )
        )
        return tmp_path

    def test_write_dot_file(self, cdk_out):
        output = write_dot_file(cdk_out / "ts.template.json")
        assert output == cdk_out / "ts.template.json.dot"

        document = output.read_text()
        assert '"Key" [label="AWS::KMS::Key\\nEnableKeyRotation"];' in document
        assert '"Topic" [label="AWS::SNS::Topic"];' in document
        assert '"Topic" -> "Key";' in document
        assert "CDKMetadata" not in document

    def test_custom_suffix(self, cdk_out):
        output = write_dot_file(cdk_out / "ts.template.json", suffix=".gv")
        assert output.name == "ts.template.json.gv"

    def test_batch_skips_undecodable_templates(self, cdk_out, caplog):
        templates = [
            cdk_out / "bad.template.json",
            cdk_out / "missing.template.json",
            cdk_out / "ts.template.json",
        ]
        with caplog.at_level(logging.ERROR):
            written = create_dot_files(templates)

        assert written == [cdk_out / "ts.template.json.dot"]
        assert not (cdk_out / "bad.template.json.dot").exists()
        assert "bad.template.json" in caplog.text
        assert "missing.template.json" in caplog.text

    def test_batch_skips_unencodable_template(self, cdk_out, caplog):
        # A lone surrogate escape is valid JSON but has no UTF-8 encoding
        (cdk_out / "odd.template.json").write_text(
            '{"Resources": {"Odd": {"Type": "X", "Properties": {"\\ud800": 1}}}}'
        )
        with caplog.at_level(logging.ERROR):
            written = create_dot_files([cdk_out / "odd.template.json", cdk_out / "ts.template.json"])

        assert written == [cdk_out / "ts.template.json.dot"]
        assert not (cdk_out / "odd.template.json.dot").exists()
        assert "odd.template.json" in caplog.text

    def test_write_failure_propagates(self, cdk_out):
        # A directory where the output file should go makes the write fail
        (cdk_out / "ts.template.json.dot").mkdir()
        with pytest.raises(OutputWriteError):
            create_dot_files([cdk_out / "ts.template.json"])

    def test_cli(self, cdk_out):
        result = CliRunner().invoke(main, ["--cdk-out", str(cdk_out)])
        assert result.exit_code == 0
        assert (cdk_out / "ts.template.json.dot").exists()

    def test_cli_env_var(self, cdk_out):
        result = CliRunner().invoke(main, [], env={"CDK_OUT_DIR": str(cdk_out)})
        assert result.exit_code == 0
        assert (cdk_out / "ts.template.json.dot").exists()

    def test_cli_missing_manifest(self, tmp_path):
        result = CliRunner().invoke(main, ["--cdk-out", str(tmp_path / "nowhere")])
        assert result.exit_code == 1

    def test_cli_write_failure(self, cdk_out):
        (cdk_out / "ts.template.json.dot").mkdir()
        result = CliRunner().invoke(main, ["--cdk-out", str(cdk_out)])
        assert result.exit_code == 1

    def test_cli_malformed_manifest(self, tmp_path):
        (tmp_path / "manifest.json").write_text(
            json.dumps({"artifacts": {"qs": {"type": "cdk:asset-manifest", "properties": {"file": 5}}}})
        )
        result = CliRunner().invoke(main, ["--cdk-out", str(tmp_path)])
        assert result.exit_code == 1
        assert not isinstance(result.exception, AttributeError)
