"""
Tests for client configuration management.
"""

import pytest
import yaml

from cfn_client.config import (
    ClientConfiguration,
    load_configuration,
    resolve_configuration,
)
from cfn_client.exceptions import ConfigurationError


class TestClientConfiguration:
    """Test ClientConfiguration dataclass."""

    def test_valid_configuration(self):
        """Test a configuration with both settings validates."""
        config = ClientConfiguration(profile="dev", region="us-east-1")

        assert config.is_valid
        assert config.validate() is config
        assert config.to_dict() == {"profile": "dev", "region": "us-east-1"}

    def test_missing_settings(self):
        """Test validation fails when a setting is missing."""
        with pytest.raises(ConfigurationError) as exc_info:
            ClientConfiguration(profile="dev").validate()

        assert exc_info.value.message == "Invalid awsProfile or Invalid awsRegion"
        assert exc_info.value.details is None

    def test_from_dict_key_spellings(self):
        """Test all accepted key spellings."""
        assert ClientConfiguration.from_dict(
            {"awsProfile": "AWS_PROFILE", "awsRegion": "AWS_REGION"}
        ) == ClientConfiguration(profile="AWS_PROFILE", region="AWS_REGION")
        assert ClientConfiguration.from_dict(
            {"aws_profile": "dev", "aws_region": "us-west-2"}
        ) == ClientConfiguration(profile="dev", region="us-west-2")
        assert ClientConfiguration.from_dict(
            {"profile": "dev", "region": "us-west-2"}
        ) == ClientConfiguration(profile="dev", region="us-west-2")

    def test_from_dict_empty(self):
        """Test an empty dict gives an invalid configuration."""
        config = ClientConfiguration.from_dict({})

        assert config == ClientConfiguration()
        assert not config.is_valid

    def test_from_env(self):
        """Test reading settings from the environment."""
        config = ClientConfiguration.from_env(
            {"AWS_PROFILE": "dev", "AWS_REGION": "eu-west-1"}
        )

        assert config == ClientConfiguration(profile="dev", region="eu-west-1")

    def test_from_env_default_region(self):
        """Test AWS_DEFAULT_REGION is used when AWS_REGION is unset."""
        config = ClientConfiguration.from_env(
            {"AWS_PROFILE": "dev", "AWS_DEFAULT_REGION": "ap-southeast-2"}
        )

        assert config.region == "ap-southeast-2"

    def test_from_env_uses_os_environ(self, monkeypatch):
        """Test the process environment is read by default."""
        monkeypatch.setenv("AWS_PROFILE", "env-profile")
        monkeypatch.setenv("AWS_REGION", "us-east-2")

        config = ClientConfiguration.from_env()

        assert config == ClientConfiguration(profile="env-profile", region="us-east-2")


class TestLoadConfiguration:
    """Test loading configuration files."""

    def test_load_yaml(self, tmp_path):
        """Test loading a YAML configuration file."""
        config_file = tmp_path / "client.yaml"
        config_file.write_text(yaml.dump({"aws_profile": "dev", "aws_region": "us-east-1"}))

        config = load_configuration(config_file)

        assert config == ClientConfiguration(profile="dev", region="us-east-1")

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_configuration(tmp_path / "missing.yaml")

        assert exc_info.value.message == "Configuration file not found"

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises ConfigurationError."""
        config_file = tmp_path / "client.yaml"
        config_file.write_text("profile: [unclosed")

        with pytest.raises(ConfigurationError) as exc_info:
            load_configuration(config_file)

        assert "Cannot read configuration file" in exc_info.value.message
        assert exc_info.value.details

    def test_invalid_encoding(self, tmp_path):
        """Test a file that is not valid UTF-8 raises ConfigurationError."""
        config_file = tmp_path / "client.yaml"
        config_file.write_bytes(b"profile: \xff\xfe\n")

        with pytest.raises(ConfigurationError) as exc_info:
            load_configuration(config_file)

        assert "Cannot read configuration file" in exc_info.value.message

    def test_schema_violation(self, tmp_path):
        """Test a document that is not a mapping of strings is rejected."""
        config_file = tmp_path / "client.yaml"
        config_file.write_text(yaml.dump({"profile": ["dev"], "region": "us-east-1"}))

        with pytest.raises(ConfigurationError) as exc_info:
            load_configuration(config_file)

        assert "validation failed" in exc_info.value.message
        assert exc_info.value.details

    def test_empty_file(self, tmp_path):
        """Test an empty file loads as an empty configuration."""
        config_file = tmp_path / "client.yaml"
        config_file.write_text("")

        assert load_configuration(config_file) == ClientConfiguration()


class TestResolveConfiguration:
    """Test merging configuration sources."""

    def test_explicit_values_win(self, tmp_path):
        """Test explicit values override file and environment."""
        config_file = tmp_path / "client.yaml"
        config_file.write_text(yaml.dump({"profile": "file", "region": "eu-west-1"}))

        config = resolve_configuration(
            profile="explicit",
            config_file=config_file,
            environ={"AWS_PROFILE": "env", "AWS_REGION": "us-east-1"},
        )

        assert config == ClientConfiguration(profile="explicit", region="eu-west-1")

    def test_environment_fallback(self):
        """Test the environment fills in missing settings."""
        config = resolve_configuration(
            region="us-west-2", environ={"AWS_PROFILE": "env"}
        )

        assert config == ClientConfiguration(profile="env", region="us-west-2")

    def test_unresolved_configuration_raises(self):
        """Test validation runs after merging."""
        with pytest.raises(ConfigurationError, match="Invalid awsProfile or Invalid awsRegion"):
            resolve_configuration(profile="dev", environ={})
