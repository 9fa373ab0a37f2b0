"""
Configuration management for the CloudFormation client.

A client needs exactly two settings, the AWS profile and the AWS region. They
can be given explicitly, read from the environment, or loaded from a YAML
file that is validated against a JSON schema.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from jsonschema import ValidationError, validate

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

INVALID_CONFIGURATION_MESSAGE = "Invalid awsProfile or Invalid awsRegion"

# Accepted spellings for each setting, in lookup order
PROFILE_KEYS = ("profile", "aws_profile", "awsProfile")
REGION_KEYS = ("region", "aws_region", "awsRegion")

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        key: {"type": "string"} for key in PROFILE_KEYS + REGION_KEYS
    },
    "additionalProperties": True,
}


def _first(data: Mapping[str, Any], keys: tuple) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value:
            return str(value)
    return None


@dataclass(frozen=True)
class ClientConfiguration:
    """AWS profile and region a StackClient is bound to."""

    profile: Optional[str] = None
    region: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Check that both profile and region are set."""
        return bool(self.profile) and bool(self.region)

    def validate(self) -> "ClientConfiguration":
        """Raise ConfigurationError unless both settings are present."""
        if not self.is_valid:
            raise ConfigurationError(INVALID_CONFIGURATION_MESSAGE)
        return self

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Convert config to dictionary."""
        return {"profile": self.profile, "region": self.region}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClientConfiguration":
        """Create config from a dictionary using any accepted key spelling."""
        return cls(profile=_first(data, PROFILE_KEYS), region=_first(data, REGION_KEYS))

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "ClientConfiguration":
        """Create config from AWS_PROFILE and AWS_REGION / AWS_DEFAULT_REGION."""
        env = os.environ if environ is None else environ
        return cls(
            profile=env.get("AWS_PROFILE") or None,
            region=env.get("AWS_REGION") or env.get("AWS_DEFAULT_REGION") or None,
        )


def load_configuration(path: Union[str, Path]) -> ClientConfiguration:
    """
    Load client configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        The configuration found in the file (not yet validated for presence)

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigurationError(
            "Configuration file not found", details=str(config_path)
        )

    logger.info(f"Loading client configuration: {config_path}")
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Cannot read configuration file {config_path}", details=str(e)
        ) from e

    try:
        validate(instance=data, schema=CONFIG_SCHEMA)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed for {config_path}", details=e.message
        ) from e

    return ClientConfiguration.from_dict(data)


def resolve_configuration(
    profile: Optional[str] = None,
    region: Optional[str] = None,
    config_file: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ClientConfiguration:
    """
    Merge configuration sources and validate the result.

    Explicit values take precedence over the configuration file, which takes
    precedence over the environment.
    """
    env_config = ClientConfiguration.from_env(environ)
    file_config = (
        load_configuration(config_file) if config_file else ClientConfiguration()
    )

    config = ClientConfiguration(
        profile=profile or file_config.profile or env_config.profile,
        region=region or file_config.region or env_config.region,
    )
    return config.validate()
