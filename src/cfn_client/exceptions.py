"""
Exceptions raised by the CloudFormation client.
"""

from dataclasses import dataclass
from typing import Optional


class StackClientError(Exception):
    """Base exception for all cfn_client errors."""

    pass


@dataclass
class ConfigurationError(StackClientError):
    """Raised when client configuration is invalid or cannot be loaded."""

    message: str
    details: Optional[str] = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class StackValidationError(StackClientError, ValueError):
    """A required stack or resource identifier was not supplied."""

    pass


class ParameterFileError(StackClientError, ValueError):
    """Stack parameters could not be parsed."""

    pass
