"""
CFN Client - thin CloudFormation stack client with a result-pair contract.
"""

__version__ = "1.0.0"

from .cloudformation import StackClient, StackResult
from .config import ClientConfiguration
from .exceptions import ConfigurationError, StackClientError, StackValidationError

__all__ = [
    "ClientConfiguration",
    "ConfigurationError",
    "StackClient",
    "StackClientError",
    "StackResult",
    "StackValidationError",
]
