"""
CloudFormation stack client.
"""

from .parameters import load_parameters_file, parse_parameter_pairs, to_parameter_list
from .stack_client import CAPABILITIES, StackClient, StackResult, is_no_update_error

__all__ = [
    "CAPABILITIES",
    "StackClient",
    "StackResult",
    "is_no_update_error",
    "load_parameters_file",
    "parse_parameter_pairs",
    "to_parameter_list",
]
