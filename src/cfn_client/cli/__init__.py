"""
Command-line interface for the CloudFormation client.
"""

from .cloudformation import main

__all__ = ["main"]
