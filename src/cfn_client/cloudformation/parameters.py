"""
Stack parameter helpers.

Converts between a plain ``{name: value}`` mapping and the
``[{"ParameterKey": ..., "ParameterValue": ...}]`` list CloudFormation expects.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Union

import yaml

from ..exceptions import ParameterFileError


def to_parameter_list(parameters: Mapping[str, Any]) -> List[Dict[str, str]]:
    """
    Convert parameter dict to CloudFormation format.

    Args:
        parameters: Dict of parameter key-value pairs

    Returns:
        List of CloudFormation parameter dicts
    """
    return [
        {"ParameterKey": key, "ParameterValue": str(value)}
        for key, value in parameters.items()
    ]


def parse_parameter_pairs(pairs: Iterable[str]) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` strings into a mapping."""
    parameters: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ParameterFileError(f"Invalid parameter '{pair}', expected KEY=VALUE")
        parameters[key.strip()] = value
    return parameters


def load_parameters_file(path: Union[str, Path]) -> Dict[str, str]:
    """
    Load stack parameters from a YAML or JSON file.

    The file may hold a plain mapping, or a list in the format written by
    ``aws cloudformation describe-stacks`` (ParameterKey / ParameterValue).
    """
    params_path = Path(path)
    try:
        with open(params_path, "r") as f:
            if params_path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ParameterFileError(f"Cannot read parameters file {params_path}: {e}") from e

    if data is None:
        return {}

    if isinstance(data, dict):
        return {str(key): str(value) for key, value in data.items()}

    if isinstance(data, list):
        parameters = {}
        for item in data:
            if not isinstance(item, dict) or "ParameterKey" not in item:
                raise ParameterFileError(
                    f"Invalid parameter entry in {params_path}: {item!r}"
                )
            parameters[str(item["ParameterKey"])] = str(item.get("ParameterValue", ""))
        return parameters

    raise ParameterFileError(
        f"Parameters file {params_path} must contain a mapping or a list"
    )
