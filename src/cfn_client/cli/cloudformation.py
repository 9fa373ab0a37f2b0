#!/usr/bin/env python3
"""
CloudFormation stack CLI commands.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from botocore.exceptions import BotoCoreError

from ..cloudformation import (
    StackClient,
    StackResult,
    load_parameters_file,
    parse_parameter_pairs,
    to_parameter_list,
)
from ..config import resolve_configuration
from ..exceptions import StackClientError


def _get_client(ctx: click.Context) -> StackClient:
    """Build a StackClient from the group options, exiting on bad configuration."""
    options = ctx.obj
    try:
        config = resolve_configuration(
            profile=options["profile"],
            region=options["region"],
            config_file=options["config_file"],
        )
        return StackClient(config)
    except (StackClientError, BotoCoreError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _collect_parameters(
    parameter: Tuple[str, ...], parameters_file: Optional[str]
) -> Dict[str, str]:
    """Merge --parameters-file with --parameter pairs; pairs win."""
    parameters: Dict[str, str] = {}
    if parameters_file:
        parameters.update(load_parameters_file(parameters_file))
    parameters.update(parse_parameter_pairs(parameter))
    return parameters


def _emit(result: StackResult) -> None:
    """Print a result as JSON, or its error on stderr with exit status 1."""
    if not result.success:
        click.echo(f"Error: {result.error}", err=True)
        sys.exit(1)

    value: Any = result.value
    if isinstance(value, str):
        click.echo(value)
    else:
        click.echo(json.dumps(value, indent=2, default=str))


@click.group()
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile to use")
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option(
    "--config-file",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with profile and region",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx, profile, region, config_file, verbose) -> None:
    """CloudFormation stack commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj.update(profile=profile, region=region, config_file=config_file)


def _template_options(func):
    """Options shared by create and update."""
    func = click.option(
        "--parameters-file",
        type=click.Path(exists=True, dir_okay=False),
        help="YAML or JSON file with stack parameters",
    )(func)
    func = click.option(
        "--parameter",
        "-p",
        multiple=True,
        help="Stack parameter as KEY=VALUE (repeatable)",
    )(func)
    func = click.option(
        "--template-file",
        "-t",
        required=True,
        type=click.Path(exists=True, dir_okay=False),
        help="CloudFormation template file",
    )(func)
    func = click.option(
        "--stack-name", "-s", required=True, help="CloudFormation stack name"
    )(func)
    return func


def _template_request(
    template_file: str, parameter: Tuple[str, ...], parameters_file: Optional[str]
) -> Tuple[str, list]:
    try:
        parameters = _collect_parameters(parameter, parameters_file)
    except StackClientError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    template_body = Path(template_file).read_text()
    return template_body, to_parameter_list(parameters)


@main.command()
@_template_options
@click.pass_context
def create(ctx, stack_name, template_file, parameter, parameters_file) -> None:
    """Create a CloudFormation stack."""
    client = _get_client(ctx)
    template_body, parameters = _template_request(
        template_file, parameter, parameters_file
    )
    _emit(client.create_stack(stack_name, template_body, parameters))


@main.command()
@_template_options
@click.pass_context
def update(ctx, stack_name, template_file, parameter, parameters_file) -> None:
    """Update a CloudFormation stack."""
    client = _get_client(ctx)
    template_body, parameters = _template_request(
        template_file, parameter, parameters_file
    )
    _emit(client.update_stack(stack_name, template_body, parameters))


@main.command()
@click.option("--stack-name", "-s", required=True, help="CloudFormation stack name")
@click.pass_context
def describe(ctx, stack_name) -> None:
    """Describe a CloudFormation stack."""
    client = _get_client(ctx)
    _emit(client.describe_stack(stack_name))


@main.command()
@click.option("--stack-name", "-s", required=True, help="CloudFormation stack name")
@click.option("--logical-id", "-l", required=True, help="Logical resource ID")
@click.pass_context
def resource(ctx, stack_name, logical_id) -> None:
    """Describe one resource of a CloudFormation stack."""
    client = _get_client(ctx)
    _emit(client.describe_stack_resource(stack_name, logical_id))


@main.command()
@click.option("--stack-name", "-s", required=True, help="CloudFormation stack name")
@click.pass_context
def resources(ctx, stack_name) -> None:
    """List the resources of a CloudFormation stack."""
    client = _get_client(ctx)
    _emit(client.describe_stack_resources(stack_name))

