"""
CloudFormation stack client.

Translates simple method calls into CloudFormation API calls and reshapes the
outcome into an (error, result) pair. Every operation returns a StackResult and
also hands the same pair to an optional callback, exactly once.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..config import ClientConfiguration
from ..exceptions import StackClientError, StackValidationError

logger = logging.getLogger(__name__)

CAPABILITIES = ["CAPABILITY_IAM"]

NO_UPDATE_ERROR_CODE = "ValidationError"
NO_UPDATE_MESSAGE = "No updates are to be performed."

STACK_ID_REQUIRED_TO_DESCRIBE = "Stack ID must be set to further describe"
STACK_ID_REQUIRED_FOR_RESOURCES = "Stack ID must be set to describe its resources"
LOGICAL_ID_REQUIRED_FOR_RESOURCES = "Logical ID must be set to describe its resources"

Callback = Callable[[Optional[Any], Optional[Any]], None]

PROVIDER_ERRORS = (ClientError, BotoCoreError)


@dataclass(frozen=True)
class StackResult:
    """Outcome of a stack operation: an error or a value, never both."""

    error: Optional[Any] = None
    value: Optional[Any] = None

    @property
    def success(self) -> bool:
        """Check if the operation succeeded."""
        return self.error is None

    def unwrap(self) -> Any:
        """Return the value, or raise the error."""
        if self.error is None:
            return self.value
        if isinstance(self.error, BaseException):
            raise self.error
        raise StackClientError(str(self.error))

    def __iter__(self):
        # Allows ``err, res = client.describe_stack(...)``
        yield self.error
        yield self.value


def _error_code_and_message(error: Any) -> tuple:
    """Pull the provider error code and message out of a ClientError or dict."""
    if isinstance(error, ClientError):
        details = error.response.get("Error", {})
        return details.get("Code"), details.get("Message")
    if isinstance(error, dict):
        return error.get("code", error.get("Code")), error.get(
            "message", error.get("Message")
        )
    return getattr(error, "code", None), getattr(error, "message", None)


def is_no_update_error(error: Any) -> bool:
    """Check whether an update_stack failure only means there is nothing to change."""
    code, message = _error_code_and_message(error)
    return code == NO_UPDATE_ERROR_CODE and message == NO_UPDATE_MESSAGE


class StackClient:
    """Create, update and describe CloudFormation stacks."""

    def __init__(
        self,
        config: Optional[Union[ClientConfiguration, Mapping[str, Any]]] = None,
        *,
        profile: Optional[str] = None,
        region: Optional[str] = None,
    ):
        """
        Initialize stack client.

        Args:
            config: Client configuration holding profile and region, or a
                mapping with awsProfile/awsRegion (or profile/region) keys
            profile: AWS profile to use (when no config is given)
            region: AWS region (when no config is given)

        Raises:
            ConfigurationError: If profile or region is missing or empty
        """
        if config is None:
            config = ClientConfiguration(profile=profile, region=region)
        elif isinstance(config, Mapping):
            config = ClientConfiguration.from_dict(config)
        self.config = config.validate()
        self.profile = self.config.profile
        self.region = self.config.region

        # Credentials stay scoped to this client's session
        session = boto3.Session(profile_name=self.profile, region_name=self.region)
        self.cloudformation = session.client("cloudformation")

    def __repr__(self) -> str:
        return f"StackClient(profile={self.profile!r}, region={self.region!r})"

    @staticmethod
    def _build_template_request(
        stack_name: str, template_body: str, parameters: Any
    ) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "StackName": stack_name,
            "TemplateBody": template_body,
            "Capabilities": list(CAPABILITIES),
        }
        if parameters:
            request["Parameters"] = parameters
        return request

    @staticmethod
    def _complete(
        error: Optional[Any], value: Optional[Any], callback: Optional[Callback]
    ) -> StackResult:
        result = StackResult(error=error, value=value)
        if callback is not None:
            callback(result.error, result.value)
        return result

    def create_stack(
        self,
        stack_name: str,
        template_body: str,
        parameters: Any = None,
        callback: Optional[Callback] = None,
    ) -> StackResult:
        """Create a stack; the result value is the new stack's ID."""
        request = self._build_template_request(stack_name, template_body, parameters)
        logger.debug(f"Creating stack {stack_name}")
        try:
            response = self.cloudformation.create_stack(**request)
        except PROVIDER_ERRORS as e:
            error = e
        else:
            return self._complete(None, response["StackId"], callback)

        logger.debug(f"Create stack {stack_name} failed: {error}")
        return self._complete(error, None, callback)

    def update_stack(
        self,
        stack_name: str,
        template_body: str,
        parameters: Any = None,
        callback: Optional[Callback] = None,
    ) -> StackResult:
        """
        Update a stack.

        The raw provider response is returned on success. When CloudFormation
        reports there is nothing to update, the result is the notice text
        rather than an error.
        """
        request = self._build_template_request(stack_name, template_body, parameters)
        logger.debug(f"Updating stack {stack_name}")
        try:
            response = self.cloudformation.update_stack(**request)
        except PROVIDER_ERRORS as e:
            error = e
        else:
            return self._complete(None, response, callback)

        if is_no_update_error(error):
            logger.info(f"No updates needed for stack {stack_name}")
            return self._complete(None, NO_UPDATE_MESSAGE, callback)
        logger.debug(f"Update stack {stack_name} failed: {error}")
        return self._complete(error, None, callback)

    def describe_stack(
        self, stack_name: str, callback: Optional[Callback] = None
    ) -> StackResult:
        """Describe a single stack."""
        if not stack_name:
            return self._complete(
                StackValidationError(STACK_ID_REQUIRED_TO_DESCRIBE), None, callback
            )

        try:
            response = self.cloudformation.describe_stacks(StackName=stack_name)
        except PROVIDER_ERRORS as e:
            error = e
        else:
            return self._complete(None, response["Stacks"][0], callback)

        logger.debug(f"Describe stack {stack_name} failed: {error}")
        return self._complete(error, None, callback)

    def describe_stack_resource(
        self, stack_name: str, logical_id: str, callback: Optional[Callback] = None
    ) -> StackResult:
        """Describe one resource of a stack by its logical ID."""
        if not stack_name:
            return self._complete(
                StackValidationError(STACK_ID_REQUIRED_FOR_RESOURCES), None, callback
            )
        if not logical_id:
            return self._complete(
                StackValidationError(LOGICAL_ID_REQUIRED_FOR_RESOURCES), None, callback
            )

        try:
            response = self.cloudformation.describe_stack_resource(
                StackName=stack_name, LogicalResourceId=logical_id
            )
        except PROVIDER_ERRORS as e:
            error = e
        else:
            return self._complete(None, response["StackResourceDetail"], callback)

        logger.debug(f"Describe resource {logical_id} in {stack_name} failed: {error}")
        return self._complete(error, None, callback)

    def describe_stack_resources(
        self, stack_name: str, callback: Optional[Callback] = None
    ) -> StackResult:
        """Describe all resources of a stack."""
        if not stack_name:
            return self._complete(
                StackValidationError(STACK_ID_REQUIRED_FOR_RESOURCES), None, callback
            )

        try:
            response = self.cloudformation.describe_stack_resources(
                StackName=stack_name
            )
        except PROVIDER_ERRORS as e:
            error = e
        else:
            return self._complete(None, response["StackResources"], callback)

        logger.debug(f"Describe resources of {stack_name} failed: {error}")
        return self._complete(error, None, callback)
