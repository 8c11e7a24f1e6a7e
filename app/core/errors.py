"""Typed service errors and the error message catalogue used in API responses."""

from enum import Enum


class ErrorType(Enum):
    """Error catalogue entry: stable id plus human text, rendered in the error envelope."""

    BASIC_INVALID_INPUT = ("SVC0001", "Invalid input value for message part %1")
    GENERIC_SERVICE_ERROR = ("SVC0002", "The following service error occurred: %1. Error code is %2")
    EXTRA_INPUT_NOT_ALLOWED = ("SVC0004", "Input %1 %2 not permitted in request")
    MANDATORY_INPUT_MISSING = ("SVC0005", "Mandatory input %1 %2 is missing from request")
    UNAUTHORIZED = ("SVC0006", "UnAuthorized Endpoint")
    JSON_SCHEMA_VALIDATOR = ("SVC0007", "Schema failed.")
    NOT_FOUND = ("SVC0008", "Entry is not found")
    ACCESS_DENIED = ("SVC0009", "Operation not permitted")

    def __init__(self, message_id: str, text: str) -> None:
        self.message_id = message_id
        self.text = text


class ServiceError(Exception):
    """
    Domain failure carrying everything the API boundary needs to render it.

    Subclasses fix error_type and status_code; callers only supply variables.
    """

    error_type = ErrorType.GENERIC_SERVICE_ERROR
    status_code = 500

    def __init__(
        self,
        *variables: str,
        error_type: ErrorType | None = None,
        status_code: int | None = None,
    ) -> None:
        if error_type is not None:
            self.error_type = error_type
        if status_code is not None:
            self.status_code = status_code
        self.variables = list(variables)
        self.message = "; ".join(self.variables) or self.error_type.text
        super().__init__(self.message)


class ValidationFailedError(ServiceError):
    """Request body failed field validation; variables are 'field: message' entries."""

    error_type = ErrorType.JSON_SCHEMA_VALIDATOR
    status_code = 400


class InvalidParameterError(ServiceError):
    """Malformed request input outside body validation (e.g. undeclared query parameters)."""

    error_type = ErrorType.BASIC_INVALID_INPUT
    status_code = 400


class DuplicateUserError(ServiceError):
    """Username or email is already registered."""

    error_type = ErrorType.JSON_SCHEMA_VALIDATOR
    status_code = 400

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


class RoleNotFoundError(ServiceError):
    error_type = ErrorType.MANDATORY_INPUT_MISSING
    status_code = 400


class CredentialsInvalidError(ServiceError):
    """Password did not match (or, when configured, the user does not exist)."""

    error_type = ErrorType.UNAUTHORIZED
    status_code = 401


class UnauthenticatedError(ServiceError):
    """No authenticated principal on a route that requires one."""

    error_type = ErrorType.UNAUTHORIZED
    status_code = 401


class AccessDeniedError(ServiceError):
    """Principal is authenticated but holds none of the required roles."""

    error_type = ErrorType.ACCESS_DENIED
    status_code = 403


class UserNotFoundError(ServiceError):
    error_type = ErrorType.NOT_FOUND
    status_code = 404
