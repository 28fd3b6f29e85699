"""
Client-side validation helpers.
Everything here runs before a request is built, so failures never reach the network.
"""

from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from galactavista.utils.exceptions import ValidationError

ModelType = TypeVar("ModelType", bound=BaseModel)

MIN_PASSWORD_LENGTH = 8


class ValidationUtils:
    """
    Utility class for common validation operations.
    """

    @staticmethod
    def validate_password(password: Any, confirm_password: Optional[str] = None) -> str:
        """
        Validate password length and, when given, its confirmation.

        Args:
            password: Password to validate
            confirm_password: Value of the confirmation field

        Returns:
            The password

        Raises:
            ValidationError: If the password is too short or does not match
        """
        if not password or not isinstance(password, str):
            raise ValidationError("Password is required", [{"field": "password", "message": "Password is required"}])

        if len(password) < MIN_PASSWORD_LENGTH:
            message = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            raise ValidationError(message, [{"field": "password", "message": message}])

        if confirm_password is not None and confirm_password != password:
            message = "Passwords do not match"
            raise ValidationError(message, [{"field": "confirm_password", "message": message}])

        return password

    @staticmethod
    def validate_id(value: Any, field_name: str = "id") -> int:
        """
        Validate a server-assigned numeric id.

        Raises:
            ValidationError: If the id is not a positive integer
        """
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValidationError(f"{field_name} must be a positive integer")
        return value


def handle_pydantic_validation_error(exc: PydanticValidationError) -> ValidationError:
    """
    Convert Pydantic validation error to custom ValidationError.

    Args:
        exc: Pydantic validation error

    Returns:
        Custom ValidationError instance
    """
    field_errors = []

    for error in exc.errors():
        field_path = " -> ".join(str(loc) for loc in error["loc"])
        field_errors.append({
            "field": field_path,
            "message": error["msg"],
            "type": error["type"],
        })

    first = field_errors[0] if field_errors else None
    detail = "Request validation failed"
    if first:
        detail = f"{detail}: {first['field'] or 'body'}: {first['message']}"

    return ValidationError(
        detail=detail,
        field_errors=field_errors
    )


def validate_model(
    schema_class: Type[ModelType],
    data: Optional[Union[ModelType, Mapping[str, Any]]]
) -> ModelType:
    """
    Coerce a mapping into a request model, or pass a model instance through.

    Raises:
        ValidationError: If the data does not satisfy the schema
    """
    if isinstance(data, schema_class):
        return data
    try:
        if isinstance(data, BaseModel):
            return schema_class.model_validate(data.model_dump(exclude_unset=True))
        return schema_class.model_validate(dict(data or {}))
    except PydanticValidationError as e:
        raise handle_pydantic_validation_error(e) from e
