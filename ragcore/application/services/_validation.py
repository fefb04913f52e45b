"""Pydantic → domain ValidationError bridge for service inputs."""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ragcore.core.exceptions import ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_attrs(schema: type[SchemaT], attrs: dict[str, Any] | BaseModel) -> SchemaT:
    """
    Validate create/update attributes against a schema.

    Args:
        schema: Pydantic model describing the accepted attributes
        attrs: Raw attributes or an already-built schema instance

    Returns:
        Validated schema instance

    Raises:
        ValidationError: With the first offending field
    """
    if isinstance(attrs, schema):
        return attrs
    if isinstance(attrs, BaseModel):
        attrs = attrs.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(attrs)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(
            f"Invalid attributes: {first.get('msg', 'invalid value')}",
            field=field,
            details={"errors": len(e.errors())},
        ) from e
