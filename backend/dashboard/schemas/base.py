"""Base schema configuration."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


class FreeFormSchema(BaseSchema):
    """Schema that keeps caller-supplied fields it does not declare."""

    model_config = ConfigDict(extra="allow")

    def to_document(self) -> dict[str, Any]:
        """Dump set fields with wire names, extras included."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class SuccessResponse(BaseSchema):
    """Plain acknowledgement."""

    success: bool = True
