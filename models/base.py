"""
Base schemas and mixins for all models.

The back-office API speaks camelCase JSON; attributes stay snake_case and
aliases are generated.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
        - camelCase aliases, snake_case names both accepted
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    def to_api(self) -> dict:
        """Dump as JSON-ready camelCase dict, without unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FrozenSchema(BaseSchema):
    """
    Immutable schema.

    Changes go through model_copy(update=...).
    """
    model_config = ConfigDict(frozen=True)


class TimestampMixin(BaseSchema):
    """Add timestamps to response models."""
    created_at: str
    updated_at: Optional[str] = None


class SelectOption(BaseSchema):
    """Label/value pair for dropdowns."""
    label: str
    value: str
