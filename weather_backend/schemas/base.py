"""
Base Pydantic schemas.

This module contains base schemas with common fields and configurations
that other schemas can inherit from.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    All other schemas should inherit from this class.
    """

    model_config = ConfigDict(from_attributes=True)


class CamelSchema(BaseSchema):
    """
    Schema serialised with camelCase keys.

    Fields are declared in snake_case and can be populated either way.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TimestampSchema(BaseSchema):
    """
    Schema with timestamp fields.
    """

    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseSchema):
    """Plain acknowledgement body."""

    message: str
