"""Shared pydantic configuration: camelCase on the wire, snake_case in Python."""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront.core.clock import as_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Timestamps read back from the database are reported in UTC
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class MessageResponse(CamelModel):
    message: str
