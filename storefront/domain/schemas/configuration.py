"""Pydantic schemas for Configuration."""

from typing import Optional

from pydantic import Field

from storefront.domain.schemas.base import CamelModel, UtcDatetime


class ConfigurationUpsert(CamelModel):
    config_key: str = Field(min_length=1, max_length=200)
    config_value: str
    description: Optional[str] = None


class ConfigurationUpdate(CamelModel):
    config_value: Optional[str] = None
    description: Optional[str] = None


class ConfigurationRead(CamelModel):
    id: Optional[int] = None
    config_key: str
    config_value: str
    description: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None
