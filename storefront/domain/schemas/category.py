"""Pydantic schemas for Category."""

from typing import Optional

from pydantic import Field

from storefront.domain.schemas.base import CamelModel, UtcDatetime


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None


class CategoryRead(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    product_count: int = 0
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None
