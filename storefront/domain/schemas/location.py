"""Pydantic schemas for Location."""

from typing import Optional

from pydantic import EmailStr, Field

from storefront.domain.schemas.base import CamelModel, UtcDatetime


class LocationCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    address: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    whatsapp_number: Optional[str] = None


class LocationUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    address: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    whatsapp_number: Optional[str] = None


class LocationRead(CamelModel):
    id: int
    name: str
    address: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    whatsapp_number: Optional[str] = None
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None
