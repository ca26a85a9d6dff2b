"""Pydantic schemas for Product and ProductImage."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, computed_field

from storefront.core.clock import utcnow
from storefront.domain.schemas.base import CamelModel, UtcDatetime

SortField = Literal["createdAt", "updatedAt", "name", "price", "quantity"]
SortDirection = Literal["asc", "desc"]


class ProductCreate(CamelModel):
    name: str = Field(min_length=1, max_length=300)
    price: float = Field(gt=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    category_id: int
    location_id: Optional[int] = None
    quantity: int = Field(default=0, ge=0)
    in_stock: bool = True
    is_on_promotion: bool = False
    promotion_price: Optional[float] = Field(default=None, gt=0)
    promotion_end_date: Optional[datetime] = None


class ProductUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=300)
    price: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    category_id: Optional[int] = None
    location_id: Optional[int] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    in_stock: Optional[bool] = None
    is_on_promotion: Optional[bool] = None
    promotion_price: Optional[float] = Field(default=None, gt=0)
    promotion_end_date: Optional[datetime] = None


class PromotionToggle(CamelModel):
    is_on_promotion: bool
    promotion_price: Optional[float] = None
    promotion_end_date: Optional[datetime] = None


class CategoryRef(CamelModel):
    id: int
    name: str


class LocationRef(CamelModel):
    id: int
    name: str


class ProductImageRead(CamelModel):
    id: int
    product_id: int
    image_url: str
    is_main_image: bool
    created_at: Optional[UtcDatetime] = None


class ProductRead(CamelModel):
    id: int
    name: str
    price: float
    description: Optional[str] = None
    image_url: Optional[str] = None
    category_id: int
    location_id: int
    quantity: int
    in_stock: bool
    is_on_promotion: bool
    promotion_price: Optional[float] = None
    promotion_end_date: Optional[UtcDatetime] = None
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None
    category: Optional[CategoryRef] = None
    location: Optional[LocationRef] = None

    @computed_field(alias="isPromotionActive")
    @property
    def is_promotion_active(self) -> bool:
        if not self.is_on_promotion:
            return False
        return self.promotion_end_date is None or self.promotion_end_date > utcnow()


class ProductDetail(ProductRead):
    images: List[ProductImageRead] = []


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    pages: int
    has_more: bool


class ProductListResponse(CamelModel):
    products: List[ProductRead]
    pagination: Pagination


class ProductFilter(BaseModel):
    category_id: Optional[int] = None
    location_id: Optional[int] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    search: Optional[str] = None
    sort_by: SortField = "createdAt"
    order_by: SortDirection = "desc"
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=12, ge=1, le=100)


class ImageUrlsCreate(CamelModel):
    image_urls: List[str] = Field(min_length=1, max_length=5)


class ProductImagesResponse(CamelModel):
    message: str
    images: List[ProductImageRead]
    product: ProductDetail


class MainImageResponse(CamelModel):
    message: str
    image: ProductImageRead
    product: ProductDetail


class ProductImageDeleteResponse(CamelModel):
    message: str
    product: ProductDetail
