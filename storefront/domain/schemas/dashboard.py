"""Pydantic schemas for the admin dashboard."""

from typing import List

from storefront.domain.schemas.base import CamelModel, UtcDatetime
from storefront.domain.schemas.product import ProductRead


class LocationProductCount(CamelModel):
    location_id: int
    location_name: str
    product_count: int


class DashboardStats(CamelModel):
    total_products: int
    in_stock: int
    out_of_stock: int
    active_promotions: int
    total_categories: int
    total_locations: int
    products_by_location: List[LocationProductCount]
    recent_products: List[ProductRead]
    generated_at: UtcDatetime
