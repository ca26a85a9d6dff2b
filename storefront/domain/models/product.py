"""Product domain model: maps to the 'products' table."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from storefront.core.clock import as_utc, utcnow
from storefront.domain.models.product_image import ProductImage
from storefront.infrastructure.database import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(300), nullable=False, index=True)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=True)

    # Mirrors the main ProductImage when there is one
    image_url = Column(String(1000), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False, default=0)
    in_stock = Column(Boolean, nullable=False, default=True)

    is_on_promotion = Column(Boolean, nullable=False, default=False)
    promotion_price = Column(Float, nullable=True)
    promotion_end_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    category = relationship("Category", back_populates="products")
    location = relationship("Location", back_populates="products")
    images = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by=[ProductImage.is_main_image.desc(), ProductImage.id],
    )

    def is_promotion_active(self, now: Optional[datetime] = None) -> bool:
        if not self.is_on_promotion:
            return False
        if self.promotion_end_date is None:
            return True
        return as_utc(self.promotion_end_date) > (now or utcnow())

    def clear_promotion(self) -> None:
        self.is_on_promotion = False
        self.promotion_price = None
        self.promotion_end_date = None

    def __repr__(self):
        return f"<Product {self.id} - {self.name}>"
