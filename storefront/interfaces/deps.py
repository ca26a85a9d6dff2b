"""
API Dependencies.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from storefront.domain.models.product import Product
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.infrastructure.code_sender import CodeSender, LoggingCodeSender
from storefront.infrastructure.database import get_db
from storefront.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from storefront.infrastructure.storage import ImageStorage


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """Get product repository instance."""
    return SQLAlchemyProductRepository(db, Product)


def get_image_storage() -> ImageStorage:
    return ImageStorage()


def get_code_sender() -> CodeSender:
    return LoggingCodeSender()
