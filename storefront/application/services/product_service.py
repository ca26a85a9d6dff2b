"""Product service: catalog queries and product lifecycle."""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import structlog
from sqlalchemy.orm import Session

from storefront.core.clock import localize_input, utcnow
from storefront.core.exceptions import EntityNotFoundException, ForbiddenException, ValidationException
from storefront.domain.models.category import Category
from storefront.domain.models.location import Location
from storefront.domain.models.product import Product
from storefront.domain.models.product_image import ProductImage
from storefront.domain.models.user import User
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.domain.schemas.product import ProductCreate, ProductFilter, ProductUpdate, PromotionToggle
from storefront.infrastructure.storage import ImageStorage

logger = structlog.get_logger(__name__)


def get_products(repo: ProductRepository, filters: ProductFilter) -> Dict[str, Any]:
    """Public catalog listing."""
    return repo.get_with_filters(filters)


def get_location_products(repo: ProductRepository, user: User, filters: ProductFilter) -> Dict[str, Any]:
    """Listing scoped to the caller's store unless they are a super-admin."""
    if user.is_super_admin:
        return repo.get_with_filters(filters)
    if user.location_id is None:
        # A store admin without a store has no products
        return {
            "products": [],
            "pagination": {"total": 0, "page": filters.page, "limit": filters.limit, "pages": 0, "has_more": False},
        }
    return repo.get_with_filters(filters.model_copy(update={"location_id": user.location_id}))


def get_product(repo: ProductRepository, product_id: int) -> Product:
    product = repo.get_detail(product_id)
    if product is None:
        raise EntityNotFoundException("Product not found")
    return product


def can_access_location(user: User, location_id: Optional[int]) -> bool:
    if user.is_super_admin:
        return True
    return user.location_id is not None and user.location_id == location_id


def ensure_location_access(user: User, product: Product) -> None:
    if not can_access_location(user, product.location_id):
        raise ForbiddenException("You do not have access to products of this location")


def get_managed_product(repo: ProductRepository, user: User, product_id: int) -> Product:
    product = get_product(repo, product_id)
    ensure_location_access(user, product)
    return product


def _check_references(db: Session, category_id: Optional[int], location_id: Optional[int]) -> None:
    errors = []
    if category_id is not None and db.get(Category, category_id) is None:
        errors.append({"field": "categoryId", "message": "Category not found"})
    if location_id is not None and db.get(Location, location_id) is None:
        errors.append({"field": "locationId", "message": "Location not found"})
    if errors:
        raise ValidationException("Validation error", errors)


def _apply_promotion_rule(product: Product) -> None:
    """isOnPromotion=false always means no promotion price and no end date."""
    if not product.is_on_promotion:
        product.clear_promotion()
    elif product.promotion_price is None:
        raise ValidationException.for_field(
            "promotionPrice", "promotionPrice is required when isOnPromotion is true"
        )


def create_product(repo: ProductRepository, user: User, body: ProductCreate) -> Product:
    data = body.model_dump()

    if not user.is_super_admin:
        if user.location_id is None:
            raise ForbiddenException("Your account is not assigned to a location")
        data["location_id"] = user.location_id
    elif data.get("location_id") is None:
        raise ValidationException.for_field("locationId", "locationId is required")

    _check_references(repo.db, data["category_id"], data["location_id"])
    data["promotion_end_date"] = localize_input(data.get("promotion_end_date"))

    product = Product(**data)
    _apply_promotion_rule(product)
    repo.db.add(product)
    repo.db.commit()
    logger.info("Product created", product_id=product.id, location_id=product.location_id, by=user.id)
    return get_product(repo, product.id)


def update_product(repo: ProductRepository, user: User, product_id: int, body: ProductUpdate) -> Product:
    product = get_managed_product(repo, user, product_id)
    data = body.model_dump(exclude_unset=True)

    # Columns that cannot be null are left alone when the client sends null
    for field in ("name", "price", "category_id", "location_id", "quantity", "in_stock", "is_on_promotion"):
        if field in data and data[field] is None:
            data.pop(field)

    if "location_id" in data and not user.is_super_admin and data["location_id"] != product.location_id:
        raise ForbiddenException("You cannot move a product to another location")

    if "image_url" in data and product.images and data["image_url"] != product.image_url:
        raise ValidationException.for_field(
            "imageUrl", "This product has images; choose its main image through the image endpoints"
        )

    _check_references(repo.db, data.get("category_id"), data.get("location_id"))
    if "promotion_end_date" in data:
        data["promotion_end_date"] = localize_input(data["promotion_end_date"])

    for field, value in data.items():
        setattr(product, field, value)
    _apply_promotion_rule(product)

    repo.db.commit()
    logger.info("Product updated", product_id=product.id, fields=sorted(data), by=user.id)
    return get_product(repo, product.id)


def delete_unreferenced_files(db: Session, storage: ImageStorage, urls: Iterable[Optional[str]]) -> None:
    """Remove stored files that no product or product image points at anymore."""
    for url in set(urls):
        if not url:
            continue
        in_use = (
            db.query(ProductImage.id).filter(ProductImage.image_url == url).first() is not None
            or db.query(Product.id).filter(Product.image_url == url).first() is not None
        )
        if in_use:
            logger.info("Image file still referenced, kept", url=url)
            continue
        storage.delete(url)


def delete_product(repo: ProductRepository, user: User, product_id: int, storage: ImageStorage) -> None:
    product = get_managed_product(repo, user, product_id)
    urls = {image.image_url for image in product.images}
    if product.image_url:
        urls.add(product.image_url)

    repo.db.delete(product)
    repo.db.commit()
    logger.info("Product deleted", product_id=product_id, by=user.id)

    # Files go only after the rows are gone
    delete_unreferenced_files(repo.db, storage, urls)


def toggle_promotion(
    repo: ProductRepository,
    user: User,
    product_id: int,
    body: PromotionToggle,
    now: Optional[datetime] = None,
) -> Product:
    product = get_managed_product(repo, user, product_id)

    if not body.is_on_promotion:
        product.clear_promotion()
    else:
        errors: List[Dict[str, str]] = []
        end_date = localize_input(body.promotion_end_date)
        if body.promotion_price is None:
            errors.append({"field": "promotionPrice", "message": "promotionPrice is required when isOnPromotion is true"})
        elif body.promotion_price <= 0:
            errors.append({"field": "promotionPrice", "message": "promotionPrice must be greater than 0"})
        if end_date is None:
            errors.append({"field": "promotionEndDate", "message": "promotionEndDate is required when isOnPromotion is true"})
        elif end_date <= (now or utcnow()):
            errors.append({"field": "promotionEndDate", "message": "promotionEndDate must be in the future"})
        if errors:
            raise ValidationException("Validation error", errors)

        product.is_on_promotion = True
        product.promotion_price = body.promotion_price
        product.promotion_end_date = end_date

    repo.db.commit()
    logger.info("Product promotion toggled", product_id=product.id, is_on_promotion=product.is_on_promotion, by=user.id)
    return get_product(repo, product.id)
