"""Image attachment manager.

Keeps the main-image invariant in one place: per product at most one
ProductImage has ``is_main_image`` set, and ``Product.image_url`` mirrors it.
Each operation commits exactly once.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import structlog
from sqlalchemy.orm import Session

from storefront.config import get_settings
from storefront.core.exceptions import EntityNotFoundException, ValidationException
from storefront.domain.models.product import Product
from storefront.domain.models.product_image import ProductImage
from storefront.domain.models.user import User
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.application.services.product_service import delete_unreferenced_files, ensure_location_access
from storefront.infrastructure.storage import ImageStorage

logger = structlog.get_logger(__name__)


@dataclass
class IncomingImage:
    filename: Optional[str]
    content_type: Optional[str]
    content: bytes


def _lock_product(repo: ProductRepository, user: User, product_id: int) -> Product:
    product = repo.get_for_update(product_id)
    if product is None:
        raise EntityNotFoundException("Product not found")
    ensure_location_access(user, product)
    return product


def _get_image(db: Session, product: Product, image_id: int) -> ProductImage:
    image = db.get(ProductImage, image_id)
    if image is None or image.product_id != product.id:
        raise EntityNotFoundException("Image not found for this product")
    return image


def attach_images(repo: ProductRepository, user: User, product_id: int, urls: Sequence[str]) -> Tuple[Product, List[ProductImage]]:
    """Add images; the first one becomes main if the product has no main image yet."""
    product = _lock_product(repo, user, product_id)
    db = repo.db

    has_main = (
        db.query(ProductImage.id)
        .filter(ProductImage.product_id == product.id, ProductImage.is_main_image.is_(True))
        .first()
        is not None
    )

    images = [ProductImage(product_id=product.id, image_url=url, is_main_image=False) for url in urls]
    if images and not has_main:
        images[0].is_main_image = True
        product.image_url = images[0].image_url

    db.add_all(images)
    db.commit()
    for image in images:
        db.refresh(image)

    logger.info(
        "Images attached",
        product_id=product.id,
        count=len(images),
        main_assigned=bool(images) and not has_main,
    )
    return product, images


def validate_uploads(files: Sequence[IncomingImage]) -> None:
    settings = get_settings()
    if not files:
        raise ValidationException.for_field("images", "No image uploaded")
    if len(files) > settings.MAX_IMAGES_PER_UPLOAD:
        raise ValidationException.for_field(
            "images", f"At most {settings.MAX_IMAGES_PER_UPLOAD} images can be uploaded at once"
        )

    errors = []
    for f in files:
        name = f.filename or "file"
        if not (f.content_type or "").startswith("image/"):
            errors.append({"field": "images", "message": f"{name}: only image files are allowed"})
        elif len(f.content) > settings.MAX_IMAGE_SIZE_BYTES:
            errors.append({"field": "images", "message": f"{name}: file exceeds {settings.MAX_IMAGE_SIZE_BYTES // (1024 * 1024)}MB"})
        elif not f.content:
            errors.append({"field": "images", "message": f"{name}: file is empty"})
    if errors:
        raise ValidationException("Invalid image upload", errors)


def upload_images(
    repo: ProductRepository,
    user: User,
    product_id: int,
    files: Sequence[IncomingImage],
    storage: ImageStorage,
) -> Tuple[Product, List[ProductImage]]:
    """Store files on disk, then attach them. Written files are removed if attaching fails."""
    validate_uploads(files)

    urls: List[str] = []
    try:
        for f in files:
            urls.append(storage.save(f.content, f.filename, f.content_type))
        return attach_images(repo, user, product_id, urls)
    except Exception:
        repo.db.rollback()
        storage.delete_many(urls)
        raise


def set_main_image(repo: ProductRepository, user: User, product_id: int, image_id: int) -> Tuple[Product, ProductImage]:
    product = _lock_product(repo, user, product_id)
    target = _get_image(repo.db, product, image_id)

    for image in product.images:
        image.is_main_image = image.id == target.id
    product.image_url = target.image_url

    repo.db.commit()
    repo.db.refresh(target)
    logger.info("Main image changed", product_id=product.id, image_id=target.id)
    return product, target


def delete_image(
    repo: ProductRepository,
    user: User,
    product_id: int,
    image_id: int,
    storage: ImageStorage,
) -> Product:
    product = _lock_product(repo, user, product_id)
    db = repo.db
    image = _get_image(db, product, image_id)

    was_main = image.is_main_image
    url = image.image_url
    if image in product.images:
        product.images.remove(image)
    db.delete(image)
    db.flush()

    replacement = None
    if was_main:
        replacement = (
            db.query(ProductImage)
            .filter(ProductImage.product_id == product.id)
            .order_by(ProductImage.id)
            .first()
        )
        if replacement is not None:
            replacement.is_main_image = True
            product.image_url = replacement.image_url
        else:
            product.image_url = None

    db.commit()
    logger.info(
        "Image deleted",
        product_id=product.id,
        image_id=image_id,
        was_main=was_main,
        new_main_image_id=replacement.id if replacement is not None else None,
    )

    delete_unreferenced_files(db, storage, [url])
    return product
