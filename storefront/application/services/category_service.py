"""Category service."""

from typing import List

import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.core.exceptions import ConflictException, EntityNotFoundException
from storefront.domain.models.category import Category
from storefront.domain.models.product import Product
from storefront.domain.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from storefront.infrastructure.repositories.base_repository import SQLAlchemyRepository

logger = structlog.get_logger(__name__)

NAME_TAKEN = "Category name already exists."


def _repo(db: Session) -> SQLAlchemyRepository[Category]:
    return SQLAlchemyRepository(db, Category)


def _count_products(db: Session, category_id: int) -> int:
    return db.query(func.count(Product.id)).filter(Product.category_id == category_id).scalar() or 0


def _read(db: Session, category: Category) -> CategoryRead:
    return CategoryRead.model_validate(category).model_copy(
        update={"product_count": _count_products(db, category.id)}
    )


def _ensure_name_free(db: Session, name: str, exclude_id: int | None = None) -> None:
    existing = db.query(Category).filter(Category.name == name).first()
    if existing and existing.id != exclude_id:
        raise ConflictException(NAME_TAKEN, [{"field": "name", "message": NAME_TAKEN}])


def get_category_or_404(db: Session, category_id: int) -> Category:
    category = _repo(db).get_by_id(category_id)
    if category is None:
        raise EntityNotFoundException("Category not found")
    return category


def list_categories(db: Session) -> List[CategoryRead]:
    """All categories with their product count, in one grouped query."""
    rows = (
        db.query(Category, func.count(Product.id))
        .outerjoin(Product, Product.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name)
        .all()
    )
    return [
        CategoryRead.model_validate(category).model_copy(update={"product_count": count})
        for category, count in rows
    ]


def get_category(db: Session, category_id: int) -> CategoryRead:
    return _read(db, get_category_or_404(db, category_id))


def create_category(db: Session, body: CategoryCreate) -> CategoryRead:
    _ensure_name_free(db, body.name)
    category = _repo(db).create(body)
    db.commit()
    db.refresh(category)
    logger.info("Category created", category_id=category.id, name=category.name)
    return _read(db, category)


def update_category(db: Session, category_id: int, body: CategoryUpdate) -> CategoryRead:
    category = get_category_or_404(db, category_id)
    data = body.model_dump(exclude_unset=True)
    if data.get("name") is None:
        data.pop("name", None)
    else:
        _ensure_name_free(db, data["name"], exclude_id=category.id)

    _repo(db).update(category, data)
    db.commit()
    db.refresh(category)
    logger.info("Category updated", category_id=category.id)
    return _read(db, category)


def delete_category(db: Session, category_id: int) -> None:
    category = get_category_or_404(db, category_id)
    product_count = _count_products(db, category.id)
    if product_count > 0:
        raise ConflictException(
            "Cannot delete category with associated products",
            [{"field": "productCount", "message": f"{product_count} product(s) still use this category"}],
        )
    _repo(db).delete(category.id)
    db.commit()
    logger.info("Category deleted", category_id=category_id)
