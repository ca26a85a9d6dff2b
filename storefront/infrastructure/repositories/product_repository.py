"""
SQLAlchemy Implementation of Product Repository.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import joinedload, selectinload

from storefront.domain.models.product import Product
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.domain.schemas.product import ProductFilter
from storefront.infrastructure.repositories.base_repository import SQLAlchemyRepository

SORT_COLUMNS = {
    "createdAt": Product.created_at,
    "updatedAt": Product.updated_at,
    "name": Product.name,
    "price": Product.price,
    "quantity": Product.quantity,
}


def _escape_like(term: str) -> str:
    """Make LIKE wildcards in user input match literally (escape char is a backslash)."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLAlchemyProductRepository(SQLAlchemyRepository[Product], ProductRepository):
    """Product repository implementation using SQLAlchemy."""

    def get_with_filters(self, filters: ProductFilter) -> Dict[str, Any]:
        """Get products with filtering and pagination."""
        query = self.db.query(Product)

        if filters.category_id is not None:
            query = query.filter(Product.category_id == filters.category_id)
        if filters.location_id is not None:
            query = query.filter(Product.location_id == filters.location_id)
        if filters.min_price is not None:
            query = query.filter(Product.price >= filters.min_price)
        if filters.max_price is not None:
            query = query.filter(Product.price <= filters.max_price)
        if filters.search:
            query = query.filter(Product.name.ilike(f"%{_escape_like(filters.search)}%", escape="\\"))

        total = query.count()

        column = SORT_COLUMNS[filters.sort_by]
        if filters.order_by == "asc":
            ordering = (column.asc(), Product.id.asc())
        else:
            ordering = (column.desc(), Product.id.desc())

        offset = (filters.page - 1) * filters.limit
        products = (
            query.options(joinedload(Product.category), joinedload(Product.location))
            .order_by(*ordering)
            .offset(offset)
            .limit(filters.limit)
            .all()
        )

        pages = (total + filters.limit - 1) // filters.limit
        return {
            "products": products,
            "pagination": {
                "total": total,
                "page": filters.page,
                "limit": filters.limit,
                "pages": pages,
                "has_more": filters.page < pages,
            },
        }

    def get_detail(self, id: int) -> Optional[Product]:
        return (
            self.db.query(Product)
            .options(
                joinedload(Product.category),
                joinedload(Product.location),
                selectinload(Product.images),
            )
            .filter(Product.id == id)
            .first()
        )

    def get_for_update(self, id: int) -> Optional[Product]:
        # FOR UPDATE is ignored by SQLite, honoured by PostgreSQL/MySQL
        return self.db.query(Product).filter(Product.id == id).with_for_update().first()

    def get_recent(self, limit: int = 5, location_id: Optional[int] = None) -> List[Product]:
        query = self.db.query(Product).options(joinedload(Product.category), joinedload(Product.location))
        if location_id is not None:
            query = query.filter(Product.location_id == location_id)
        return query.order_by(Product.created_at.desc(), Product.id.desc()).limit(limit).all()
