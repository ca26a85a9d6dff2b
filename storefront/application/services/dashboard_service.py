"""Dashboard service: aggregated catalog stats for the back-office."""

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from storefront.core.clock import utcnow
from storefront.domain.models.category import Category
from storefront.domain.models.location import Location
from storefront.domain.models.product import Product
from storefront.domain.models.user import User
from storefront.domain.repositories.product_repository import ProductRepository
from storefront.domain.schemas.dashboard import DashboardStats, LocationProductCount
from storefront.domain.schemas.product import ProductRead


def _product_count(db: Session, user: User, *criteria) -> int:
    query = db.query(func.count(Product.id))
    if not user.is_super_admin:
        query = query.filter(Product.location_id == user.location_id)
    return query.filter(*criteria).scalar() or 0


def get_dashboard_stats(db: Session, repo: ProductRepository, user: User) -> DashboardStats:
    """Super-admins see every store; other admins only their own."""
    now = utcnow()
    unassigned = not user.is_super_admin and user.location_id is None

    by_location = []
    recent = []
    if not unassigned:
        query = db.query(Location.id, Location.name, func.count(Product.id)).outerjoin(
            Product, Product.location_id == Location.id
        )
        if not user.is_super_admin:
            query = query.filter(Location.id == user.location_id)
        by_location = query.group_by(Location.id, Location.name).order_by(Location.id).all()
        recent = repo.get_recent(5, location_id=None if user.is_super_admin else user.location_id)

    return DashboardStats(
        total_products=_product_count(db, user),
        in_stock=_product_count(db, user, Product.in_stock.is_(True)),
        out_of_stock=_product_count(db, user, Product.in_stock.is_(False)),
        active_promotions=_product_count(
            db,
            user,
            Product.is_on_promotion.is_(True),
            or_(Product.promotion_end_date.is_(None), Product.promotion_end_date > now),
        ),
        total_categories=db.query(func.count(Category.id)).scalar() or 0,
        total_locations=db.query(func.count(Location.id)).scalar() or 0,
        products_by_location=[
            LocationProductCount(location_id=loc_id, location_name=name, product_count=count)
            for loc_id, name, count in by_location
        ],
        recent_products=[ProductRead.model_validate(p) for p in recent],
        generated_at=now,
    )
