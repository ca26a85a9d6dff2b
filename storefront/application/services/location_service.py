"""Location (store) service."""

from typing import List

import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.core.exceptions import ConflictException, EntityNotFoundException
from storefront.domain.models.location import Location
from storefront.domain.models.product import Product
from storefront.domain.models.user import User
from storefront.domain.schemas.location import LocationCreate, LocationUpdate
from storefront.infrastructure.repositories.base_repository import SQLAlchemyRepository

logger = structlog.get_logger(__name__)

# Columns that may not be cleared through an update
REQUIRED_FIELDS = ("name",)


def _repo(db: Session) -> SQLAlchemyRepository[Location]:
    return SQLAlchemyRepository(db, Location)


def list_locations(db: Session) -> List[Location]:
    return db.query(Location).order_by(Location.id).all()


def get_location(db: Session, location_id: int) -> Location:
    location = _repo(db).get_by_id(location_id)
    if location is None:
        raise EntityNotFoundException("Location not found")
    return location


def create_location(db: Session, body: LocationCreate) -> Location:
    location = _repo(db).create(body)
    db.commit()
    db.refresh(location)
    logger.info("Location created", location_id=location.id, name=location.name)
    return location


def update_location(db: Session, location_id: int, body: LocationUpdate) -> Location:
    location = get_location(db, location_id)
    data = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if not (field in REQUIRED_FIELDS and value is None)
    }
    _repo(db).update(location, data)
    db.commit()
    db.refresh(location)
    logger.info("Location updated", location_id=location.id)
    return location


def delete_location(db: Session, location_id: int) -> None:
    location = get_location(db, location_id)
    product_count = db.query(func.count(Product.id)).filter(Product.location_id == location.id).scalar() or 0
    if product_count > 0:
        raise ConflictException(
            "Cannot delete location with associated products",
            [{"field": "productCount", "message": f"{product_count} product(s) are stocked at this location"}],
        )

    detached = (
        db.query(User)
        .filter(User.location_id == location.id)
        .update({User.location_id: None}, synchronize_session="fetch")
    )
    db.delete(location)
    db.commit()
    logger.info("Location deleted", location_id=location_id, detached_users=detached)
