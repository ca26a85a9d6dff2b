"""Locations API routes: stores are managed by super-admins only."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.application.services import location_service
from storefront.domain.models.user import User
from storefront.domain.schemas.base import MessageResponse
from storefront.domain.schemas.location import LocationCreate, LocationRead, LocationUpdate
from storefront.infrastructure.database import get_db
from storefront.interfaces.api.deps import require_super_admin

router = APIRouter(prefix="/api/locations", tags=["Locations"])


@router.get("", response_model=List[LocationRead])
def list_locations(db: Session = Depends(get_db)):
    return location_service.list_locations(db)


@router.get("/{location_id}", response_model=LocationRead)
def get_location(location_id: int, db: Session = Depends(get_db)):
    return location_service.get_location(db, location_id)


@router.post("", response_model=LocationRead, status_code=status.HTTP_201_CREATED)
def create_location(
    body: LocationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_super_admin),
):
    return location_service.create_location(db, body)


@router.put("/{location_id}", response_model=LocationRead)
def update_location(
    location_id: int,
    body: LocationUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_super_admin),
):
    return location_service.update_location(db, location_id, body)


@router.delete("/{location_id}", response_model=MessageResponse)
def delete_location(
    location_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_super_admin),
):
    location_service.delete_location(db, location_id)
    return MessageResponse(message="Location removed")
