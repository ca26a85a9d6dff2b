"""Categories API routes."""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from storefront.application.services import category_service
from storefront.domain.models.user import User
from storefront.domain.schemas.base import MessageResponse
from storefront.domain.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from storefront.infrastructure.database import get_db
from storefront.interfaces.api.deps import require_admin

router = APIRouter(prefix="/api/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    return category_service.list_categories(db)


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(category_id: int, db: Session = Depends(get_db)):
    return category_service.get_category(db, category_id)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    return category_service.create_category(db, body)


@router.put("/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: int,
    body: CategoryUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    return category_service.update_category(db, category_id, body)


@router.delete("/{category_id}", response_model=MessageResponse)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    category_service.delete_category(db, category_id)
    return MessageResponse(message="Category removed")
