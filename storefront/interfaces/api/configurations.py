"""Configurations API routes: site-wide settings such as the contact WhatsApp number."""

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from storefront.application.services import configuration_service
from storefront.domain.models.user import User
from storefront.domain.schemas.base import MessageResponse
from storefront.domain.schemas.configuration import ConfigurationRead, ConfigurationUpdate, ConfigurationUpsert
from storefront.infrastructure.database import get_db
from storefront.interfaces.api.deps import require_admin

router = APIRouter(prefix="/api/configurations", tags=["Configurations"])


@router.get("", response_model=List[ConfigurationRead])
def list_configurations(
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    return configuration_service.list_configurations(db)


@router.get("/{key}", response_model=ConfigurationRead)
def get_configuration(key: str = Path(min_length=1), db: Session = Depends(get_db)):
    return configuration_service.get_configuration_value(db, key)


@router.post("", response_model=ConfigurationRead, status_code=status.HTTP_201_CREATED)
def save_configuration(
    body: ConfigurationUpsert,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    return configuration_service.upsert_configuration(db, body)


@router.put("/{configuration_id}", response_model=ConfigurationRead)
def update_configuration(
    configuration_id: int,
    body: ConfigurationUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    return configuration_service.update_configuration(db, configuration_id, body)


@router.delete("/{configuration_id}", response_model=MessageResponse)
def delete_configuration(
    configuration_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    configuration_service.delete_configuration(db, configuration_id)
    return MessageResponse(message="Configuration removed")
