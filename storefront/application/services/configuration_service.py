"""Configuration service: site-wide key/value settings."""

from typing import List

import structlog
from sqlalchemy.orm import Session

from storefront.core.exceptions import EntityNotFoundException
from storefront.domain.models.configuration import Configuration
from storefront.domain.schemas.configuration import ConfigurationRead, ConfigurationUpdate, ConfigurationUpsert

logger = structlog.get_logger(__name__)


def list_configurations(db: Session) -> List[Configuration]:
    return db.query(Configuration).order_by(Configuration.config_key).all()


def get_configuration_value(db: Session, key: str) -> ConfigurationRead:
    """Missing keys yield an empty placeholder so clients can fall back to defaults."""
    configuration = db.query(Configuration).filter(Configuration.config_key == key).first()
    if configuration is None:
        return ConfigurationRead(config_key=key, config_value="", description="Configuration not found")
    return ConfigurationRead.model_validate(configuration)


def upsert_configuration(db: Session, body: ConfigurationUpsert) -> Configuration:
    configuration = db.query(Configuration).filter(Configuration.config_key == body.config_key).first()
    if configuration is None:
        configuration = Configuration(
            config_key=body.config_key,
            config_value=body.config_value,
            description=body.description,
        )
        db.add(configuration)
        created = True
    else:
        configuration.config_value = body.config_value
        if body.description:
            configuration.description = body.description
        created = False

    db.commit()
    db.refresh(configuration)
    logger.info("Configuration saved", config_key=configuration.config_key, created=created)
    return configuration


def _get(db: Session, configuration_id: int) -> Configuration:
    configuration = db.get(Configuration, configuration_id)
    if configuration is None:
        raise EntityNotFoundException("Configuration not found")
    return configuration


def update_configuration(db: Session, configuration_id: int, body: ConfigurationUpdate) -> Configuration:
    configuration = _get(db, configuration_id)
    if body.config_value is not None:
        configuration.config_value = body.config_value
    if "description" in body.model_fields_set:
        configuration.description = body.description
    db.commit()
    db.refresh(configuration)
    logger.info("Configuration updated", config_key=configuration.config_key)
    return configuration


def delete_configuration(db: Session, configuration_id: int) -> None:
    configuration = _get(db, configuration_id)
    db.delete(configuration)
    db.commit()
    logger.info("Configuration deleted", config_key=configuration.config_key)
