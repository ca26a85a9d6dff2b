"""Site-wide key/value settings (e.g. the contact WhatsApp number)."""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from storefront.infrastructure.database import Base


class Configuration(Base):
    __tablename__ = "configurations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    config_key = Column(String(200), unique=True, nullable=False, index=True)
    config_value = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Configuration {self.config_key}>"
