"""
Modèle SQLAlchemy pour les utilisateurs du back-office.
Version minimale : seule la sauvegarde quotidienne les lit (pas d'authentification ici).
"""

import uuid
from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(100), unique=True, nullable=False)
    role = Column(String(50), nullable=False, default="ADMIN")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
