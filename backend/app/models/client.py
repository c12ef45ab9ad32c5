"""
Modèle SQLAlchemy pour la table clients (membres de la salle).

Photo : une seule représentation active à la fois, choisie au moment de l'upload
selon le mode de stockage configuré :
- mode "path"   : photo_path contient le chemin relatif du fichier (/uploads/...)
- mode "inline" : photo_data (base64), photo_content_type et photo_uploaded_at
"""

import uuid
from sqlalchemy import Column, Date, DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.database import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    address = Column(String(500), nullable=False)
    fee_submission_date = Column(Date, nullable=False)  # Jour d'ancrage de la cotisation mensuelle

    # Pas de contrainte FK : la suppression d'un coach laisse une référence orpheline
    trainer_id = Column(UUID(as_uuid=True), nullable=True, index=True)

    photo_path = Column(String(500), nullable=True)
    photo_data = Column(Text, nullable=True)
    photo_content_type = Column(String(100), nullable=True)
    photo_uploaded_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    trainer = relationship(
        "Trainer",
        primaryjoin="foreign(Client.trainer_id) == Trainer.id",
        viewonly=True,
        lazy="joined",
    )

    @property
    def has_photo(self) -> bool:
        return bool(self.photo_path or self.photo_data)

    @property
    def photo_url(self):
        """URL publique de la photo (servie par GET /clients/{id}/photo), None si absente."""
        if not self.has_photo:
            return None
        return f"/api/v1/clients/{self.id}/photo"
