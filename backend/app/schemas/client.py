"""
Schémas Pydantic pour les clients de la salle.
"""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from app.schemas.trainer import TrainerResponse


class ClientCreate(BaseModel):
    """Schéma d'inscription d'un client (POST /clients)."""
    name: str
    phone: str
    address: str
    fee_submission_date: date
    trainer_id: Optional[uuid.UUID] = None

    @field_validator("name", "phone", "address")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip()


class ClientUpdate(BaseModel):
    """Schéma de mise à jour d'un client (PUT /clients/{id}). Les champs absents ne sont pas modifiés."""
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    fee_submission_date: Optional[date] = None
    trainer_id: Optional[uuid.UUID] = None

    @field_validator("name", "phone", "address", "fee_submission_date", mode="before")
    @classmethod
    def not_null(cls, v):
        # null explicite refusé ; trainer_id: null reste permis (retire le coach)
        if v is None:
            raise ValueError("Le champ ne peut pas être null.")
        return v

    @field_validator("name", "phone", "address")
    @classmethod
    def not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le champ ne peut pas être vide.")
        return v.strip() if v else v


class ClientResponse(BaseModel):
    """Schéma de réponse pour un client, avec son coach et l'URL de sa photo."""
    id: uuid.UUID
    name: str
    phone: str
    address: str
    fee_submission_date: date
    trainer_id: Optional[uuid.UUID] = None
    trainer: Optional[TrainerResponse] = None
    has_photo: bool = False
    photo_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ClientBackup(ClientResponse):
    """Ligne client complète pour la sauvegarde JSON (inclut la photo inline telle que stockée)."""
    photo_path: Optional[str] = None
    photo_data: Optional[str] = None
    photo_content_type: Optional[str] = None
    photo_uploaded_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
