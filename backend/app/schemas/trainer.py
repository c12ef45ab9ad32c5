"""
Schémas Pydantic pour les coachs.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class TrainerCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom du coach ne peut pas être vide.")
        return v.strip()


class TrainerResponse(BaseModel):
    id: uuid.UUID
    name: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
