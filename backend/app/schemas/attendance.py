"""
Schémas Pydantic pour les présences (pointage entrée / sortie).
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AttendanceResponse(BaseModel):
    """Séance de présence. time_out à null = séance encore ouverte."""
    id: uuid.UUID
    client_id: uuid.UUID
    time_in: datetime
    time_out: Optional[datetime] = None
    date: datetime
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AttendancePurgeResult(BaseModel):
    """Résultat de DELETE /clients/{id}/attendances/today."""
    client_id: uuid.UUID
    deleted: int
