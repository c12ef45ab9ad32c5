"""
Schéma Pydantic des utilisateurs, utilisé uniquement par la sauvegarde JSON.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserBackup(BaseModel):
    id: uuid.UUID
    username: str
    role: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
