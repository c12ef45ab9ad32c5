"""
Schémas Pydantic pour les rappels de cotisation.
"""

import uuid
from typing import List

from pydantic import BaseModel


class FeeReminder(BaseModel):
    """Un rappel à envoyer : calculé sans effet de bord, envoyé ensuite."""
    client_id: uuid.UUID
    phone: str
    days: int
    message: str


class FeeReminderRunResult(BaseModel):
    """Rapport d'une exécution du job de rappels."""
    checked: int
    sent: int
    errors: List[str]
