"""
Schémas Pydantic pour l'upload des photos clients.
"""

import uuid
from typing import Optional

from pydantic import BaseModel


class PhotoUploadResult(BaseModel):
    """Résumé du client renvoyé après un upload de photo réussi."""
    id: uuid.UUID
    name: str
    has_photo: bool
    photo_url: Optional[str]


class PhotoContent(BaseModel):
    """
    Photo à renvoyer au navigateur :
    - mode inline : octets décodés + content type stocké
    - mode path   : URL du fichier statique (/uploads/...) vers laquelle rediriger
    """
    data: Optional[bytes] = None
    content_type: Optional[str] = None
    redirect_url: Optional[str] = None
