"""
Router pour les photos clients.
POST /api/v1/clients/{id}/photo : upload multipart (champ "photo", images ≤ 5 Mo)
GET  /api/v1/clients/{id}/photo : lecture (octets en mode inline, redirection en mode path)
"""

import uuid

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import RedirectResponse, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.photo import PhotoUploadResult
from app.services.photo_service import (
    MAX_PHOTO_SIZE,
    PhotoStorage,
    PhotoTooLargeError,
    UnsupportedPhotoTypeError,
    get_photo_storage,
)

router = APIRouter(prefix="/api/v1/clients", tags=["Photos"])

PHOTO_CACHE_CONTROL = "public, max-age=86400"


@router.post("/{client_id}/photo", response_model=PhotoUploadResult, summary="Uploader la photo d'un client")
async def upload_photo(
    client_id: uuid.UUID,
    photo: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage),
):
    """
    Remplace la photo du client.

    - Formats acceptés : jpeg, jpg, png, gif, avif (extension ET type MIME vérifiés) → sinon 415
    - Taille maximale : 5 Mo → sinon 413
    - Client inconnu → 404
    """
    # Lecture bornée : un octet de plus que la limite suffit à détecter le dépassement
    content = await photo.read(MAX_PHOTO_SIZE + 1)
    try:
        return storage.store(db, client_id, content, photo.content_type, photo.filename)
    except UnsupportedPhotoTypeError as e:
        raise HTTPException(status_code=415, detail=str(e))
    except PhotoTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ValueError as e:
        msg = str(e)
        if "introuvable" in msg:
            raise HTTPException(status_code=404, detail=msg)
        raise HTTPException(status_code=400, detail=msg)


@router.get("/{client_id}/photo", summary="Photo d'un client")
def get_photo(
    client_id: uuid.UUID,
    db: Session = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage),
):
    """Renvoie l'image (cache navigateur 1 jour) ou redirige vers le fichier statique. 404 si aucune photo."""
    try:
        photo = storage.serve(db, client_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if photo.redirect_url:
        return RedirectResponse(url=photo.redirect_url, status_code=307)
    return Response(
        content=photo.data,
        media_type=photo.content_type,
        headers={"Cache-Control": PHOTO_CACHE_CONTROL},
    )
