"""
Router pour le pointage des présences.
POST   /api/v1/clients/{id}/timein             : ouvrir une séance
PUT    /api/v1/clients/{id}/timeout            : fermer la séance ouverte
GET    /api/v1/clients/{id}/attendance         : séance ouverte (ou null)
GET    /api/v1/clients/{id}/attendances        : historique complet
DELETE /api/v1/clients/{id}/attendances/today  : annuler les pointages du jour (UTC)
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.schemas.attendance import AttendancePurgeResult, AttendanceResponse
from app.services import attendance_service

router = APIRouter(prefix="/api/v1/clients", tags=["Présences"])


@router.post(
    "/{client_id}/timein",
    response_model=AttendanceResponse,
    status_code=201,
    summary="Pointer l'entrée d'un client",
)
def time_in(client_id: uuid.UUID, db: Session = Depends(get_db)):
    """
    Ouvre une séance (heure d'entrée = maintenant).
    Retourne 404 si le client est introuvable, 409 si une séance est déjà ouverte.
    """
    try:
        return attendance_service.time_in(db, client_id)
    except attendance_service.OpenSessionConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        msg = str(e)
        if "introuvable" in msg:
            raise HTTPException(status_code=404, detail=msg)
        raise HTTPException(status_code=400, detail=msg)


@router.put("/{client_id}/timeout", response_model=AttendanceResponse, summary="Pointer la sortie d'un client")
def time_out(client_id: uuid.UUID, db: Session = Depends(get_db)):
    """Ferme la séance ouverte. Retourne 404 (sans rien modifier) si aucune séance n'est ouverte."""
    attendance = attendance_service.time_out(db, client_id)
    if attendance is None:
        raise HTTPException(status_code=404, detail="Aucune séance ouverte pour ce client.")
    return attendance


@router.get(
    "/{client_id}/attendance",
    response_model=Optional[AttendanceResponse],
    summary="Séance ouverte d'un client",
)
def get_open_session(client_id: uuid.UUID, db: Session = Depends(get_db)):
    """Retourne la séance en cours, ou null si le client n'est pas dans la salle."""
    return attendance_service.get_open_session(db, client_id)


@router.get(
    "/{client_id}/attendances",
    response_model=List[AttendanceResponse],
    summary="Historique des présences d'un client",
)
def list_attendances(client_id: uuid.UUID, db: Session = Depends(get_db)):
    """Toutes les séances du client, de la plus récente à la plus ancienne."""
    return attendance_service.list_attendances(db, client_id)


@router.delete(
    "/{client_id}/attendances/today",
    response_model=AttendancePurgeResult,
    summary="Supprimer les présences du jour",
)
def purge_today(client_id: uuid.UUID, db: Session = Depends(get_db)):
    """
    Supprime les présences du client datées d'aujourd'hui (jour UTC).
    Sert à corriger un double pointage accidentel.
    """
    deleted = attendance_service.purge_today(db, client_id)
    return AttendancePurgeResult(client_id=client_id, deleted=deleted)
