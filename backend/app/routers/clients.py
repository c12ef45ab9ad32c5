"""
Router pour les clients de la salle.
Listage (GET /api/v1/clients), recherche par nom (GET /api/v1/clients/search),
détail, création, mise à jour et suppression.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.client import Client
from app.models.trainer import Trainer
from app.schemas.client import ClientCreate, ClientResponse, ClientUpdate

router = APIRouter(prefix="/api/v1/clients", tags=["Clients"])


@router.get("", response_model=List[ClientResponse], summary="Lister tous les clients")
def list_clients(db: Session = Depends(get_db)):
    """Retourne tous les clients triés par nom, avec leur coach et l'URL de leur photo."""
    clients = db.execute(select(Client).order_by(Client.name)).scalars().all()
    return clients


@router.get("/search", response_model=List[ClientResponse], summary="Rechercher des clients par nom")
def search_clients(name: str = Query("", description="Fragment du nom (insensible à la casse)"), db: Session = Depends(get_db)):
    """Recherche insensible à la casse sur une partie du nom."""
    clients = db.execute(
        select(Client).where(Client.name.ilike(f"%{name.strip()}%")).order_by(Client.name)
    ).scalars().all()
    return clients


@router.get("/{client_id}", response_model=ClientResponse, summary="Détail d'un client")
def get_client(client_id: uuid.UUID, db: Session = Depends(get_db)):
    client = db.get(Client, client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client introuvable.")
    return client


@router.post("", response_model=ClientResponse, status_code=201, summary="Inscrire un client")
def create_client(data: ClientCreate, db: Session = Depends(get_db)):
    """Crée un client. La photo s'ajoute ensuite via POST /clients/{id}/photo."""
    if data.trainer_id is not None and db.get(Trainer, data.trainer_id) is None:
        raise HTTPException(status_code=404, detail="Coach introuvable.")

    client = Client(
        name=data.name,
        phone=data.phone,
        address=data.address,
        fee_submission_date=data.fee_submission_date,
        trainer_id=data.trainer_id,
    )
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


@router.put("/{client_id}", response_model=ClientResponse, summary="Modifier un client")
def update_client(client_id: uuid.UUID, data: ClientUpdate, db: Session = Depends(get_db)):
    """Met à jour les champs fournis d'un client. Les champs absents ne sont pas modifiés."""
    client = db.get(Client, client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client introuvable.")

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("trainer_id") is not None and db.get(Trainer, update_data["trainer_id"]) is None:
        raise HTTPException(status_code=404, detail="Coach introuvable.")

    for field, value in update_data.items():
        setattr(client, field, value)

    db.commit()
    db.refresh(client)
    return client


@router.delete("/{client_id}", status_code=204, summary="Supprimer un client")
def delete_client(client_id: uuid.UUID, db: Session = Depends(get_db)):
    """Supprime définitivement un client. Ses présences restent en base (pas de cascade)."""
    client = db.get(Client, client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client introuvable.")

    db.delete(client)
    db.commit()
