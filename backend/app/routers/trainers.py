"""
Router pour les coachs : listage, création, suppression.
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.trainer import Trainer
from app.schemas.trainer import TrainerCreate, TrainerResponse

router = APIRouter(prefix="/api/v1/trainers", tags=["Coachs"])


@router.get("", response_model=List[TrainerResponse], summary="Lister les coachs")
def list_trainers(db: Session = Depends(get_db)):
    """Retourne tous les coachs triés par nom."""
    return db.execute(select(Trainer).order_by(Trainer.name)).scalars().all()


@router.post("", response_model=TrainerResponse, status_code=201, summary="Ajouter un coach")
def create_trainer(data: TrainerCreate, db: Session = Depends(get_db)):
    trainer = Trainer(name=data.name)
    db.add(trainer)
    db.commit()
    db.refresh(trainer)
    return trainer


@router.delete("/{trainer_id}", status_code=204, summary="Supprimer un coach")
def delete_trainer(trainer_id: uuid.UUID, db: Session = Depends(get_db)):
    """Supprime un coach. Les clients qui le référencent gardent une référence orpheline."""
    trainer = db.get(Trainer, trainer_id)
    if trainer is None:
        raise HTTPException(status_code=404, detail="Coach introuvable.")

    db.delete(trainer)
    db.commit()
