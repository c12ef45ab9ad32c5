"""
Service métier pour le pointage des présences (entrée / sortie).

Règle centrale : au plus une séance ouverte (time_out NULL) par client.
- time_in refuse un nouveau pointage si une séance est déjà ouverte
  (pas de fermeture implicite de l'ancienne séance)
- l'index unique partiel uq_attendances_open_session couvre le cas concurrent :
  l'IntegrityError est convertie en conflit
- time_out sans séance ouverte ne modifie rien et renvoie None

"Aujourd'hui" est toujours le jour calendaire UTC : [00:00 UTC, 00:00 UTC du lendemain[.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.attendance import Attendance
from app.models.client import Client
from app.schemas.attendance import AttendanceResponse

logger = logging.getLogger(__name__)


class OpenSessionConflictError(ValueError):
    """Le client a déjà une séance ouverte."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


def utc_day_bounds(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Retourne l'intervalle semi-ouvert [début, fin[ du jour UTC contenant `now`.
    Un datetime naïf est interprété comme UTC.
    """
    now = now or _now()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    else:
        now = now.astimezone(timezone.utc)
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def _find_open_session(db: Session, client_id: uuid.UUID) -> Optional[Attendance]:
    # Tri + limit : choix déterministe même si d'anciennes données contiennent
    # plusieurs séances ouvertes (antérieures à l'index unique).
    return db.execute(
        select(Attendance)
        .where(
            Attendance.client_id == client_id,
            Attendance.time_out.is_(None),
        )
        .order_by(Attendance.time_in.desc())
        .limit(1)
    ).scalar()


def time_in(
    db: Session,
    client_id: uuid.UUID,
    now: Optional[datetime] = None,
) -> AttendanceResponse:
    """
    Ouvre une nouvelle séance pour le client (time_in = date = maintenant, UTC).

    Lève ValueError si le client est introuvable,
    OpenSessionConflictError si une séance est déjà ouverte.
    """
    client = db.get(Client, client_id)
    if client is None:
        raise ValueError(f"Client {client_id} introuvable.")

    if _find_open_session(db, client_id) is not None:
        raise OpenSessionConflictError("Le client a déjà une séance ouverte.")

    now = now or _now()
    attendance = Attendance(client_id=client_id, time_in=now, date=now)
    db.add(attendance)
    try:
        db.commit()
    except IntegrityError:
        # Pointage concurrent : l'autre requête a ouvert la séance entre-temps
        db.rollback()
        raise OpenSessionConflictError("Le client a déjà une séance ouverte.")
    db.refresh(attendance)

    logger.info("Pointage entrée : client %s à %s", client_id, now.isoformat())
    return AttendanceResponse.model_validate(attendance)


def get_open_session(db: Session, client_id: uuid.UUID) -> Optional[AttendanceResponse]:
    """Retourne la séance ouverte du client, ou None."""
    attendance = _find_open_session(db, client_id)
    if attendance is None:
        return None
    return AttendanceResponse.model_validate(attendance)


def time_out(
    db: Session,
    client_id: uuid.UUID,
    now: Optional[datetime] = None,
) -> Optional[AttendanceResponse]:
    """
    Ferme la séance ouverte du client (time_out = maintenant, UTC).
    Retourne None sans rien écrire si aucune séance n'est ouverte.
    """
    attendance = _find_open_session(db, client_id)
    if attendance is None:
        logger.info("Pointage sortie ignoré : aucune séance ouverte pour le client %s", client_id)
        return None

    now = now or _now()
    attendance.time_out = now
    db.commit()
    db.refresh(attendance)

    logger.info("Pointage sortie : client %s à %s", client_id, now.isoformat())
    return AttendanceResponse.model_validate(attendance)


def list_attendances(db: Session, client_id: uuid.UUID) -> List[AttendanceResponse]:
    """Historique complet des présences du client, de la plus récente à la plus ancienne."""
    attendances = db.execute(
        select(Attendance)
        .where(Attendance.client_id == client_id)
        .order_by(Attendance.created_at.desc(), Attendance.time_in.desc())
    ).scalars().all()
    return [AttendanceResponse.model_validate(a) for a in attendances]


def purge_today(
    db: Session,
    client_id: uuid.UUID,
    now: Optional[datetime] = None,
) -> int:
    """
    Supprime les présences du client datées du jour UTC courant.
    Sert à corriger un double pointage accidentel. Retourne le nombre de lignes supprimées.
    """
    start, end = utc_day_bounds(now)
    result = db.execute(
        delete(Attendance).where(
            Attendance.client_id == client_id,
            Attendance.date >= start,
            Attendance.date < end,
        )
    )
    db.commit()

    deleted = result.rowcount or 0
    logger.info(
        "Présences du jour supprimées : client %s, %d lignes (%s → %s)",
        client_id, deleted, start.isoformat(), end.isoformat(),
    )
    return deleted
