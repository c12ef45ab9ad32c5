"""
Modèle SQLAlchemy pour les présences (pointage entrée / sortie).

Une séance est "ouverte" tant que time_out est NULL.
L'index unique partiel uq_attendances_open_session garantit au plus une séance
ouverte par client, même en cas de double pointage concurrent.
"""

import uuid
from sqlalchemy import Column, DateTime, Index, func, text
from sqlalchemy.dialects.postgresql import UUID

from app.database import Base


class Attendance(Base):
    """Séance de présence d'un client à la salle."""
    __tablename__ = "attendances"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Pas de contrainte FK : les présences d'un client supprimé restent en base (orphelines)
    client_id = Column(UUID(as_uuid=True), nullable=False, index=True)

    time_in = Column(DateTime(timezone=True), nullable=False)
    time_out = Column(DateTime(timezone=True), nullable=True)   # NULL = séance ouverte
    date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())  # Regroupement par jour

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index(
            "uq_attendances_open_session",
            "client_id",
            unique=True,
            postgresql_where=text("time_out IS NULL"),
            sqlite_where=text("time_out IS NULL"),
        ),
    )
