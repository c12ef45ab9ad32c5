"""
Sauvegarde quotidienne des données en JSON.

Un fichier backup-<horodatage ISO>.json par exécution dans BACKUP_DIR, contenant
clients, présences et utilisateurs. Seules les BACKUP_RETENTION (7) sauvegardes
les plus récentes sont conservées.

Tout est best-effort : une erreur est loggée, jamais propagée, et ne bloque pas
l'exécution suivante. Un verrou non bloquant empêche deux sauvegardes simultanées.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import settings
from app.models.attendance import Attendance
from app.models.client import Client
from app.models.user import User
from app.schemas.attendance import AttendanceResponse
from app.schemas.client import ClientBackup
from app.schemas.user import UserBackup

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "backup-"
BACKUP_SUFFIX = ".json"

_backup_lock = threading.Lock()


def backup_filename(now: datetime) -> str:
    """backup-2026-10-18T02-00-00-000Z.json : l'ordre alphabétique suit l'ordre chronologique."""
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return BACKUP_PREFIX + stamp.replace(":", "-").replace(".", "-") + BACKUP_SUFFIX


def build_snapshot(db: Session, now: datetime) -> dict:
    """Sérialise toutes les collections sauvegardées en structure JSON-compatible."""
    clients = db.execute(select(Client)).scalars().all()
    attendances = db.execute(select(Attendance)).scalars().all()
    users = db.execute(select(User)).scalars().all()

    return {
        "clients": [ClientBackup.model_validate(c).model_dump(mode="json") for c in clients],
        "attendances": [AttendanceResponse.model_validate(a).model_dump(mode="json") for a in attendances],
        "users": [UserBackup.model_validate(u).model_dump(mode="json") for u in users],
        "timestamp": now.isoformat(),
    }


def prune_backups(backup_dir: Path, keep: int) -> List[Path]:
    """Supprime les sauvegardes au-delà des `keep` plus récentes. Retourne les fichiers supprimés."""
    files = sorted(
        backup_dir.glob(f"{BACKUP_PREFIX}*{BACKUP_SUFFIX}"),
        key=lambda p: p.name,
        reverse=True,
    )
    deleted: List[Path] = []
    for stale in files[keep:]:
        try:
            stale.unlink(missing_ok=True)
            deleted.append(stale)
        except OSError as exc:
            logger.warning("Suppression de l'ancienne sauvegarde %s impossible : %s", stale, exc)
    if deleted:
        logger.info("%d ancienne(s) sauvegarde(s) supprimée(s)", len(deleted))
    return deleted


def run_backup(
    db: Session,
    backup_dir=None,
    keep: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Optional[Path]:
    """
    Exécute une sauvegarde complète puis applique la rétention.
    Retourne le chemin du fichier écrit, ou None si la sauvegarde a échoué ou était déjà en cours.
    """
    if not _backup_lock.acquire(blocking=False):
        logger.warning("Sauvegarde déjà en cours, exécution ignorée.")
        return None

    try:
        now = now or datetime.now(timezone.utc)
        backup_dir = Path(backup_dir or settings.BACKUP_DIR)
        keep = settings.BACKUP_RETENTION if keep is None else keep

        backup_dir.mkdir(parents=True, exist_ok=True)
        snapshot = build_snapshot(db, now)
        path = backup_dir / backup_filename(now)
        path.write_text(json.dumps(snapshot, indent=2, ensure_ascii=False), encoding="utf-8")
        logger.info(
            "Sauvegarde créée : %s (%d clients, %d présences, %d utilisateurs)",
            path, len(snapshot["clients"]), len(snapshot["attendances"]), len(snapshot["users"]),
        )

        prune_backups(backup_dir, keep)
        return path
    except Exception as exc:
        logger.error("Erreur lors de la sauvegarde : %s", exc, exc_info=True)
        return None
    finally:
        _backup_lock.release()
