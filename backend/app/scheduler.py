"""
Planificateur APScheduler pour les tâches quotidiennes de la salle.

- Rappels de cotisation WhatsApp : tous les jours à FEE_REMINDER_HOUR:00
- Sauvegarde JSON des données     : tous les jours à BACKUP_HOUR:00

Chaque tâche ouvre sa propre session, logge ses erreurs et ne plante jamais le process.
Désactivé en déploiement serverless (VERCEL) : pas de process long pour héberger le cron.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from app.config import settings
from app.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def _send_fee_reminders_scheduled() -> None:
    """
    Tâche planifiée : un cycle du job de rappels de cotisation.
    Import local pour éviter les imports circulaires.
    """
    from app.services.fee_reminder_service import send_fee_reminders

    db = SessionLocal()
    try:
        logger.info("Vérification quotidienne des cotisations")
        result = send_fee_reminders(db)
        logger.info(
            "Rappels : %d clients vérifiés, %d envoyés, %d erreurs",
            result.checked, result.sent, len(result.errors),
        )
    except Exception as exc:
        logger.error("Erreur lors de l'envoi des rappels de cotisation : %s", exc)
    finally:
        db.close()


def _backup_scheduled() -> None:
    """Tâche planifiée : sauvegarde JSON quotidienne (best-effort, erreurs loggées par le service)."""
    from app.services.backup_service import run_backup

    db = SessionLocal()
    try:
        logger.info("Sauvegarde quotidienne des données")
        run_backup(db)
    except Exception as exc:
        logger.error("Erreur lors de la sauvegarde planifiée : %s", exc)
    finally:
        db.close()


def start_scheduler() -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    if settings.VERCEL:
        logger.info("Déploiement serverless : tâches planifiées désactivées.")
        return

    scheduler.add_job(
        _send_fee_reminders_scheduled,
        trigger="cron",
        hour=settings.FEE_REMINDER_HOUR,
        minute=0,
        id="fee_reminders_daily",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.add_job(
        _backup_scheduled,
        trigger="cron",
        hour=settings.BACKUP_HOUR,
        minute=0,
        id="backup_daily",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    scheduler.start()
    logger.info(
        "Scheduler démarré : rappels à %02dh00, sauvegarde à %02dh00.",
        settings.FEE_REMINDER_HOUR, settings.BACKUP_HOUR,
    )


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
