"""
Rappels de cotisation par WhatsApp (job quotidien).

Flux d'une exécution :
  1. Charger tous les clients
  2. Pour chaque client avec téléphone : prochaine échéance = même jour que
     fee_submission_date, le mois suivant celui de fee_submission_date
  3. Si l'échéance tombe dans 7, 3 ou 0 jours → message adapté au palier
  4. Envoyer ; un échec est loggé et n'interrompt pas la boucle (pas de retry)

Le calcul (plan_fee_reminders) est séparé de l'envoi pour être testable sans réseau ni timer.
"""

import logging
from datetime import date, timedelta
from typing import Callable, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.client import Client
from app.schemas.reminder import FeeReminder, FeeReminderRunResult
from app.services.messaging_service import send_text_message

logger = logging.getLogger(__name__)

REMINDER_DAYS = (7, 3, 0)


def next_fee_date(anchor: date) -> date:
    """
    Échéance suivante : (année, mois + 1, jour) de la date d'ancrage.
    Un jour inexistant déborde sur le mois suivant (31 janvier → 3 mars, 2 mars en année bissextile).
    """
    year, month = anchor.year, anchor.month + 1
    if month > 12:
        year, month = year + 1, 1
    return date(year, month, 1) + timedelta(days=anchor.day - 1)


def days_until(due: date, today: date) -> int:
    """Nombre de jours entiers entre aujourd'hui et l'échéance (négatif si dépassée)."""
    return (due - today).days


def build_reminder_message(name: str, days: int) -> Optional[str]:
    """Message du palier correspondant, None hors paliers."""
    if days == 7:
        return f"Bonjour {name}, votre cotisation arrive à échéance dans 7 jours. Pensez à préparer le paiement."
    if days == 3:
        return f"Bonjour {name}, votre cotisation arrive à échéance dans 3 jours. Merci de régler rapidement."
    if days == 0:
        return (
            f"Bonjour {name}, votre cotisation est due aujourd'hui. "
            "Merci de régler dès que possible pour éviter toute interruption."
        )
    return None


def plan_fee_reminders(clients: Iterable[Client], today: date) -> List[FeeReminder]:
    """Calcule les rappels à envoyer aujourd'hui, sans effet de bord."""
    reminders: List[FeeReminder] = []
    for client in clients:
        if not client.phone or client.fee_submission_date is None:
            continue

        days = days_until(next_fee_date(client.fee_submission_date), today)
        if days not in REMINDER_DAYS:
            continue

        reminders.append(
            FeeReminder(
                client_id=client.id,
                phone=client.phone,
                days=days,
                message=build_reminder_message(client.name, days),
            )
        )
    return reminders


def send_fee_reminders(
    db: Session,
    today: Optional[date] = None,
    sender: Optional[Callable[[str, str], bool]] = None,
) -> FeeReminderRunResult:
    """Exécute un cycle complet du job de rappels et retourne le rapport."""
    today = today or date.today()
    sender = sender or send_text_message

    clients = db.execute(select(Client)).scalars().all()
    reminders = plan_fee_reminders(clients, today)

    sent = 0
    errors: List[str] = []
    for reminder in reminders:
        try:
            if sender(reminder.phone, reminder.message):
                sent += 1
        except Exception as exc:
            error_msg = f"Erreur envoi rappel client {reminder.client_id} ({reminder.phone}) : {exc}"
            errors.append(error_msg)
            logger.error(error_msg)

    logger.info(
        "Rappels de cotisation du %s : %d clients, %d rappels prévus, %d envoyés, %d erreurs",
        today.isoformat(), len(clients), len(reminders), sent, len(errors),
    )
    return FeeReminderRunResult(checked=len(clients), sent=sent, errors=errors)
