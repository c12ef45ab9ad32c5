"""
Service d'envoi de messages WhatsApp via la passerelle Evolution API.
Utilisé par le job quotidien de rappel de cotisation.
"""

import logging

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


def send_text_message(phone: str, text: str) -> bool:
    """
    Envoie un message texte au numéro donné.

    Retourne False sans rien envoyer si la passerelle n'est pas configurée.
    Lève httpx.HTTPError en cas d'échec réseau ou de réponse d'erreur
    (l'appelant décide de logger et continuer).
    """
    if not settings.messaging_configured:
        logger.warning("Evolution API non configurée, message WhatsApp ignoré (%s)", phone)
        return False

    url = f"{settings.EVOLUTION_API_URL.rstrip('/')}/message/sendText/{settings.EVOLUTION_INSTANCE}"
    response = httpx.post(
        url,
        json={"number": phone, "text": text},
        headers={"Content-Type": "application/json", "apikey": settings.EVOLUTION_API_KEY},
        timeout=settings.MESSAGING_TIMEOUT_SECONDS,
    )
    response.raise_for_status()

    logger.info("Message WhatsApp envoyé à %s", phone)
    return True
