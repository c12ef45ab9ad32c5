"""
Stockage des photos clients.

Deux modes, choisis à la construction de PhotoStorage (jamais par le client) :
- "path"   : fichier écrit sous uploads_dir, chemin relatif /uploads/<fichier> en base
- "inline" : octets encodés en base64 + content type + date d'upload directement en base

Remplacement d'une photo en mode path, en deux phases :
  1. écrire le nouveau fichier puis commiter le client
     (échec du commit → rollback + suppression du nouveau fichier, l'erreur remonte)
  2. supprimer l'ancien fichier, au mieux : une erreur est loggée et ignorée
Au pire l'ancien fichier reste orphelin sur le disque ; l'état en base n'est jamais incohérent.
"""

import base64
import logging
import secrets
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from app.config import PHOTO_MODE_INLINE, PHOTO_MODE_PATH, settings
from app.models.client import Client
from app.schemas.photo import PhotoContent, PhotoUploadResult

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".gif", ".avif"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/avif"}
MAX_PHOTO_SIZE_MB = 5
MAX_PHOTO_SIZE = MAX_PHOTO_SIZE_MB * 1024 * 1024
DEFAULT_CONTENT_TYPE = "image/jpeg"


class UnsupportedPhotoTypeError(ValueError):
    """Extension ou type MIME hors de la liste autorisée."""


class PhotoTooLargeError(ValueError):
    """Fichier au-delà de MAX_PHOTO_SIZE."""


def _normalize_content_type(content_type: Optional[str]) -> str:
    # "image/png; charset=binary" → "image/png"
    return (content_type or "").split(";")[0].strip().lower()


class PhotoStorage:
    """Adaptateur de stockage des photos clients (mode injecté, aucun état global)."""

    def __init__(self, mode: str, uploads_dir, url_prefix: str = "/uploads"):
        if mode not in (PHOTO_MODE_PATH, PHOTO_MODE_INLINE):
            raise ValueError(f"Mode de stockage photo invalide : {mode!r}.")
        self.mode = mode
        self.uploads_dir = Path(uploads_dir)
        self.url_prefix = url_prefix.rstrip("/")

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self, content: bytes, content_type: Optional[str], filename: Optional[str]) -> None:
        """
        Vérifie extension ET type MIME (les deux doivent être autorisés), puis la taille.
        Lève UnsupportedPhotoTypeError, PhotoTooLargeError ou ValueError (fichier vide).
        """
        extension = Path(filename or "").suffix.lower()
        mime = _normalize_content_type(content_type)
        if extension not in ALLOWED_EXTENSIONS or mime not in ALLOWED_CONTENT_TYPES:
            raise UnsupportedPhotoTypeError(
                "Format invalide. Seules les images (jpeg, jpg, png, gif, avif) sont acceptées."
            )
        if len(content) > MAX_PHOTO_SIZE:
            raise PhotoTooLargeError(
                f"Fichier trop volumineux. Taille maximale : {MAX_PHOTO_SIZE_MB} Mo."
            )
        if not content:
            raise ValueError("Le fichier photo est vide.")

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    def store(
        self,
        db: Session,
        client_id: uuid.UUID,
        content: bytes,
        content_type: Optional[str],
        filename: Optional[str],
    ) -> PhotoUploadResult:
        """
        Valide puis enregistre la photo du client selon le mode configuré.
        Un fichier refusé ne modifie jamais la photo existante.
        Lève ValueError si le client est introuvable.
        """
        self.validate(content, content_type, filename)

        client = db.get(Client, client_id)
        if client is None:
            raise ValueError(f"Client {client_id} introuvable.")

        if self.mode == PHOTO_MODE_INLINE:
            self._store_inline(db, client, content, _normalize_content_type(content_type))
        else:
            self._store_on_disk(db, client, content, filename)

        return PhotoUploadResult(
            id=client.id,
            name=client.name,
            has_photo=client.has_photo,
            photo_url=client.photo_url,
        )

    def _store_inline(self, db: Session, client: Client, content: bytes, content_type: str) -> None:
        # Remplacement en bloc : les anciens octets sont simplement écrasés
        old_path = client.photo_path
        client.photo_data = base64.b64encode(content).decode("ascii")
        client.photo_content_type = content_type
        client.photo_uploaded_at = datetime.now(timezone.utc)
        client.photo_path = None
        db.commit()
        db.refresh(client)
        logger.info("Photo inline enregistrée pour le client %s (%d octets)", client.id, len(content))

        # Ancien fichier d'un upload en mode path, au mieux
        self._remove_stored_file(old_path)

    def _store_on_disk(self, db: Session, client: Client, content: bytes, filename: Optional[str]) -> None:
        old_path = client.photo_path

        # Phase 1 : nouveau fichier + commit
        new_file = self._write_file(content, Path(filename or "").suffix.lower())
        client.photo_path = f"{self.url_prefix}/{new_file.name}"
        client.photo_data = None
        client.photo_content_type = None
        client.photo_uploaded_at = None
        try:
            db.commit()
        except Exception:
            db.rollback()
            self._remove_quietly(new_file)
            raise
        db.refresh(client)
        logger.info("Photo enregistrée pour le client %s : %s", client.id, new_file)

        # Phase 2 : ancien fichier, au mieux
        if old_path != client.photo_path:
            self._remove_stored_file(old_path)

    def _write_file(self, content: bytes, extension: str) -> Path:
        """Écrit le contenu sous un nom unique client-<ms>-<aléa><ext> (création exclusive)."""
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        while True:
            timestamp_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
            name = f"client-{timestamp_ms}-{secrets.randbelow(10**9)}{extension}"
            path = self.uploads_dir / name
            try:
                with open(path, "xb") as fh:
                    fh.write(content)
            except FileExistsError:
                continue
            return path

    def _resolve(self, stored_path: str) -> Optional[Path]:
        """Chemin disque d'une photo stockée (/uploads/<fichier>), None si hors du dossier d'upload."""
        prefix = f"{self.url_prefix}/"
        if not stored_path.startswith(prefix):
            return None
        name = Path(stored_path[len(prefix):]).name
        if not name:
            return None
        return self.uploads_dir / name

    def _remove_stored_file(self, stored_path: Optional[str]) -> None:
        if not stored_path:
            return
        old_file = self._resolve(stored_path)
        if old_file is not None:
            self._remove_quietly(old_file)

    def _remove_quietly(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Suppression de l'ancienne photo %s impossible : %s", path, exc)

    # ------------------------------------------------------------------
    # Lecture
    # ------------------------------------------------------------------

    def serve(self, db: Session, client_id: uuid.UUID) -> PhotoContent:
        """
        Retourne la photo du client selon sa représentation stockée.
        Lève ValueError si le client, la photo ou son contenu est absent.
        """
        client = db.get(Client, client_id)
        if client is None:
            raise ValueError("Photo introuvable.")

        if client.photo_data:
            data = base64.b64decode(client.photo_data)
            if not data:
                raise ValueError("Photo introuvable.")
            return PhotoContent(
                data=data,
                content_type=client.photo_content_type or DEFAULT_CONTENT_TYPE,
            )

        if client.photo_path:
            # Fichier servi par le montage statique /uploads
            return PhotoContent(redirect_url=client.photo_path)

        raise ValueError("Photo introuvable.")


def get_photo_storage() -> PhotoStorage:
    """Dépendance FastAPI : adaptateur construit depuis la configuration."""
    return PhotoStorage(settings.photo_storage_mode, settings.UPLOADS_DIR)
