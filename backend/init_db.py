"""
Script d'initialisation de la base de données.
Crée les tables à partir des modèles SQLAlchemy.
Usage (depuis backend/) : python init_db.py
"""

import logging

from app.database import init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("init_db")

if __name__ == "__main__":
    logger.info("Création des tables...")
    init_db()
    logger.info("Tables créées.")
