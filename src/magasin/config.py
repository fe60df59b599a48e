"""
Configuration de l'application, lue dans les variables d'environnement.

Le point d'entrée charge un éventuel fichier .env avant de lire
ces valeurs.
"""

import os

VALEURS_FAUSSES = {"0", "false", "non", "no", "off"}


def get_log_level() -> str:
    return os.environ.get("MAGASIN_LOG_LEVEL", "WARNING").upper()


def get_données_démo() -> bool:
    """Charger ou non le catalogue de démonstration au démarrage."""
    valeur = os.environ.get("MAGASIN_DONNEES_DEMO", "1")
    return valeur.strip().lower() not in VALEURS_FAUSSES
