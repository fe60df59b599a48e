"""
Commands du domaine.

Les commands représentent des intentions : quelque chose que
le magasin doit faire. Contrairement aux events (faits passés),
les commands sont des demandes qui peuvent échouer.

Seules les écritures passent par des commands ; les lectures
passent par les views.
"""

from dataclasses import dataclass
from decimal import Decimal

from magasin.domain.model import Catégorie


class Command:
    """Classe de base pour toutes les commands."""
    pass


@dataclass(frozen=True)
class AjouterProduit(Command):
    """Demande d'ajout d'un produit au catalogue."""

    nom: str
    prix: Decimal
    quantité: int
    catégorie: Catégorie


@dataclass(frozen=True)
class SupprimerProduit(Command):
    """Demande de retrait d'un produit du catalogue."""

    code: str


@dataclass(frozen=True)
class CommanderApprovisionnement(Command):
    """Demande de réapprovisionnement d'un produit."""

    code: str
    quantité: int


@dataclass(frozen=True)
class VendreProduit(Command):
    """Demande de vente d'une quantité d'un produit."""

    code: str
    quantité: int


@dataclass(frozen=True)
class AnnulerDernièreVente(Command):
    """Demande d'annulation de la vente la plus récente."""
    pass
