"""
Events du domaine.

Les events représentent des faits qui se sont produits dans le magasin.
Ils sont immuables et nommés au passé (quelque chose s'est passé).
Seules les opérations réussies en émettent, à une exception près :
VenteNonRestaurable, qui accompagne le dépilement d'une vente
dont le produit a disparu.
"""

from dataclasses import dataclass
from decimal import Decimal


class Event:
    """Classe de base pour tous les events du domaine."""
    pass


@dataclass(frozen=True)
class ProduitAjouté(Event):
    """Un Produit a été ajouté au catalogue."""

    code: str
    nom: str


@dataclass(frozen=True)
class ProduitSupprimé(Event):
    """Un Produit a été retiré du catalogue."""

    code: str
    nom: str


@dataclass(frozen=True)
class StockRéapprovisionné(Event):
    """Une livraison a augmenté le stock d'un Produit."""

    code: str
    quantité: int
    nouvelle_quantité: int


@dataclass(frozen=True)
class ProduitVendu(Event):
    """Une Vente a été enregistrée."""

    code: str
    nom: str
    quantité: int
    prix_total: Decimal
    stock_restant: int


@dataclass(frozen=True)
class RuptureDeStock(Event):
    """Le stock d'un Produit est tombé à zéro après une vente."""

    code: str


@dataclass(frozen=True)
class VenteAnnulée(Event):
    """La dernière Vente a été annulée et remise en stock."""

    code: str
    nom: str
    quantité: int


@dataclass(frozen=True)
class VenteNonRestaurable(Event):
    """La dernière Vente a été dépilée mais son produit n'existe plus."""

    code: str
    quantité: int
