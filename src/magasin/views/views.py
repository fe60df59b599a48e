"""
Views (lecture) pour le pattern CQRS.

Les views sont des fonctions de lecture pure : elles interrogent
l'agrégat via le Unit of Work sans passer par le message bus,
et n'émettent aucun événement.

C'est le côté Query de CQRS : les écritures passent par des commands,
les lectures passent par ici.
"""

from __future__ import annotations

from typing import Optional

from magasin.domain import model
from magasin.service_layer import unit_of_work


def produits(uow: unit_of_work.AbstractUnitOfWork) -> list[model.Produit]:
    """Tout le catalogue, dans l'ordre d'ajout."""
    with uow:
        return uow.magasin.tous_les_produits()


def produit(code: str, uow: unit_of_work.AbstractUnitOfWork) -> Optional[model.Produit]:
    with uow:
        return uow.magasin.get(code)


def rechercher(terme: str, uow: unit_of_work.AbstractUnitOfWork) -> list[model.Produit]:
    """
    Recherche par code (casse respectée), nom ou catégorie (casse ignorée).

    Un terme vide ou sans correspondance donne une liste vide.
    """
    with uow:
        return uow.magasin.rechercher(terme)


def historique_des_ventes(uow: unit_of_work.AbstractUnitOfWork) -> list[model.Vente]:
    with uow:
        return uow.magasin.historique_des_ventes()


def rapport_des_ventes(
    uow: unit_of_work.AbstractUnitOfWork,
) -> Optional[model.RapportDeVentes]:
    with uow:
        return uow.magasin.rapport_des_ventes()
