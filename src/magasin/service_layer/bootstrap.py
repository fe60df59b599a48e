"""
Bootstrap : assemblage de l'application (Composition Root).

Ce module construit le message bus avec toutes ses dépendances.
C'est le seul endroit de l'application qui connaît les
implémentations concrètes (ou les fakes injectés par les tests).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from magasin.domain import commands, events
from magasin.domain.model import Catégorie
from magasin.service_layer import handlers, messagebus, unit_of_work


# Catalogue de démonstration chargé au démarrage du menu
PRODUITS_DÉMO: list[commands.AjouterProduit] = [
    commands.AjouterProduit("Ordinateur portable", Decimal("50000"), 10, Catégorie.ÉLECTRONIQUE),
    commands.AjouterProduit("T-shirt", Decimal("1500"), 50, Catégorie.VÊTEMENTS),
    commands.AjouterProduit("Pain", Decimal("50"), 100, Catégorie.ALIMENTATION),
    commands.AjouterProduit("Livre sur Python", Decimal("1200"), 20, Catégorie.LIVRES),
    commands.AjouterProduit("Ballon", Decimal("2500"), 15, Catégorie.SPORTS),
]


def bootstrap(
    uow: unit_of_work.AbstractUnitOfWork | None = None,
    données_démo: bool = False,
    **extra_dependencies: Any,
) -> messagebus.MessageBus:
    """
    Construit et retourne un MessageBus configuré.

    Avec données_démo=True, le catalogue de démonstration est ajouté
    par le chemin normal (commands AjouterProduit), les codes
    1000001 à 1000005 lui sont donc attribués.
    """
    if uow is None:
        uow = unit_of_work.MémoireUnitOfWork()

    bus = messagebus.MessageBus(
        uow=uow,
        event_handlers=EVENT_HANDLERS,
        command_handlers=COMMAND_HANDLERS,
        dependencies=dict(extra_dependencies),
    )

    if données_démo:
        for cmd in PRODUITS_DÉMO:
            bus.handle(cmd)

    return bus


# --- Routage des messages vers les handlers ---

EVENT_HANDLERS: dict[type[events.Event], list] = {
    events.ProduitAjouté: [handlers.journaliser_ajout],
    events.ProduitSupprimé: [handlers.journaliser_suppression],
    events.StockRéapprovisionné: [handlers.journaliser_approvisionnement],
    events.ProduitVendu: [handlers.journaliser_vente],
    events.RuptureDeStock: [handlers.signaler_rupture_de_stock],
    events.VenteAnnulée: [handlers.journaliser_annulation],
    events.VenteNonRestaurable: [handlers.signaler_vente_non_restaurable],
}

COMMAND_HANDLERS: dict[type[commands.Command], Any] = {
    commands.AjouterProduit: handlers.ajouter_produit,
    commands.SupprimerProduit: handlers.supprimer_produit,
    commands.CommanderApprovisionnement: handlers.commander_approvisionnement,
    commands.VendreProduit: handlers.vendre_produit,
    commands.AnnulerDernièreVente: handlers.annuler_dernière_vente,
}
