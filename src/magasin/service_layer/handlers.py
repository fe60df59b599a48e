"""
Handlers pour les commands et events.

Les handlers sont les fonctions qui traitent les commands et events
transitant par le message bus.

- Command handlers : exécutent une action sur le Magasin (peuvent échouer ;
  les erreurs métier remontent telles quelles à l'appelant)
- Event handlers : réagissent à un fait passé (ne doivent pas échouer)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from magasin.domain import commands, events, model

if TYPE_CHECKING:
    from magasin.service_layer.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


# --- Command Handlers ---


def ajouter_produit(
    cmd: commands.AjouterProduit,
    uow: AbstractUnitOfWork,
) -> model.Produit:
    """Ajoute un produit au catalogue et retourne le produit créé (avec son code)."""
    with uow:
        produit = uow.magasin.ajouter_produit(
            cmd.nom, cmd.prix, cmd.quantité, cmd.catégorie
        )
        uow.commit()
    return produit


def supprimer_produit(
    cmd: commands.SupprimerProduit,
    uow: AbstractUnitOfWork,
) -> None:
    with uow:
        uow.magasin.supprimer_produit(cmd.code)
        uow.commit()


def commander_approvisionnement(
    cmd: commands.CommanderApprovisionnement,
    uow: AbstractUnitOfWork,
) -> model.Produit:
    """Réapprovisionne un produit et retourne le produit avec son nouveau stock."""
    with uow:
        produit = uow.magasin.commander_approvisionnement(cmd.code, cmd.quantité)
        uow.commit()
    return produit


def vendre_produit(
    cmd: commands.VendreProduit,
    uow: AbstractUnitOfWork,
) -> model.Vente:
    with uow:
        vente = uow.magasin.vendre(cmd.code, cmd.quantité)
        uow.commit()
    return vente


def annuler_dernière_vente(
    cmd: commands.AnnulerDernièreVente,
    uow: AbstractUnitOfWork,
) -> model.Vente:
    """
    Annule la vente la plus récente.

    Le commit est fait même quand ProduitDisparu est levée :
    la vente a été dépilée et ce dépilement est définitif.
    """
    with uow:
        try:
            vente = uow.magasin.annuler_dernière_vente()
        except model.ProduitDisparu:
            uow.commit()
            raise
        uow.commit()
    return vente


# --- Event Handlers ---


def journaliser_ajout(
    event: events.ProduitAjouté,
) -> None:
    logger.info("Produit ajouté : %s (%s)", event.nom, event.code)


def journaliser_suppression(
    event: events.ProduitSupprimé,
) -> None:
    logger.info("Produit supprimé : %s (%s)", event.nom, event.code)


def journaliser_approvisionnement(
    event: events.StockRéapprovisionné,
) -> None:
    logger.info(
        "Approvisionnement de %s : +%d (stock : %d)",
        event.code, event.quantité, event.nouvelle_quantité,
    )


def journaliser_vente(
    event: events.ProduitVendu,
) -> None:
    logger.info(
        "Vente : %s (%s) x%d = %s, reste %d",
        event.nom, event.code, event.quantité, event.prix_total, event.stock_restant,
    )


def signaler_rupture_de_stock(
    event: events.RuptureDeStock,
) -> None:
    """Prévient qu'un produit n'est plus en stock après une vente."""
    logger.warning("Rupture de stock pour le produit %s", event.code)


def journaliser_annulation(
    event: events.VenteAnnulée,
) -> None:
    logger.info(
        "Vente annulée : %s (%s), %d remis en stock",
        event.nom, event.code, event.quantité,
    )


def signaler_vente_non_restaurable(
    event: events.VenteNonRestaurable,
) -> None:
    logger.warning(
        "Vente de %s dépilée sans remise en stock (%d) : produit absent du catalogue",
        event.code, event.quantité,
    )
