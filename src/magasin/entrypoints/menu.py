"""
Point d'entrée en ligne de commande : le menu texte du magasin.

Le menu est un thin adapter : il lit et valide les saisies,
les convertit en commands envoyées au message bus (écritures)
ou en appels aux views (lectures), puis affiche les résultats.

Le menu ne contient aucune logique métier.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

import click
from dotenv import load_dotenv

from magasin import config
from magasin.domain import commands, model
from magasin.service_layer import bootstrap, messagebus
from magasin.views import views

logger = logging.getLogger(__name__)

CATÉGORIES = list(model.Catégorie)

MENU = """
=== MENU ===
1. Afficher tous les produits
2. Ajouter un produit
3. Supprimer un produit
4. Commander un approvisionnement
5. Vendre un produit
6. Rechercher des produits
7. Historique des ventes
8. Annuler la dernière vente
9. Rapport des ventes
0. Quitter"""


class PrixType(click.ParamType):
    """Montant décimal positif ou nul ; la virgule est acceptée."""

    name = "prix"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            prix = Decimal(str(value).strip().replace(",", "."))
        except InvalidOperation:
            self.fail(f"{value!r} n'est pas un prix valide", param, ctx)
        if not prix.is_finite() or prix < 0:
            self.fail(f"{value!r} n'est pas un prix valide", param, ctx)
        return prix


PRIX = PrixType()


def configurer_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# --- Affichage ---


def formater_montant(montant: Decimal) -> str:
    return f"{montant:.2f} €"


def formater_produit(produit: model.Produit) -> str:
    return (
        f"Code: {produit.code}, Nom: {produit.nom}, "
        f"Prix: {formater_montant(produit.prix)}, Quantité: {produit.quantité}, "
        f"En stock: {'Oui' if produit.en_stock else 'Non'}, "
        f"Catégorie: {produit.catégorie.libellé}"
    )


def formater_vente(vente: model.Vente) -> str:
    return (
        f"{vente.date_vente:%Y-%m-%d %H:%M} - {vente.nom_produit} ({vente.code_produit}), "
        f"Quantité: {vente.quantité}, Montant: {formater_montant(vente.prix_total)}"
    )


# --- Actions du menu ---


def afficher_produits(bus: messagebus.MessageBus) -> None:
    produits = views.produits(bus.uow)
    if not produits:
        click.echo("Aucun produit")
        return
    click.echo("TOUS LES PRODUITS :")
    for produit in produits:
        click.echo(f"   {formater_produit(produit)}")


def ajouter_produit(bus: messagebus.MessageBus) -> None:
    nom = click.prompt("Nom")
    prix = click.prompt("Prix", type=PRIX)
    quantité = click.prompt("Quantité", type=click.IntRange(min=0))
    click.echo(
        "Catégories : "
        + ", ".join(f"{i}-{c.libellé}" for i, c in enumerate(CATÉGORIES))
    )
    index = click.prompt(
        f"Catégorie (0-{len(CATÉGORIES) - 1})",
        type=click.IntRange(0, len(CATÉGORIES) - 1),
    )

    [produit] = bus.handle(
        commands.AjouterProduit(nom, prix, quantité, CATÉGORIES[index])
    )
    click.echo(f"Produit ajouté : {formater_produit(produit)}")


def supprimer_produit(bus: messagebus.MessageBus) -> None:
    code = click.prompt("Code du produit").strip()
    bus.handle(commands.SupprimerProduit(code))
    click.echo(f"Produit {code} supprimé")


def commander_approvisionnement(bus: messagebus.MessageBus) -> None:
    code = click.prompt("Code du produit").strip()
    quantité = click.prompt("Quantité", type=click.IntRange(min=1))
    [produit] = bus.handle(commands.CommanderApprovisionnement(code, quantité))
    click.echo(f"Approvisionnement commandé. Nouvelle quantité : {produit.quantité}")


def vendre_produit(bus: messagebus.MessageBus) -> None:
    code = click.prompt("Code du produit").strip()
    quantité = click.prompt("Quantité", type=click.IntRange(min=1))
    [vente] = bus.handle(commands.VendreProduit(code, quantité))
    produit = views.produit(code, bus.uow)
    click.echo("Vente effectuée :")
    click.echo(f"   Produit : {vente.nom_produit}")
    click.echo(f"   Quantité : {vente.quantité}")
    click.echo(f"   Montant : {formater_montant(vente.prix_total)}")
    if produit is not None:
        click.echo(f"   Reste : {produit.quantité}")


def rechercher_produits(bus: messagebus.MessageBus) -> None:
    terme = click.prompt(
        "Recherche (code/nom/catégorie)", default="", show_default=False
    )
    if not terme.strip():
        click.echo("Requête vide")
        return
    résultats = views.rechercher(terme, bus.uow)
    if not résultats:
        click.echo("Aucun produit trouvé")
        return
    click.echo(f"Produits trouvés : {len(résultats)}")
    for produit in résultats:
        click.echo(f"   {formater_produit(produit)}")


def afficher_historique(bus: messagebus.MessageBus) -> None:
    ventes = views.historique_des_ventes(bus.uow)
    if not ventes:
        click.echo("Historique des ventes vide")
        return
    click.echo("Historique des ventes :")
    for vente in ventes:
        click.echo(f"   {formater_vente(vente)}")


def annuler_dernière_vente(bus: messagebus.MessageBus) -> None:
    [vente] = bus.handle(commands.AnnulerDernièreVente())
    click.echo(f"Vente annulée : {vente.nom_produit}")
    click.echo(f"   Remis en stock : {vente.quantité}")


def afficher_rapport(bus: messagebus.MessageBus) -> None:
    rapport = views.rapport_des_ventes(bus.uow)
    if rapport is None:
        click.echo("Aucune donnée de vente")
        return
    click.echo("RAPPORT DES VENTES :")
    click.echo("====================")
    for vente in rapport.ventes:
        click.echo(f"   {formater_vente(vente)}")
    click.echo("====================")
    click.echo(f"   Nombre de ventes : {rapport.nombre_de_ventes}")
    click.echo(f"   Articles vendus : {rapport.articles_vendus}")
    click.echo(f"   Chiffre d'affaires : {formater_montant(rapport.chiffre_d_affaires)}")


ACTIONS: dict[str, Callable[[messagebus.MessageBus], None]] = {
    "1": afficher_produits,
    "2": ajouter_produit,
    "3": supprimer_produit,
    "4": commander_approvisionnement,
    "5": vendre_produit,
    "6": rechercher_produits,
    "7": afficher_historique,
    "8": annuler_dernière_vente,
    "9": afficher_rapport,
}


def boucle(bus: messagebus.MessageBus) -> None:
    """Affiche le menu et exécute les choix jusqu'à « 0 »."""
    while True:
        click.echo(MENU)
        choix = click.prompt("Choisissez", default="", show_default=False).strip()
        if choix == "0":
            click.echo("Au revoir !")
            return
        action = ACTIONS.get(choix)
        if action is None:
            click.echo("Choix invalide")
            continue
        try:
            action(bus)
        except model.ErreurMagasin as e:
            logger.debug("Erreur métier sur le choix %s : %s", choix, e)
            click.echo(f"Erreur : {e}")


@click.command()
@click.option("--sans-demo", is_flag=True, help="Démarrer avec un catalogue vide.")
@click.option(
    "--log-level",
    default=None,
    help="Niveau de log (DEBUG, INFO, WARNING...). Par défaut MAGASIN_LOG_LEVEL.",
)
def main(sans_demo: bool, log_level: Optional[str]) -> None:
    """Gestion de stock d'un magasin, en mode menu texte."""
    load_dotenv()
    configurer_logging(log_level or config.get_log_level())

    bus = bootstrap.bootstrap(données_démo=config.get_données_démo() and not sans_demo)
    click.echo("SYSTÈME DE GESTION DE STOCK")
    boucle(bus)


if __name__ == "__main__":
    main()
