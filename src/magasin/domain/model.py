"""
Modèle de domaine pour la gestion de stock d'un magasin.

Ce module contient les entités, value objects et l'agrégat racine
du domaine métier : un Magasin qui possède un catalogue de Produit,
enregistre des Vente, et permet d'annuler la dernière vente.

Le modèle ne fait aucune I/O : pas de print, pas de log.
Les échecs sont signalés à l'appelant par des exceptions métier.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from magasin.domain import events


# --- Exceptions ---


class ErreurMagasin(Exception):
    """Classe de base des erreurs métier du magasin (toutes récupérables)."""
    pass


class ProduitInvalide(ErreurMagasin):
    """Levée quand un produit ne respecte pas les invariants à la création."""
    pass


class QuantitéInvalide(ErreurMagasin):
    """Levée quand une quantité strictement positive est attendue."""
    pass


class ProduitIntrouvable(ErreurMagasin):
    """Levée quand aucun produit du catalogue ne porte le code demandé."""
    pass


class StockInsuffisant(ErreurMagasin):
    """Levée quand la quantité demandée dépasse le stock disponible."""

    def __init__(self, message: str, disponible: int):
        super().__init__(message)
        self.disponible = disponible


class AucuneVenteÀAnnuler(ErreurMagasin):
    """Levée quand l'historique des ventes est vide."""
    pass


class ProduitDisparu(ErreurMagasin):
    """
    Levée quand le produit de la vente annulée n'est plus au catalogue.

    La vente a tout de même été dépilée : elle est portée par
    l'exception pour que l'appelant puisse l'afficher.
    """

    def __init__(self, message: str, vente: Vente):
        super().__init__(message)
        self.vente = vente


# --- Value objects ---


class Catégorie(enum.Enum):
    """
    Ensemble fermé des catégories de produits.

    La valeur est le nom canonique de la catégorie (celui de la recherche
    et de Catégorie("Food")) ; le libellé ne sert qu'à l'affichage.
    """

    ÉLECTRONIQUE = "Electronics"
    VÊTEMENTS = "Clothing"
    ALIMENTATION = "Food"
    LIVRES = "Books"
    SPORTS = "Sports"

    @property
    def libellé(self) -> str:
        return LIBELLÉS_CATÉGORIES[self]


LIBELLÉS_CATÉGORIES = {
    Catégorie.ÉLECTRONIQUE: "Électronique",
    Catégorie.VÊTEMENTS: "Vêtements",
    Catégorie.ALIMENTATION: "Alimentation",
    Catégorie.LIVRES: "Livres",
    Catégorie.SPORTS: "Sports",
}


def _est_entier(valeur: object) -> bool:
    return isinstance(valeur, int) and not isinstance(valeur, bool)


@dataclass(frozen=True, eq=False)
class Vente:
    """
    Enregistrement immuable d'une vente.

    Le code et le nom du produit sont copiés au moment de la vente :
    la vente survit à la suppression du produit.

    eq=False : l'égalité est l'identité. Deux ventes du même produit,
    même quantité, même seconde restent deux ventes distinctes, et
    list.remove() retire bien celle qu'on lui donne.
    """

    code_produit: str
    nom_produit: str
    quantité: int
    prix_total: Decimal
    date_vente: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class RapportDeVentes:
    """Synthèse du journal des ventes, dans l'ordre chronologique."""

    ventes: tuple[Vente, ...]
    nombre_de_ventes: int
    articles_vendus: int
    chiffre_d_affaires: Decimal


# --- Entités ---


class Produit:
    """
    Entité représentant un produit du catalogue.

    Le code, le nom et le prix sont fixés à la création. Seule la quantité
    évolue, et seul le Magasin la modifie (ventes, livraisons, annulations).
    L'égalité et le hash sont basés sur le code (identité).
    """

    def __init__(
        self,
        code: str,
        nom: str,
        prix: Decimal,
        quantité: int,
        catégorie: Catégorie,
    ):
        self._code = code
        self._nom = nom
        self._prix = prix
        self.quantité = quantité
        self.catégorie = catégorie

    def __repr__(self) -> str:
        return f"<Produit {self._code}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Produit):
            return NotImplemented
        return self._code == other._code

    def __hash__(self) -> int:
        return hash(self._code)

    @property
    def code(self) -> str:
        return self._code

    @property
    def nom(self) -> str:
        return self._nom

    @property
    def prix(self) -> Decimal:
        return self._prix

    @property
    def en_stock(self) -> bool:
        return self.quantité > 0

    def correspond_à(self, terme: str) -> bool:
        """
        Le code est comparé en respectant la casse ; le nom et
        la catégorie sans tenir compte de la casse.
        """
        terme_minuscule = terme.lower()
        return (
            terme in self._code
            or terme_minuscule in self._nom.lower()
            or terme_minuscule in self.catégorie.value.lower()
        )


class Magasin:
    """
    Agrégat racine : le magasin.

    Possède le catalogue, la pile d'annulation et le journal des ventes.
    La pile et le journal contiennent les mêmes Vente mais servent deux
    usages : la pile pour annuler la plus récente, le journal pour le
    rapport chronologique. Ils sont mis à jour ensemble à chaque vente.

    Chaque opération valide tout avant de modifier quoi que ce soit :
    un échec laisse le magasin inchangé (sauf ProduitDisparu, voir
    annuler_dernière_vente).
    """

    PRÉFIXE_CODE = "1"

    def __init__(self, compteur_produits: int = 1):
        # dict : recherche par code, et l'ordre d'insertion est conservé
        self._catalogue: dict[str, Produit] = {}
        self._pile_annulation: list[Vente] = []
        self._journal: list[Vente] = []
        self.compteur_produits = compteur_produits
        self.événements: list[events.Event] = []

    def _générer_code(self) -> str:
        code = f"{self.PRÉFIXE_CODE}{self.compteur_produits:06d}"
        self.compteur_produits += 1
        return code

    def get(self, code: str) -> Optional[Produit]:
        return self._catalogue.get(code)

    def _trouver(self, code: str) -> Produit:
        produit = self._catalogue.get(code)
        if produit is None:
            raise ProduitIntrouvable(f"Produit introuvable : {code}")
        return produit

    # --- Catalogue ---

    def ajouter_produit(
        self,
        nom: str,
        prix: Union[Decimal, int, str],
        quantité: int,
        catégorie: Union[Catégorie, str],
    ) -> Produit:
        """
        Crée un produit, lui attribue le code suivant et l'ajoute au catalogue.

        Lève ProduitInvalide si le nom est vide, si le prix ou la quantité
        est négatif, si la quantité n'est pas un entier, ou si la catégorie
        n'existe pas. Le compteur de codes
        n'avance qu'en cas de succès.
        """
        if not isinstance(nom, str) or not nom.strip():
            raise ProduitInvalide("Le nom ne peut pas être vide")
        try:
            prix = Decimal(str(prix))
        except InvalidOperation:
            raise ProduitInvalide(f"Prix invalide : {prix}") from None
        if not prix.is_finite():
            raise ProduitInvalide(f"Prix invalide : {prix}")
        if prix < 0:
            raise ProduitInvalide("Le prix ne peut pas être négatif")
        if not _est_entier(quantité):
            raise ProduitInvalide(f"Quantité non entière : {quantité!r}")
        if quantité < 0:
            raise ProduitInvalide("La quantité ne peut pas être négative")
        try:
            catégorie = Catégorie(catégorie)
        except ValueError:
            raise ProduitInvalide(f"Catégorie inconnue : {catégorie}") from None

        produit = Produit(self._générer_code(), nom, prix, quantité, catégorie)
        self._catalogue[produit.code] = produit
        self.événements.append(events.ProduitAjouté(code=produit.code, nom=nom))
        return produit

    def supprimer_produit(self, code: str) -> None:
        """Retire un produit du catalogue. L'historique des ventes n'est pas touché."""
        produit = self._trouver(code)
        del self._catalogue[code]
        self.événements.append(events.ProduitSupprimé(code=code, nom=produit.nom))

    def commander_approvisionnement(self, code: str, quantité: int) -> Produit:
        """Augmente le stock d'un produit. Pas de plafond."""
        if not _est_entier(quantité):
            raise QuantitéInvalide(f"Quantité non entière : {quantité!r}")
        if quantité <= 0:
            raise QuantitéInvalide("La quantité doit être positive")
        produit = self._trouver(code)
        produit.quantité += quantité
        self.événements.append(
            events.StockRéapprovisionné(
                code=code, quantité=quantité, nouvelle_quantité=produit.quantité
            )
        )
        return produit

    # --- Ventes ---

    def vendre(self, code: str, quantité: int) -> Vente:
        """
        Vend une quantité d'un produit.

        Pas de vente partielle : si le stock ne suffit pas, StockInsuffisant
        est levée et rien ne change. Le prix total est figé au moment
        de la vente.
        """
        if not _est_entier(quantité):
            raise QuantitéInvalide(f"Quantité non entière : {quantité!r}")
        if quantité <= 0:
            raise QuantitéInvalide("La quantité doit être positive")
        produit = self._trouver(code)
        if produit.quantité < quantité:
            raise StockInsuffisant(
                f"Stock insuffisant pour {code}. Disponible : {produit.quantité}",
                disponible=produit.quantité,
            )

        produit.quantité -= quantité
        vente = Vente(
            code_produit=produit.code,
            nom_produit=produit.nom,
            quantité=quantité,
            prix_total=produit.prix * quantité,
        )
        self._pile_annulation.append(vente)
        self._journal.append(vente)

        self.événements.append(
            events.ProduitVendu(
                code=produit.code,
                nom=produit.nom,
                quantité=quantité,
                prix_total=vente.prix_total,
                stock_restant=produit.quantité,
            )
        )
        if not produit.en_stock:
            self.événements.append(events.RuptureDeStock(code=produit.code))
        return vente

    def annuler_dernière_vente(self) -> Vente:
        """
        Annule la vente la plus récente et remet la quantité en stock.

        Le dépilement est définitif : si le produit a été supprimé depuis,
        la vente est quand même retirée de la pile, mais elle reste dans
        le journal et ProduitDisparu est levée.
        """
        if not self._pile_annulation:
            raise AucuneVenteÀAnnuler("Aucune vente à annuler")

        vente = self._pile_annulation.pop()
        produit = self._catalogue.get(vente.code_produit)
        if produit is None:
            self.événements.append(
                events.VenteNonRestaurable(
                    code=vente.code_produit, quantité=vente.quantité
                )
            )
            raise ProduitDisparu(
                f"Le produit {vente.code_produit} de la vente n'est plus au catalogue",
                vente=vente,
            )

        produit.quantité += vente.quantité
        self._journal.remove(vente)
        self.événements.append(
            events.VenteAnnulée(
                code=vente.code_produit,
                nom=vente.nom_produit,
                quantité=vente.quantité,
            )
        )
        return vente

    # --- Lecture ---

    def tous_les_produits(self) -> list[Produit]:
        return list(self._catalogue.values())

    def rechercher(self, terme: str) -> list[Produit]:
        """Produits dont le code, le nom ou la catégorie contient le terme."""
        if not terme:
            return []
        return [p for p in self._catalogue.values() if p.correspond_à(terme)]

    def historique_des_ventes(self) -> list[Vente]:
        """Ventes encore annulables, de la plus récente à la plus ancienne."""
        return list(reversed(self._pile_annulation))

    def rapport_des_ventes(self) -> Optional[RapportDeVentes]:
        """Synthèse du journal, ou None s'il n'y a eu aucune vente."""
        if not self._journal:
            return None
        return RapportDeVentes(
            ventes=tuple(self._journal),
            nombre_de_ventes=len(self._journal),
            articles_vendus=sum(v.quantité for v in self._journal),
            chiffre_d_affaires=sum((v.prix_total for v in self._journal), Decimal(0)),
        )
