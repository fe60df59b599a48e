"""
Tests des handlers via la service layer (high gear).

Ces tests passent par le message bus avec un Unit of Work en mémoire,
et lisent le résultat via les views : on teste les cas d'usage complets.
"""

from __future__ import annotations

import logging
from collections import deque
from decimal import Decimal

import pytest

from magasin.domain import commands, events, model
from magasin.domain.model import Catégorie
from magasin.service_layer import bootstrap, handlers, messagebus, unit_of_work
from magasin.views import views


def ajouter_widget(bus: messagebus.MessageBus, quantité: int = 5) -> str:
    [produit] = bus.handle(
        commands.AjouterProduit("Widget", Decimal("100"), quantité, Catégorie.ÉLECTRONIQUE)
    )
    return produit.code


# --- Tests des Commands ---


class TestAjouterProduit:
    def test_ajouter_un_produit(self, bus):
        code = ajouter_widget(bus)

        assert code == "1000001"
        assert [p.code for p in views.produits(bus.uow)] == ["1000001"]
        assert bus.uow.commits == 1

    def test_produit_invalide_remonte_à_l_appelant(self, bus):
        with pytest.raises(model.ProduitInvalide):
            bus.handle(commands.AjouterProduit("", Decimal("1"), 1, Catégorie.LIVRES))

        assert views.produits(bus.uow) == []
        assert bus.uow.commits == 0


class TestSupprimerProduit:
    def test_supprimer(self, bus):
        code = ajouter_widget(bus)
        bus.handle(commands.SupprimerProduit(code))
        assert views.produits(bus.uow) == []

    def test_supprimer_code_inconnu(self, bus):
        with pytest.raises(model.ProduitIntrouvable):
            bus.handle(commands.SupprimerProduit("1000001"))


class TestCommanderApprovisionnement:
    def test_retourne_le_produit_réapprovisionné(self, bus):
        code = ajouter_widget(bus, quantité=2)

        [produit] = bus.handle(commands.CommanderApprovisionnement(code, 50))

        assert produit.quantité == 52


class TestVendreProduit:
    def test_vendre_retourne_la_vente(self, bus):
        code = ajouter_widget(bus)

        [vente] = bus.handle(commands.VendreProduit(code, 3))

        assert vente.prix_total == Decimal("300")
        assert bus.uow.magasin.get(code).quantité == 2
        assert views.historique_des_ventes(bus.uow) == [vente]

    def test_stock_insuffisant(self, bus):
        code = ajouter_widget(bus, quantité=2)

        with pytest.raises(model.StockInsuffisant):
            bus.handle(commands.VendreProduit(code, 10))

        assert bus.uow.magasin.get(code).quantité == 2

    def test_rupture_de_stock_signalée(self, bus, caplog):
        code = ajouter_widget(bus, quantité=1)

        with caplog.at_level(logging.WARNING, logger="magasin"):
            bus.handle(commands.VendreProduit(code, 1))

        assert f"Rupture de stock pour le produit {code}" in caplog.text


class TestAnnulerDernièreVente:
    def test_vendre_puis_annuler(self, bus):
        code = ajouter_widget(bus)
        [vente] = bus.handle(commands.VendreProduit(code, 3))

        [annulée] = bus.handle(commands.AnnulerDernièreVente())

        assert annulée is vente
        assert bus.uow.magasin.get(code).quantité == 5
        assert views.rapport_des_ventes(bus.uow) is None

    def test_aucune_vente(self, bus):
        with pytest.raises(model.AucuneVenteÀAnnuler):
            bus.handle(commands.AnnulerDernièreVente())

    def test_produit_disparu_dépile_et_commit(self, bus, caplog):
        """
        Le dépilement est définitif : le handler commite avant de laisser
        remonter ProduitDisparu, et l'event est quand même traité.
        """
        code = ajouter_widget(bus)
        bus.handle(commands.VendreProduit(code, 2))
        bus.handle(commands.SupprimerProduit(code))
        commits_avant = bus.uow.commits

        with caplog.at_level(logging.WARNING, logger="magasin"):
            with pytest.raises(model.ProduitDisparu):
                bus.handle(commands.AnnulerDernièreVente())

        assert bus.uow.commits == commits_avant + 1
        assert views.historique_des_ventes(bus.uow) == []
        assert views.rapport_des_ventes(bus.uow).nombre_de_ventes == 1
        assert "sans remise en stock" in caplog.text
        assert bus.uow.magasin.événements == []


# --- Tests des Views ---


class TestViews:
    def test_rechercher(self, bus):
        ajouter_widget(bus)
        bus.handle(commands.AjouterProduit("Pain", Decimal("1.20"), 10, Catégorie.ALIMENTATION))

        assert [p.nom for p in views.rechercher("widg", bus.uow)] == ["Widget"]
        assert views.rechercher("", bus.uow) == []

    def test_rapport(self, bus):
        code = ajouter_widget(bus, quantité=10)
        bus.handle(commands.VendreProduit(code, 3))
        bus.handle(commands.VendreProduit(code, 4))

        rapport = views.rapport_des_ventes(bus.uow)

        assert rapport.nombre_de_ventes == 2
        assert rapport.articles_vendus == 7
        assert rapport.chiffre_d_affaires == Decimal("700")


# --- Tests du Message Bus ---


class TestMessageBus:
    def test_les_events_sont_vidés_après_chaque_command(self, bus):
        ajouter_widget(bus)
        assert bus.uow.magasin.événements == []

    def test_une_erreur_d_event_handler_ne_bloque_pas_la_command(self, caplog):
        def handler_en_échec(event):
            raise RuntimeError("boum")

        uow = unit_of_work.MémoireUnitOfWork()
        bus = messagebus.MessageBus(
            uow=uow,
            event_handlers={events.ProduitAjouté: [handler_en_échec, handlers.journaliser_ajout]},
            command_handlers=bootstrap.COMMAND_HANDLERS,
        )

        with caplog.at_level(logging.INFO, logger="magasin"):
            [produit] = bus.handle(
                commands.AjouterProduit("Widget", Decimal("1"), 1, Catégorie.SPORTS)
            )

        assert produit.code == "1000001"
        assert "Erreur lors du traitement de l'event" in caplog.text
        assert "Produit ajouté : Widget (1000001)" in caplog.text

    def test_dépendances_injectées_par_nom(self):
        reçus = []

        def handler_avec_dépendance(event, journal):
            journal.append(event)

        bus = messagebus.MessageBus(
            uow=unit_of_work.MémoireUnitOfWork(),
            event_handlers={events.ProduitAjouté: [handler_avec_dépendance]},
            command_handlers=bootstrap.COMMAND_HANDLERS,
            dependencies={"journal": reçus},
        )

        bus.handle(commands.AjouterProduit("Widget", Decimal("1"), 1, Catégorie.SPORTS))

        assert reçus == [events.ProduitAjouté(code="1000001", nom="Widget")]

    def test_un_event_peut_être_publié_directement(self, bus, caplog):
        with caplog.at_level(logging.WARNING, logger="magasin"):
            résultats = bus.handle(events.RuptureDeStock(code="1000001"))

        assert résultats == []
        assert "Rupture de stock pour le produit 1000001" in caplog.text

    def test_les_events_sont_traités_même_si_la_command_échoue(self, bus, caplog):
        code = ajouter_widget(bus)
        bus.handle(commands.VendreProduit(code, 1))
        bus.handle(commands.SupprimerProduit(code))

        with caplog.at_level(logging.WARNING, logger="magasin"):
            with pytest.raises(model.ProduitDisparu):
                bus.handle(commands.AnnulerDernièreVente())

        assert bus.queue == deque()
        assert "sans remise en stock" in caplog.text

    def test_message_inconnu(self, bus):
        with pytest.raises(ValueError):
            bus.handle("pas un message")


# --- Tests du Bootstrap ---


class TestBootstrap:
    def test_données_démo(self):
        bus = bootstrap.bootstrap(données_démo=True)

        produits = views.produits(bus.uow)

        assert [p.code for p in produits] == [
            "1000001", "1000002", "1000003", "1000004", "1000005"
        ]
        assert [p.catégorie for p in produits] == list(Catégorie)

    def test_sans_données_démo(self):
        bus = bootstrap.bootstrap()
        assert views.produits(bus.uow) == []

    def test_deux_bus_ne_partagent_pas_le_magasin(self):
        bus1 = bootstrap.bootstrap(données_démo=True)
        bus2 = bootstrap.bootstrap()
        assert views.produits(bus2.uow) == []
        assert len(views.produits(bus1.uow)) == 5


# --- Tests du Unit of Work ---


class TestMémoireUnitOfWork:
    def test_le_context_manager_retourne_le_uow(self, uow):
        with uow as u:
            assert u is uow
            assert u.magasin is uow.magasin

    def test_commit_compté(self, uow):
        with uow:
            uow.commit()
        assert uow.commits == 1
