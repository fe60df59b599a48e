"""
Pattern Unit of Work.

Le Unit of Work (UoW) délimite une opération sur l'agrégat Magasin
et collecte les événements qu'il a émis pendant cette opération.

Le magasin vit en mémoire : il n'y a pas de base de données derrière,
le UoW garde simplement une référence vers l'unique agrégat.

Le UoW agit comme un context manager :
    with uow:
        # ... opérations sur uow.magasin ...
        uow.commit()
"""

from __future__ import annotations

import abc
from typing import Iterator, Optional

from magasin.domain import events, model


class AbstractUnitOfWork(abc.ABC):
    """
    Interface abstraite du Unit of Work.

    Fournit l'agrégat `magasin` et gère commit/rollback.
    Le rollback est appelé à la sortie du context manager,
    commit() ou non.
    """

    magasin: model.Magasin

    def __enter__(self) -> AbstractUnitOfWork:
        return self

    def __exit__(self, *args: object) -> None:
        self.rollback()

    def commit(self) -> None:
        self._commit()

    def collect_new_events(self) -> Iterator[events.Event]:
        """Vide la liste d'événements du magasin pour les passer au message bus."""
        while self.magasin.événements:
            yield self.magasin.événements.pop(0)

    @abc.abstractmethod
    def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


class MémoireUnitOfWork(AbstractUnitOfWork):
    """
    Implémentation en mémoire du UoW.

    Les opérations du Magasin valident tout avant de modifier l'état,
    il n'y a donc rien à défaire au rollback. Le compteur `commits`
    permet de vérifier dans les tests qu'un handler a bien commité.
    """

    def __init__(self, magasin: Optional[model.Magasin] = None):
        self.magasin = magasin if magasin is not None else model.Magasin()
        self.commits = 0

    def _commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        pass
