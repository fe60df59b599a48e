"""
Message Bus du magasin.

Une command (AjouterProduit, VendreProduit...) est confiée à son unique
handler : son résultat est renvoyé à l'appelant, son erreur aussi.
Les events émis par le Magasin pendant ce traitement sont ensuite
distribués à leurs handlers (journalisation) ; un event handler qui
échoue est loggé sans interrompre les autres.

Un échec de command n'efface pas les faits déjà émis : quand une
annulation dépile une vente dont le produit a disparu, l'event
VenteNonRestaurable est traité avant que ProduitDisparu ne remonte.
"""

from __future__ import annotations

import inspect
import logging
from collections import deque
from typing import Any, Callable, Union

from magasin.domain import commands, events
from magasin.service_layer import unit_of_work

logger = logging.getLogger(__name__)

Message = Union[commands.Command, events.Event]


class MessageBus:
    """
    Dispatch des commands et events vers les handlers.

    Les handlers déclarent leurs dépendances par le nom de leurs
    paramètres : `uow` reçoit le Unit of Work, les autres noms sont
    cherchés dans `dependencies`. Le premier paramètre reçoit le message.
    """

    def __init__(
        self,
        uow: unit_of_work.AbstractUnitOfWork,
        event_handlers: dict[type[events.Event], list[Callable]],
        command_handlers: dict[type[commands.Command], Callable],
        dependencies: dict[str, Any] | None = None,
    ):
        self.uow = uow
        self.event_handlers = event_handlers
        self.command_handlers = command_handlers
        self.dependencies = dependencies or {}
        self.queue: deque[events.Event] = deque()

    def handle(self, message: Message) -> list[Any]:
        """Traite le message puis tous les events qui en découlent."""
        results: list[Any] = []
        if isinstance(message, commands.Command):
            try:
                results.append(self._exécuter(message))
            finally:
                self._distribuer_events()
        elif isinstance(message, events.Event):
            self.queue.append(message)
            self._distribuer_events()
        else:
            raise ValueError(f"Message de type inconnu : {type(message)}")
        return results

    def _exécuter(self, command: commands.Command) -> Any:
        handler = self.command_handlers.get(type(command))
        if handler is None:
            raise ValueError(f"Aucun handler pour la command {type(command)}")
        logger.debug("Traitement de la command %s", command)
        try:
            return self._appeler(handler, command)
        finally:
            self.queue.extend(self.uow.collect_new_events())

    def _distribuer_events(self) -> None:
        while self.queue:
            event = self.queue.popleft()
            for handler in self.event_handlers.get(type(event), []):
                logger.debug("Traitement de l'event %s avec %s", event, handler)
                try:
                    self._appeler(handler, event)
                except Exception:
                    logger.exception("Erreur lors du traitement de l'event %s", event)
                self.queue.extend(self.uow.collect_new_events())

    def _appeler(self, handler: Callable, message: Message) -> Any:
        disponibles = {"uow": self.uow, **self.dependencies}
        paramètres = list(inspect.signature(handler).parameters)[1:]
        kwargs = {nom: disponibles[nom] for nom in paramètres if nom in disponibles}
        return handler(message, **kwargs)
