"""
Configuration partagée pour les tests.

Chaque test reçoit un magasin neuf : les compteurs de codes ne sont
jamais partagés entre deux tests.
"""

import pytest

from magasin.domain.model import Magasin
from magasin.service_layer import bootstrap, unit_of_work


@pytest.fixture
def magasin():
    return Magasin()


@pytest.fixture
def uow():
    return unit_of_work.MémoireUnitOfWork()


@pytest.fixture
def bus(uow):
    """Message bus sans catalogue de démonstration."""
    return bootstrap.bootstrap(uow=uow)
