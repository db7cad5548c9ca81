import datetime
import uuid

import mongomock
import pytest

from chalet_bnb.data import mongo_setup
from chalet_bnb.data.reservations import Reservation
from chalet_bnb.infrastructure.config import Settings
from chalet_bnb.services.reservation_service import ReservationService

DATE = datetime.date(2023, 1, 1)


@pytest.fixture(autouse=True)
def mongo():
    """Fresh in-memory database for every test."""
    mongo_setup.global_init(Settings(db_name='chalet_bnb_test'), mongo_client_class=mongomock.MongoClient)
    yield
    mongo_setup.global_close()


@pytest.fixture
def service():
    return ReservationService()


def store(**fields):
    """Save a reservation directly, bypassing the service under test."""
    values = dict(
        id=uuid.uuid4(),
        price=120,
        date=DATE,
        chalet='80C',
        booker='booker',
        guests=['kai', 'jack'],
        has_paid=True,
        has_insurance=False,
        damages=None,
    )
    values.update(fields)
    return Reservation(**values).save(force_insert=True)


def ids(reservations):
    return [r.id for r in reservations]
