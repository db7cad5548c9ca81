"""
MongoEngine documents for chalet reservations.

Each Reservation is one stay of a group of guests in one chalet on one date.
Staff file damages against a reservation; the damages field stays absent from
the stored document until the first damage is filed.
"""

import datetime
from dataclasses import dataclass, field
from typing import List

import mongoengine

"""
Reservation document stored in the 'reservations' collection (db alias: 'core').

Fields:
    id: UUID primary key handed out by the id provider, stored as a string.
    price: Total price, including the insurance surcharge when insured.
    date: Date of the stay.
    chalet: Identifier of the rented chalet (e.g. '100B').
    booker: Name of the guest responsible for the reservation.
    guests: Names of everyone staying, in the order they were added.
    has_paid: Whether the reservation has been paid for.
    has_insurance: Whether the booker took the damage insurance.
    damages: Damage descriptions filed by staff. None (field absent) when
            nothing was filed, which is not the same as an empty list.

    registered_date: When the reservation was stored.
    booking_number: Increasing number handed out on first save; breaks ties
            when sorting so equal dates or prices come back in booking order.
"""
class Reservation(mongoengine.Document):
    id = mongoengine.UUIDField(primary_key=True, binary=False)

    price = mongoengine.IntField(required=True)
    date = mongoengine.DateField(required=True)
    chalet = mongoengine.StringField(required=True)
    booker = mongoengine.StringField(required=True)
    guests = mongoengine.ListField(mongoengine.StringField())
    has_paid = mongoengine.BooleanField(required=True)
    has_insurance = mongoengine.BooleanField(required=True)

    # ListField defaults to [] which would be stored; None keeps the field absent.
    damages = mongoengine.ListField(mongoengine.StringField(), default=None)

    registered_date = mongoengine.DateTimeField(default=datetime.datetime.now)
    booking_number = mongoengine.SequenceField(db_alias='core', sequence_name='reservation')

    meta = {
        'db_alias': 'core',
        'collection': 'reservations',
        'indexes': ['date', 'chalet'],
    }


"""
Monthly income summary stored in the 'reservation_income' collection.

The primary key is the month it summarizes ('2023-01'), so saving a summary
for a month that already has one replaces the stored document.
"""
class ReservationIncomeSummary(mongoengine.Document):
    id = mongoengine.StringField(primary_key=True)
    income = mongoengine.IntField(required=True)

    meta = {
        'db_alias': 'core',
        'collection': 'reservation_income'
    }

    @staticmethod
    def key_for(year: int, month: int) -> str:
        return f'{year:04d}-{month:02d}'


"""What a client supplies to book a chalet: no id and no damages."""
@dataclass(frozen=True)
class ReservationEntry:
    price: int
    date: datetime.date
    chalet: str
    booker: str
    guests: List[str] = field(default_factory=list)
    has_paid: bool = False
    has_insurance: bool = False
