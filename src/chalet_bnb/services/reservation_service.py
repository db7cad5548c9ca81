"""
Service layer for chalet reservations, on top of the MongoEngine documents.

Every method is a single query, update or aggregation pipeline against the
'core' connection registered by data.mongo_setup.global_init(). Nothing is
cached between calls.

Notes:
- Dates are plain datetime.date values. MongoDB stores them as midnight
  datetimes, so pipeline rows are converted back with _as_date().
- Reservations that do not exist and reports without data come back as None
  (or an empty list). Only bad arguments and MongoDB failures raise, see
  services.errors.
- Ties in sorted results are broken by Reservation.booking_number, so equal
  prices or dates come back in the order the reservations were made.
"""

import contextlib
import datetime
import logging
import uuid
from typing import Iterable, List, Optional

import mongoengine
from mongoengine.queryset.visitor import Q
from pymongo.errors import PyMongoError

from chalet_bnb.data.reservations import Reservation, ReservationEntry, ReservationIncomeSummary
from chalet_bnb.data.views import ReservationCheckin, ReservationInsuranceClaim
from chalet_bnb.infrastructure.id_provider import IdProvider, uuid_provider
from chalet_bnb.services.errors import ReservationStoreError, ReservationValidationError

log = logging.getLogger(__name__)

MOST_EXPENSIVE_LIMIT = 10

ANNIVERSARY_DISCOUNT = 50
DISCOUNT_THRESHOLD_INSURED = 300
DISCOUNT_THRESHOLD_UNINSURED = 250

"""
Translate MongoEngine/pymongo failures raised inside the block.

- mongoengine.ValidationError -> ReservationValidationError (bad document values).
- PyMongoError / OperationError -> ReservationStoreError, logged with traceback.
The driver exception stays available as __cause__.
"""
@contextlib.contextmanager
def _store_operation(operation: str):
    try:
        yield
    except mongoengine.ValidationError as e:
        raise ReservationValidationError(f'{operation}: {e}') from e
    except (PyMongoError, mongoengine.OperationError) as e:
        log.exception("MongoDB operation '%s' failed", operation)
        raise ReservationStoreError(operation, str(e)) from e


def _as_date(value) -> datetime.date:
    if isinstance(value, datetime.datetime):
        return value.date()
    return value


def _require_text(name: str, value: str):
    if not value or not value.strip():
        raise ReservationValidationError(f'{name} must not be empty')


"""
Queries, updates and reports over the reservations collection.

Parameters:
    id_provider: Zero-argument callable handing out a fresh uuid.UUID.
        Called once for every reservation created through save();
        defaults to random UUID4 identifiers.
"""
class ReservationService:

    def __init__(self, id_provider: IdProvider = uuid_provider):
        self.id_provider = id_provider

    # ---------- Lookup and lifecycle ----------

    """
    Find a reservation by id.

    Returns:
        The Reservation, or None when no reservation has that id.
    """
    def find(self, reservation_id: uuid.UUID) -> Optional[Reservation]:
        log.debug("Find reservation %s", reservation_id)
        with _store_operation('find'):
            return Reservation.objects(id=reservation_id).first()

    """Every reservation, in no particular order."""
    def find_all(self) -> List[Reservation]:
        log.debug("Find all reservations")
        with _store_operation('find_all'):
            return list(Reservation.objects())  # Force evaluation; materialize into list.

    """
    Store a new reservation for the entry under a fresh id.

    Parameters:
        entry: What the client booked (no id, no damages).

    Returns:
        The stored Reservation, including its generated id and booking number.
        The damages field is left unset.
    """
    def save(self, entry: ReservationEntry) -> Reservation:
        if entry.price is None or entry.price < 0:
            raise ReservationValidationError('price must be zero or more')
        _require_text('chalet', entry.chalet)
        _require_text('booker', entry.booker)

        reservation = Reservation(
            id=self.id_provider(),
            price=entry.price,
            date=entry.date,
            chalet=entry.chalet,
            booker=entry.booker,
            guests=list(entry.guests),  # Copy; the entry may share its list with the caller.
            has_paid=entry.has_paid,
            has_insurance=entry.has_insurance,
        )

        # force_insert: a fresh id must never replace an existing reservation.
        with _store_operation('save'):
            reservation.save(force_insert=True)

        log.info("Saved reservation %s for %s in chalet %s on %s",
                 reservation.id, reservation.booker, reservation.chalet, reservation.date)
        return reservation

    """
    Remove a reservation. Unknown ids are ignored.

    Returns:
        True when a reservation was removed.
    """
    def delete(self, reservation_id: uuid.UUID) -> bool:
        with _store_operation('delete'):
            deleted = Reservation.objects(id=reservation_id).delete()

        log.info("Deleted reservation %s (%d removed)", reservation_id, deleted)
        return deleted > 0

    # ---------- Queries ----------

    """
    The ten most expensive paying stays of the day, most expensive first.

    Free stays (price 0) are left out so complimentary stays do not end
    up on the list of guests to make a return offer to.
    """
    def most_expensive(self, date: datetime.date) -> List[Reservation]:
        log.debug("Most expensive reservations on %s", date)
        with _store_operation('most_expensive'):
            return list(Reservation.objects(price__gt=0, date=date)
                        .order_by('-price', '+booking_number')
                        .limit(MOST_EXPENSIVE_LIMIT))

    """
    Reservations at the chalet with damages filed but no insurance.

    Filters on the damages field being present, not on it being non-empty:
    a reservation without filed damages has no damages field at all, while
    a stored empty list still counts as filed.
    """
    def damage_claims(self, chalet: str) -> List[Reservation]:
        log.debug("Damage claims for chalet %s", chalet)
        with _store_operation('damage_claims'):
            query = Reservation.objects(
                chalet=chalet,
                damages__exists=True,
                damages__ne=None,
                has_insurance=False,
            ).order_by('+booking_number')
            return list(query)

    """
    One page of reservations sorted by date.

    Parameters:
        page_size: Number of reservations per page, at least 1.
        page: Zero-based page index.
        ascending: Oldest date first when True, newest first otherwise.
        booker: Part of the booker's name to search for (case insensitive,
            taken literally). None or empty matches everybody.

    Reservations on the same date keep booking order in both directions,
    so consecutive pages never overlap or skip a reservation.
    """
    def page_and_sort(self, page_size: int, page: int, ascending: bool,
                      booker: Optional[str] = None) -> List[Reservation]:
        if page_size < 1:
            raise ReservationValidationError('page_size must be at least 1')
        if page < 0:
            raise ReservationValidationError('page must not be negative')

        log.debug("Page %d (size %d, ascending=%s) for booker search %r",
                  page, page_size, ascending, booker)
        with _store_operation('page_and_sort'):
            query = Reservation.objects()
            if booker:
                # icontains escapes regex characters in the search text.
                query = query.filter(booker__icontains=booker)

            return list(query
                        .order_by(('+' if ascending else '-') + 'date', '+booking_number')
                        .skip(page * page_size)
                        .limit(page_size))

    # ---------- Updates ----------

    """
    Replace the booker name of a reservation (atomic $set).

    Returns:
        True when a reservation with that id exists.
    """
    def correct_booker(self, reservation_id: uuid.UUID, name: str) -> bool:
        _require_text('name', name)

        with _store_operation('correct_booker'):
            updated = Reservation.objects(id=reservation_id).update_one(set__booker=name)

        log.info("Corrected booker of reservation %s (%d updated)", reservation_id, updated)
        return updated > 0

    """Append a guest to the end of the guest list ($push, no deduplication)."""
    def include_new_guest(self, reservation_id: uuid.UUID, guest: str) -> bool:
        _require_text('guest', guest)

        with _store_operation('include_new_guest'):
            updated = Reservation.objects(id=reservation_id).update_one(push__guests=guest)

        log.info("Added guest to reservation %s (%d updated)", reservation_id, updated)
        return updated > 0

    """Append a damage report; $push creates the damages field on the first one."""
    def file_damage(self, reservation_id: uuid.UUID, damage: str) -> bool:
        _require_text('damage', damage)

        with _store_operation('file_damage'):
            updated = Reservation.objects(id=reservation_id).update_one(push__damages=damage)

        log.info("Filed damage for reservation %s (%d updated)", reservation_id, updated)
        return updated > 0

    def mark_paid(self, reservation_id: uuid.UUID) -> bool:
        with _store_operation('mark_paid'):
            updated = Reservation.objects(id=reservation_id).update_one(set__has_paid=True)

        log.info("Marked reservation %s as paid (%d updated)", reservation_id, updated)
        return updated > 0

    """
    Give every eligible unpaid reservation on the date a discount of 50.

    The price includes insurance, which is not discounted, so the
    threshold depends on it:
        - insured reservations costing 300 or more,
        - uninsured reservations costing 250 or more.
    Paid reservations are skipped, they would need a refund.

    The price is decremented ($inc by -50), so running this twice for the
    same date discounts twice.

    Returns:
        The number of discounted reservations.
    """
    def anniversary_discount(self, date: datetime.date) -> int:
        eligible = Q(has_insurance=True, price__gte=DISCOUNT_THRESHOLD_INSURED) \
            | Q(has_insurance=False, price__gte=DISCOUNT_THRESHOLD_UNINSURED)

        with _store_operation('anniversary_discount'):
            updated = Reservation.objects(Q(date=date, has_paid=False) & eligible) \
                .update(dec__price=ANNIVERSARY_DISCOUNT)

        log.info("Anniversary discount on %s applied to %d reservations", date, updated)
        return updated

    # ---------- Aggregation pipelines ----------

    """
    Distinct bookers checking in on the date.

    Pipeline: $match on the date (from the queryset), $group by date with
    $addToSet on booker, $project the date back in.

    Returns:
        ReservationCheckin with alphabetically sorted bookers, or None when
        nobody has a reservation on that date.
    """
    def checkin_list(self, date: datetime.date) -> Optional[ReservationCheckin]:
        pipeline = [
            {'$group': {'_id': '$date', 'bookers': {'$addToSet': '$booker'}}},
            {'$project': {'_id': 0, 'date': '$_id', 'bookers': 1}},
        ]

        log.debug("Check-in list for %s", date)
        with _store_operation('checkin_list'):
            rows = list(Reservation.objects(date=date).aggregate(pipeline))

        if not rows:
            return None

        row = rows[0]
        return ReservationCheckin(date=_as_date(row['date']), bookers=tuple(sorted(row['bookers'])))

    """
    Total income of a month, stored in the 'reservation_income' collection.

    Pipeline: $match on the month's date range (from the queryset), then
    $group by the 'YYYY-MM' month key summing the prices. A month without
    reservations produces no group at all.

    The summary is upserted under its month key, so recomputing a month
    overwrites the earlier summary instead of adding a second one.

    Returns:
        The stored ReservationIncomeSummary, or None (storing nothing) when
        the month has no reservations.
    """
    def income_generated(self, year: int, month: int) -> Optional[ReservationIncomeSummary]:
        if not 1 <= month <= 12:
            raise ReservationValidationError(f'month must be between 1 and 12, not {month}')
        if not datetime.MINYEAR <= year < datetime.MAXYEAR:
            raise ReservationValidationError(f'year {year} is out of range')

        first_day = datetime.date(year, month, 1)
        if month == 12:
            next_first_day = datetime.date(year + 1, 1, 1)
        else:
            next_first_day = datetime.date(year, month + 1, 1)

        pipeline = [
            {'$group': {
                '_id': {'$dateToString': {'format': '%Y-%m', 'date': '$date'}},
                'income': {'$sum': '$price'},
            }},
        ]

        with _store_operation('income_generated'):
            rows = list(Reservation.objects(date__gte=first_day, date__lt=next_first_day).aggregate(pipeline))
            if not rows:
                log.info("No reservations in %s, no income summary stored",
                         ReservationIncomeSummary.key_for(year, month))
                return None

            key = rows[0]['_id']
            summary = ReservationIncomeSummary.objects(id=key) \
                .modify(upsert=True, new=True, set__income=rows[0]['income'])

        log.info("Income for %s: %d", key, summary.income)
        return summary

    """A summary stored earlier by income_generated(), or None."""
    def find_income_summary(self, year: int, month: int) -> Optional[ReservationIncomeSummary]:
        log.debug("Find income summary for %04d-%02d", year, month)
        with _store_operation('find_income_summary'):
            return ReservationIncomeSummary.objects(id=ReservationIncomeSummary.key_for(year, month)).first()

    """
    One claim per damage filed on insured reservations at the chalets on the date.

    Parameters:
        chalets: Chalet identifiers, in the order the report should list them.
            A single string is rejected; pass ['100B'] for one chalet.
        date: Date of the stays.

    Pipeline: $match (from the queryset), $sort on booking order, $unwind
    the damages into one row each, $project the claim fields.

    Claims are ordered by the position of their chalet in `chalets`,
    then by booking order, then by the order the damages were filed.
    """
    def insurance_claims(self, chalets: Iterable[str], date: datetime.date) -> List[ReservationInsuranceClaim]:
        if isinstance(chalets, str):
            raise ReservationValidationError('chalets must be a collection of chalet ids, not a single string')

        # Position of each chalet in the request; duplicates keep their first position.
        chalet_order = {}
        for chalet in chalets:
            chalet_order.setdefault(chalet, len(chalet_order))

        if not chalet_order:
            return []

        pipeline = [
            {'$sort': {'booking_number': 1}},
            {'$unwind': '$damages'},
            {'$project': {'_id': 0, 'date': 1, 'chalet': 1, 'damage': '$damages', 'has_insurance': 1}},
        ]

        log.debug("Insurance claims for %s on %s", list(chalet_order), date)
        with _store_operation('insurance_claims'):
            query = Reservation.objects(
                date=date,
                chalet__in=list(chalet_order),
                has_insurance=True,
                damages__exists=True,
            )
            rows = list(query.aggregate(pipeline))

        claims = [
            ReservationInsuranceClaim(
                date=_as_date(row['date']),
                chalet=row['chalet'],
                damage=row['damage'],
                has_insurance=row['has_insurance'],
            )
            for row in rows
        ]
        # sorted() is stable: booking and damage order survive within a chalet.
        return sorted(claims, key=lambda claim: chalet_order[claim.chalet])
