import datetime

from chalet_bnb.data.reservations import Reservation, ReservationEntry, ReservationIncomeSummary

from conftest import DATE, store


def test_damages_field_is_absent_until_filed():
    reservation = store()

    raw = Reservation._get_collection().find_one({'_id': str(reservation.id)})
    assert 'damages' not in raw
    assert Reservation.objects.get(id=reservation.id).damages is None


def test_date_round_trips_as_date():
    reservation = store(date=datetime.date(2023, 3, 14))

    assert Reservation.objects.get(id=reservation.id).date == datetime.date(2023, 3, 14)


def test_booking_numbers_follow_booking_order():
    first = store(booker='first')
    second = store(booker='second')

    assert first.booking_number < second.booking_number


def test_income_summary_key():
    assert ReservationIncomeSummary.key_for(2023, 1) == '2023-01'
    assert ReservationIncomeSummary.key_for(999, 12) == '0999-12'


def test_entry_defaults():
    entry = ReservationEntry(price=100, date=DATE, chalet='80C', booker='alex')

    assert entry.guests == []
    assert entry.has_paid is False
    assert entry.has_insurance is False
