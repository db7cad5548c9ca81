import datetime

import pytest

from chalet_bnb.data.reservations import ReservationIncomeSummary
from chalet_bnb.data.views import ReservationInsuranceClaim
from chalet_bnb.services.errors import ReservationValidationError

from conftest import DATE, store


def test_checkin_list(service):
    thomas = store(booker='thomas')
    anouk = store(booker='anouk')

    result = service.checkin_list(DATE)

    assert result.date == DATE
    assert thomas.booker in result.bookers
    assert anouk.booker in result.bookers


def test_checkin_list_bookers_are_distinct(service):
    store(booker='thomas', chalet='100B')
    store(booker='thomas', chalet='110B')
    store(booker='anouk')
    store(booker='will', date=DATE + datetime.timedelta(days=1))

    assert service.checkin_list(DATE).bookers == ('anouk', 'thomas')


def test_checkin_list_without_reservations(service):
    store(date=DATE + datetime.timedelta(days=1))

    assert service.checkin_list(DATE) is None


def test_income_generated(service):
    thomas = store(booker='thomas', price=120)
    anouk = store(booker='anouk', price=180)

    result = service.income_generated(2023, 1)

    assert result.id == '2023-01'
    assert result.income == thomas.price + anouk.price
    stored = ReservationIncomeSummary.objects.get()
    assert stored.id == result.id
    assert stored.income == result.income


def test_income_generated_only_counts_the_month(service):
    store(price=100, date=datetime.date(2023, 1, 1))
    store(price=200, date=datetime.date(2023, 1, 31))
    store(price=400, date=datetime.date(2022, 12, 31))
    store(price=800, date=datetime.date(2023, 2, 1))

    january = service.income_generated(2023, 1)
    december = service.income_generated(2022, 12)

    assert (january.id, january.income) == ('2023-01', 300)
    assert (december.id, december.income) == ('2022-12', 400)


def test_income_generated_overwrites_earlier_summary(service):
    store(price=100)
    service.income_generated(2023, 1)

    store(price=50)
    result = service.income_generated(2023, 1)

    assert result.income == 150
    assert ReservationIncomeSummary.objects(id='2023-01').count() == 1
    assert ReservationIncomeSummary.objects.get(id='2023-01').income == 150
    assert service.find_income_summary(2023, 1).income == 150


def test_income_generated_without_reservations(service):
    store(date=datetime.date(2023, 2, 1))

    assert service.income_generated(2023, 1) is None
    assert service.income_generated(2023, 3) is None
    assert ReservationIncomeSummary.objects.count() == 0
    assert service.find_income_summary(2023, 1) is None


@pytest.mark.parametrize('month', [0, 13])
def test_income_generated_rejects_bad_month(service, month):
    with pytest.raises(ReservationValidationError):
        service.income_generated(2023, month)


def insured(chalet, *damages, **fields):
    return store(chalet=chalet, has_insurance=True, guests=['jan', 'rebecca'], damages=list(damages), **fields)


def test_insurance_claims(service):
    insured('100B', 'broken window', 'broken sink')
    insured('110B', 'broken lamp')
    insured('120B', 'broken tile')
    insured('130B', 'broken vacuum')

    result = service.insurance_claims(['100B', '110B'], DATE)

    assert result == [
        ReservationInsuranceClaim(DATE, '100B', 'broken window', True),
        ReservationInsuranceClaim(DATE, '100B', 'broken sink', True),
        ReservationInsuranceClaim(DATE, '110B', 'broken lamp', True),
    ]


def test_insurance_claims_follow_given_chalet_order(service):
    insured('100B', 'broken window', 'broken sink')
    insured('110B', 'broken lamp')
    insured('100B', 'broken chair')

    result = service.insurance_claims(['110B', '100B'], DATE)

    assert [(c.chalet, c.damage) for c in result] == [
        ('110B', 'broken lamp'),
        ('100B', 'broken window'),
        ('100B', 'broken sink'),
        ('100B', 'broken chair'),
    ]


def test_insurance_claims_skip_uninsured_undamaged_and_other_dates(service):
    store(chalet='100B', has_insurance=False, damages=['broken window'])
    store(chalet='100B', has_insurance=True, damages=None)
    insured('100B', 'broken sink', date=DATE + datetime.timedelta(days=1))

    assert service.insurance_claims(['100B'], DATE) == []


def test_insurance_claims_without_chalets(service):
    insured('100B', 'broken window')

    assert service.insurance_claims([], DATE) == []


def test_income_generated_without_reservations_keeps_earlier_summary(service):
    stored = store(price=100)
    service.income_generated(2023, 1)

    service.delete(stored.id)

    assert service.income_generated(2023, 1) is None
    assert ReservationIncomeSummary.objects.get(id='2023-01').income == 100


def test_insurance_claims_skip_empty_damages(service):
    store(chalet='100B', has_insurance=True, damages=[])

    assert service.insurance_claims(['100B'], DATE) == []


def test_insurance_claims_reject_a_single_string(service):
    insured('100B', 'broken window')

    with pytest.raises(ReservationValidationError):
        service.insurance_claims('100B', DATE)


def test_insurance_claims_accept_any_iterable(service):
    insured('100B', 'broken window')

    result = service.insurance_claims((chalet for chalet in ('100B',)), DATE)

    assert [c.damage for c in result] == ['broken window']
