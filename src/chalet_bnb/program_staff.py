import uuid

from colorama import Fore
from dateutil import parser
from switchlang import switch

import chalet_bnb.infrastructure.state as state
from chalet_bnb.data.reservations import ReservationEntry
from chalet_bnb.services.errors import ReservationError

"""
Front desk CLI workflow.

This module provides the interactive command loop and actions for staff:
- Booking, selecting, listing and deleting reservations.
- Changing the selected reservation (booker, guests, damages, payment).
- Queries: most expensive stays, damage claims, searching with pages.
- Reports: anniversary discount, check-in list, monthly income, insurance claims.

Conventions:
- Uses switchlang.switch for a case-like control flow pattern.
- Uses infrastructure.state.active_reservation for commands on one reservation.
- Delegates persistence and querying to the ReservationService in state.svc.
- ReservationError and unparsable input are reported with error_msg and the
  loop carries on.
"""

PAGE_SIZE = 5


"""
Entry point for the front desk loop.

Prints a banner and the available commands, then processes input until the
user exits the app.
"""
def run():
    print(' ****************** Front desk **************** ')
    print()

    show_commands()

    while True:
        action = get_action()

        try:
            with switch(action) as s:
                s.case('n', new_reservation)
                s.case('s', select_reservation)
                s.case('l', list_reservations)
                s.case('d', delete_reservation)
                s.case('b', correct_booker)
                s.case('g', add_guest)
                s.case('f', file_damage)
                s.case('p', mark_paid)
                s.case('e', most_expensive)
                s.case('c', damage_claims)
                s.case('q', search)
                s.case('a', anniversary_discount)
                s.case('k', checkin_list)
                s.case('i', income_report)
                s.case('r', insurance_claims)
                s.case(['x', 'bye', 'exit', 'exit()'], exit_app)
                s.case('?', show_commands)
                s.case('', lambda: None)
                s.default(unknown_command)
        except (ReservationError, ValueError) as e:
            error_msg(f'ERROR: {e}')

        # Pick up changes made to the selected reservation.
        state.reload_reservation()

        if action:
            print()


def show_commands():
    print('What action would you like to take:')
    print('[N]ew reservation')
    print('[S]elect a reservation')
    print('[L]ist all reservations')
    print('[D]elete the selected reservation')
    print('Correct the [b]ooker of the selected reservation')
    print('Add a [g]uest to the selected reservation')
    print('[F]ile a damage for the selected reservation')
    print('Mark the selected reservation as [p]aid')
    print('Most [e]xpensive stays of a day')
    print('Damage [c]laims of a chalet')
    print('Search reservations by booker ([q]uery)')
    print('[A]nniversary discount')
    print('Chec[k]-in list')
    print('Monthly [i]ncome report')
    print('Insu[r]ance claims')
    print('e[X]it app')
    print('[?] Help (this info)')
    print()


def new_reservation():
    print(' ****************** NEW RESERVATION **************** ')

    booker = input('Who is booking? ')
    if not booker:
        error_msg('Cancelled')
        return

    date = read_date('Date of the stay [yyyy-mm-dd]: ')
    chalet = input('Which chalet? ').strip().upper()
    guests = [g.strip() for g in input('Guests (comma separated): ').split(',') if g.strip()]
    has_insurance = input('Insurance [y, n]? ').lower().startswith('y')
    price = int(input('Total price (including insurance)? '))
    has_paid = input('Paid already [y, n]? ').lower().startswith('y')

    state.active_reservation = state.svc.save(ReservationEntry(
        price=price, date=date, chalet=chalet, booker=booker, guests=guests,
        has_paid=has_paid, has_insurance=has_insurance,
    ))
    success_msg(f'Created reservation {state.active_reservation.id}.')


def select_reservation():
    text = input('Reservation id: ').strip()
    if not text:
        error_msg('Cancelled')
        return

    reservation = state.svc.find(uuid.UUID(text))
    if not reservation:
        error_msg(f'Could not find reservation {text}.')
        return

    state.active_reservation = reservation
    success_msg('Selected:')
    print_reservation(reservation)


def list_reservations():
    print(' ****************** Reservations **************** ')
    reservations = state.svc.find_all()
    print(f'There are {len(reservations)} reservations.')
    for r in reservations:
        print_reservation(r)


def delete_reservation():
    if not require_selection():
        return

    if not input(f'Delete reservation of {state.active_reservation.booker} [y, n]? ').lower().startswith('y'):
        error_msg('Cancelled')
        return

    state.svc.delete(state.active_reservation.id)
    state.active_reservation = None
    success_msg('Deleted.')


def correct_booker():
    if not require_selection():
        return

    name = input('Correct name of the booker: ').strip()
    state.svc.correct_booker(state.active_reservation.id, name)
    success_msg(f'Booker is now {name}.')


def add_guest():
    if not require_selection():
        return

    guest = input('Name of the new guest: ').strip()
    state.svc.include_new_guest(state.active_reservation.id, guest)
    success_msg(f'Added {guest}.')


def file_damage():
    if not require_selection():
        return

    damage = input('Describe the damage: ').strip()
    state.svc.file_damage(state.active_reservation.id, damage)
    success_msg('Damage filed.')


def mark_paid():
    if not require_selection():
        return

    state.svc.mark_paid(state.active_reservation.id)
    success_msg('Marked as paid.')


def most_expensive():
    date = read_date('Which day [yyyy-mm-dd]? ')
    reservations = state.svc.most_expensive(date)
    print(f'The {len(reservations)} most expensive stays on {date}:')
    for r in reservations:
        print_reservation(r)


def damage_claims():
    chalet = input('Which chalet? ').strip().upper()
    reservations = state.svc.damage_claims(chalet)
    print(f'{len(reservations)} uninsured reservations with damages at {chalet}:')
    for r in reservations:
        print_reservation(r)
        for damage in r.damages:
            print(f'      * {damage}')


"""
Page through reservations whose booker matches the search text.

Enter moves to the next page, 'o' flips the sort order, anything else stops.
"""
def search():
    booker = input('Part of the booker name (empty for everybody): ').strip()
    ascending = True
    page = 0

    while True:
        reservations = state.svc.page_and_sort(PAGE_SIZE, page, ascending, booker)
        print(f'Page {page + 1} ({"oldest" if ascending else "newest"} first):')
        for r in reservations:
            print_reservation(r)

        choice = input('[enter] next page, [o]rder, anything else stops: ').strip().lower()
        if choice == '' and len(reservations) == PAGE_SIZE:
            page += 1
        elif choice == 'o':
            ascending = not ascending
            page = 0
        else:
            return


def anniversary_discount():
    date = read_date('Anniversary date [yyyy-mm-dd]: ')
    count = state.svc.anniversary_discount(date)
    success_msg(f'Discount applied to {count} reservations.')


def checkin_list():
    date = read_date('Check-in date [yyyy-mm-dd]: ')
    checkin = state.svc.checkin_list(date)
    if not checkin:
        print(f'Nobody checks in on {date}.')
        return

    print(f'Checking in on {checkin.date}:')
    for booker in checkin.bookers:
        print(f' * {booker}')


def income_report():
    month = read_date('Month [yyyy-mm]: ')
    summary = state.svc.income_generated(month.year, month.month)
    if not summary:
        print('No reservations in that month.')
        return

    success_msg(f'Income for {summary.id}: ${summary.income}.')


def insurance_claims():
    chalets = [c.strip().upper() for c in input('Chalets (comma separated): ').split(',') if c.strip()]
    date = read_date('Date [yyyy-mm-dd]: ')
    claims = state.svc.insurance_claims(chalets, date)
    print(f'{len(claims)} claims:')
    for claim in claims:
        print(f' * {claim.date} {claim.chalet}: {claim.damage}')


def exit_app():
    print()
    print('bye')
    raise KeyboardInterrupt()


"""
Prompt for the next action, prefixed with the selected booker if any.

Returns:
    The normalized command string (lowercased and stripped).
"""
def get_action():
    text = '> '
    if state.active_reservation:
        text = f'{state.active_reservation.booker}@{state.active_reservation.chalet}> '

    action = input(Fore.YELLOW + text + Fore.WHITE)
    return action.strip().lower()


def read_date(prompt):
    # dateutil accepts '2023-01-01', '1 jan 2023', ...; only the date part is kept.
    return parser.parse(input(prompt)).date()


def require_selection():
    if not state.active_reservation:
        error_msg('You must [s]elect a reservation first.')
        return False
    return True


def print_reservation(r):
    print(' * {} {} in {}: {} with {} guests, ${} ({}, {}){}'.format(
        r.id,
        r.date,
        r.chalet,
        r.booker,
        len(r.guests),
        r.price,
        'paid' if r.has_paid else 'unpaid',
        'insured' if r.has_insurance else 'uninsured',
        f', {len(r.damages)} damages' if r.damages is not None else ''
    ))


def unknown_command():
    print("Sorry we didn't understand that command.")


def success_msg(text):
    print(Fore.LIGHTGREEN_EX + text + Fore.WHITE)


def error_msg(text):
    print(Fore.LIGHTRED_EX + text + Fore.WHITE)
