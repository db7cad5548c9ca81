"""Process-wide front desk state.

Exposes:
- active_reservation: Optional[Reservation] - the reservation staff selected (or None).
- reload_reservation(): Refresh active_reservation from MongoDB by its id.

Commands that change a single reservation (guests, damages, payment, booker)
work on active_reservation, so staff select once and then act on it.
"""

from typing import Optional

from chalet_bnb.data.reservations import Reservation
from chalet_bnb.services.reservation_service import ReservationService

svc = ReservationService()

# None means nothing is selected (before selecting, or after deleting).
active_reservation: Optional[Reservation] = None

"""Refresh the global active_reservation from the database, if one is set.

    Behavior:
    - If active_reservation is None, this is a no-op.
    - Otherwise, it re-queries by id to pick up updates made by other commands.
    - If the reservation was deleted, active_reservation becomes None.
"""
def reload_reservation():
    global active_reservation
    if not active_reservation:
        return

    active_reservation = svc.find(active_reservation.id)
