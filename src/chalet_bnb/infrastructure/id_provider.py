"""
Identifier generation for new reservations.

An id provider is any zero-argument callable returning a fresh uuid.UUID.
ReservationService calls it exactly once per saved ReservationEntry, so
tests can pass a deterministic provider instead of the random default.
"""
import uuid
from typing import Callable

IdProvider = Callable[[], uuid.UUID]


def uuid_provider() -> uuid.UUID:
    return uuid.uuid4()
