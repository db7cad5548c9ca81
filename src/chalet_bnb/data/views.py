"""
Read-only report rows produced by the aggregation pipelines in
services.reservation_service. None of these are stored.
"""

import datetime
from dataclasses import dataclass
from typing import Tuple


"""Everyone expected to check in on one date; bookers are distinct and sorted."""
@dataclass(frozen=True)
class ReservationCheckin:
    date: datetime.date
    bookers: Tuple[str, ...]


"""A single damage at a single chalet, as the insurer wants to process it."""
@dataclass(frozen=True)
class ReservationInsuranceClaim:
    date: datetime.date
    chalet: str
    damage: str
    has_insurance: bool
