"""
Error kinds raised by the reservation service.

A reservation that does not exist, or a report with nothing to report, is
not an error: those operations return None (or an empty list) instead.
"""


"""Base class for everything the reservation service raises."""
class ReservationError(Exception):
    pass


"""The caller passed arguments the service refuses to run with."""
class ReservationValidationError(ReservationError, ValueError):
    pass


"""
MongoDB failed to run a query, update or pipeline.

Attributes:
    operation: Name of the service operation that failed (e.g. 'find').
The driver exception is available as __cause__.
"""
class ReservationStoreError(ReservationError):

    def __init__(self, operation: str, message: str):
        super().__init__(f'{operation} failed: {message}')
        self.operation = operation
