BOOKING_CONFLICT_MESSAGE = (
    "This barber is already booked for the selected time. "
    "Please choose a different time."
)
BOOKING_CONFLICT_DISPLAY = (
    "This barber is already booked for the selected time. "
    "Please select a different time slot."
)


class StoreError(Exception):
    """A write against the database was refused."""


class BookingConflictError(StoreError):
    """The barber already has a scheduled appointment in that slot."""

    def __init__(self, message=BOOKING_CONFLICT_MESSAGE):
        super().__init__(message)


def rephrase_store_error(message: str) -> str:
    """
    Turn a store error message into the text shown to the user.
    Only the exact double-booking message is rephrased.
    """
    if message == BOOKING_CONFLICT_MESSAGE:
        return BOOKING_CONFLICT_DISPLAY
    return f"Booking failed: {message}"
