class LLMUpstreamError(RuntimeError):
    """Raised when LLM provider fails (timeouts, network errors, service unavailable)."""
    pass


class LLMContractError(RuntimeError):
    """Raised when LLM adapter violates contract (bad format or missing data)."""
    pass


class BookingError(RuntimeError):
    """Base class for expected booking outcomes raised by the booking store."""
    pass


class NoAvailabilityError(BookingError):
    """No bookable resource of the requested type is free for the date and slot."""

    def __init__(self, resource_type_id: int, date, time_slot: str) -> None:
        super().__init__(
            f"No available resources for type {resource_type_id} on {date} at {time_slot}."
        )
        self.resource_type_id = resource_type_id
        self.date = date
        self.time_slot = time_slot


class BookingNotFoundError(BookingError):
    def __init__(self, booking_id: int) -> None:
        super().__init__(f"Booking with ID {booking_id} not found.")
        self.booking_id = booking_id
