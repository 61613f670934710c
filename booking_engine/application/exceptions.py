class SchedulingError(RuntimeError):
    """Base class for per-request scheduling outcomes. None of them is fatal."""
    pass


class ProviderNotWorking(SchedulingError):
    """Provider has no working-hours entry, or is off, on the requested weekday."""
    pass


class ProviderNotFound(ProviderNotWorking):
    """Provider has no working-hours configuration at all."""
    pass


class OutOfWorkingHours(SchedulingError):
    """Requested interval does not fit entirely within working hours."""
    pass


class OutsideBookingHorizon(SchedulingError):
    """Requested date or start time is in the past or beyond the booking horizon."""
    pass


class InvalidService(SchedulingError):
    """Unknown service or non-positive duration."""
    pass


class SlotConflict(SchedulingError):
    """Raised only inside the critical section: another active booking overlaps the interval."""
    pass


class ScheduleBusy(SchedulingError):
    """The (provider, date) critical section could not be entered in time. Nothing was written."""
    pass


class BookingNotFound(SchedulingError):
    pass


class AlreadyCancelled(SchedulingError):
    pass


class NotCancellable(SchedulingError):
    """A cancellation rule rejected the request."""
    pass


class BookingNotPending(SchedulingError):
    """Confirmation requested for a booking that is not pending."""
    pass


class EventDeliveryError(RuntimeError):
    """Raised when a booking event could not be delivered to its collaborator."""
    pass
