"""Domain errors raised by services and rendered by the API error handler."""


class TripWiseError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(TripWiseError):
    status_code = 404
    code = "not_found"


class ValidationFailed(TripWiseError):
    """Request input rejected before any computation runs."""

    status_code = 400
    code = "validation_error"


class NoCostSharers(ValidationFailed):
    code = "no_cost_sharers"


class DataIntegrityError(TripWiseError):
    """A stored cost record cannot be priced (e.g. amount without currency)."""

    status_code = 422
    code = "data_integrity_error"


class ExchangeRateUnavailable(TripWiseError):
    status_code = 502
    code = "fx_unavailable"

    def __init__(self, from_currency: str, to_currency: str):
        super().__init__(f"No exchange rate available for {from_currency} -> {to_currency}")
        self.from_currency = from_currency
        self.to_currency = to_currency


class ActualsStateConflict(TripWiseError):
    """Transfer/reset/collect attempted from the wrong actuals state."""

    status_code = 409
    code = "conflict"
