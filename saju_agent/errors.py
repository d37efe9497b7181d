"""Error types raised by the saju core."""


class SajuError(Exception):
    """Base class for all saju errors."""


class InvalidInput(SajuError, ValueError):
    """A birth input field is out of range."""

    def __init__(self, field: str, value=None, message: str = None):
        self.field = field
        self.value = value
        if message is None:
            message = f"invalid value for {field}: {value!r}"
        super().__init__(message)


class DateOutOfRange(SajuError, ValueError):
    """A fortune date falls outside the supported calendar span."""

    def __init__(self, value, minimum: int = 1900, maximum: int = 2100):
        self.value = value
        super().__init__(f"date {value} is outside the supported range {minimum}-{maximum}")


class ExternalServiceUnavailable(SajuError):
    """An external collaborator failed. Callers are expected to fall back."""

    def __init__(self, service: str, reason: str = ""):
        self.service = service
        self.reason = reason
        super().__init__(f"{service} unavailable: {reason}" if reason else f"{service} unavailable")
