"""Error kinds raised by the trip and certification services.

The HTTP layer maps each kind to a status code through ``status_code``.
"""


class EvyRoadError(Exception):
    status_code = 500
    kind = "internal_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(EvyRoadError):
    status_code = 404
    kind = "not_found"


class ForbiddenError(EvyRoadError):
    status_code = 403
    kind = "forbidden"


class InvalidStateError(EvyRoadError):
    status_code = 409
    kind = "invalid_state"


class ValidationFailedError(EvyRoadError):
    status_code = 400
    kind = "validation_failed"


class SeasonallyUnavailableError(EvyRoadError):
    status_code = 400
    kind = "seasonally_unavailable"
