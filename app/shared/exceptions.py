"""Domain errors raised by services and rendered by the API exception handlers."""


class DomainError(Exception):
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequestError(DomainError):
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(DomainError):
    status_code = 401
    default_message = "Not authenticated"


class ForbiddenError(DomainError):
    status_code = 403
    default_message = "You are not allowed to do that"


class NotFoundError(DomainError):
    status_code = 404
    default_message = "Not found"


class ConflictError(DomainError):
    status_code = 409
    default_message = "Conflict"
