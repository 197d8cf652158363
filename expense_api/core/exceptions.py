"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; ``expense_api.main`` installs
a single handler that renders any of them as ``{"detail": message}``.

    AppError
    +-- NotFoundError       404  missing or soft-deleted record
    +-- ValidationError     400  bad business input, rejected upload
    +-- ConflictError       409  duplicate e-mail
    +-- InvalidStateError   400  action not allowed in the current status
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AppError):
    status_code = 404

    @classmethod
    def for_entity(cls, entity: str, entity_id) -> "NotFoundError":
        return cls(f"{entity} with ID {entity_id} not found")


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 409


class InvalidStateError(AppError):
    status_code = 400
