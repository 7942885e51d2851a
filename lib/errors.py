"""
Application errors with user-facing messages.

Every error carries a technical message (logged), a stable code (returned to
API clients) and a French message that can be shown as-is in the dashboard.
"""


class AppError(Exception):
    """Base error for dashboard operations."""

    status_code = 500

    def __init__(self, message: str, code: str, user_message: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.user_message = user_message or "Une erreur est survenue."

    def to_dict(self) -> dict:
        return {"error": self.user_message, "code": self.code, "detail": self.message}


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            f"{entity} not found: {entity_id}",
            f"{entity.upper()}_NOT_FOUND",
            "Élément introuvable",
        )
        self.entity = entity
        self.entity_id = entity_id


class InputError(AppError):
    """Caller supplied missing or malformed input."""

    status_code = 400

    def __init__(self, message: str, code: str = "INVALID_INPUT"):
        super().__init__(message, code, message)


class ConfigurationError(AppError):
    def __init__(self, message: str, code: str = "MISSING_CONFIGURATION"):
        super().__init__(message, code, message)


class RetroplanningGenerationError(AppError):
    """The model answer could not be turned into a task list."""

    status_code = 502

    def __init__(self, message: str):
        super().__init__(message, "RETROPLANNING_GENERATION_FAILED", message)


def get_error_message(error: object) -> str:
    """Extract a readable message from an exception, a mapping or anything else."""
    if isinstance(error, AppError):
        return error.message
    if isinstance(error, Exception):
        return str(error)
    if isinstance(error, dict):
        for key in ("message", "details"):
            value = error.get(key)
            if isinstance(value, str):
                return value
    return str(error)
