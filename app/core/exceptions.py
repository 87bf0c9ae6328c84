"""
Application error taxonomy.

Services raise these; the handlers registered in app.main translate them into
the ``{"error": message}`` JSON envelope with the matching status code.
"""


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class ConfigurationError(AppError):
    status_code = 500


class UpstreamError(AppError):
    """A backend call failed for a reason other than a uniqueness violation."""
    status_code = 500


def describe_validation_errors(errors) -> str:
    """Flatten pydantic error dicts into one message, e.g. "firstName: Field required"."""
    parts = []
    for error in errors:
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        message = error.get("msg", "Invalid value")
        parts.append(f"{'.'.join(loc)}: {message}" if loc else message)
    return ", ".join(parts)
