from typing import Dict, Optional


class StorefrontError(Exception):
    """Base error carrying the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict:
        return {"error": self.message or self.__class__.__name__}


class NotFoundError(StorefrontError):
    status_code = 404


class UnauthorizedError(StorefrontError):
    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class ForbiddenError(StorefrontError):
    status_code = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class ServiceUnavailableError(StorefrontError):
    status_code = 503

    def __init__(self, message: str = "Service unavailable") -> None:
        super().__init__(message)


class ValidationError(StorefrontError, ValueError):
    """Invalid client input. `errors` maps field paths to messages."""

    status_code = 400

    def __init__(self, message: str = "Invalid request", errors: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.errors = dict(errors or {})

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        return cls(message, {field: message})

    def to_dict(self) -> Dict:
        payload = super().to_dict()
        if self.errors:
            payload["errors"] = self.errors
        return payload
