"""Errors raised by the category mutation path."""

from __future__ import annotations

from typing import Any, Dict, Optional


class CategoryError(Exception):
    """Base class for failures surfaced to the user."""

    kind = "category_error"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "message": self.message}


class ValidationError(CategoryError):
    """Client-side validation failed; ``errors`` maps field name to message."""

    kind = "validation_error"
    status_code = 400

    def __init__(self, errors: Dict[str, str], message: str = "Invalid category data") -> None:
        super().__init__(message)
        self.errors = dict(errors)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class ConflictError(CategoryError):
    kind = "conflict"
    status_code = 409

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["reason"] = self.reason
        return data


class NetworkError(CategoryError):
    """The repository call failed; nothing was applied and it can be retried."""

    kind = "network_error"
    status_code = 503

    def __init__(self, message: str = "Category repository is unavailable", cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class NotFoundError(CategoryError):
    kind = "not_found"
    status_code = 404

    def __init__(self, category_id: Any) -> None:
        super().__init__(f"Category {category_id} not found")
        self.category_id = category_id
