# room_directory/core/exceptions.py
"""Errors the directory raises on purpose.

Each class fixes a machine readable ``code`` and the HTTP ``status_code`` the
API answers with; ``to_dict`` is the JSON body. Database errors are not part
of this hierarchy: ``SQLAlchemyError`` reaches the caller as raised.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for errors rendered as ``{"error": {...}}``.

    ``context`` holds small identifying values (a room id, a field name) and
    is safe to show to clients. ``details`` is free-form. ``cause`` keeps the
    underlying exception for logs and is never serialized.
    """

    code: str = "app_error"
    status_code: int = 500
    default_message: str = "Application error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Any] = None,
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = details
        self.cause = cause
        self.context: Dict[str, Any] = dict(context or {})
        self.raised_at = datetime.now(timezone.utc)

    def __str__(self) -> str:
        text = f"[{self.code}] {self.message}"
        if self.context:
            text += f" context={self.context}"
        if self.cause is not None:
            text += f" cause={self.cause!r}"
        return text

    @property
    def timestamp(self) -> str:
        return self.raised_at.isoformat(timespec="seconds").replace("+00:00", "Z")

    def payload(self) -> Dict[str, Any]:
        return {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
            "context": self.context,
            "timestamp": self.timestamp,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.payload()}

    def with_context(self, **values: Any) -> AppError:
        """Add the non-None ``values`` to ``context`` and return self."""
        self.context.update({k: v for k, v in values.items() if v is not None})
        return self


class InvalidFilterError(AppError):
    """Search criteria that cannot be turned into a query.

    ``validation_errors`` lists each rejected value as ``{"loc", "msg",
    "type"}``. ``context["field"]`` is set when exactly one field is at fault.
    """

    code = "invalid_filter"
    status_code = 422
    default_message = "Invalid search filter"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        field: Optional[str] = None,
        validation_errors: Optional[List[Dict[str, Any]]] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.validation_errors: List[Dict[str, Any]] = list(validation_errors or [])
        self.with_context(field=field)

    def payload(self) -> Dict[str, Any]:
        body = super().payload()
        body["validation_errors"] = self.validation_errors
        return body


class RoomNotFoundError(AppError):
    code = "room_not_found"
    status_code = 404
    default_message = "Room not found"

    def __init__(
        self,
        room_id: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        if message is None and room_id is not None:
            message = f"Room {room_id} not found"
        super().__init__(message, **kwargs)
        self.room_id = room_id
        if room_id is not None:
            self.with_context(room_id=str(room_id))


__all__ = ["AppError", "InvalidFilterError", "RoomNotFoundError"]
