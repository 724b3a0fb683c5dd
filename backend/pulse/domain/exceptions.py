"""Exceptions raised by the domain services."""

from __future__ import annotations

from fastapi import status

if hasattr(status, "HTTP_422_UNPROCESSABLE_CONTENT"):
	_HTTP_422 = status.HTTP_422_UNPROCESSABLE_CONTENT
else:  # pragma: no cover - older Starlette builds
	_HTTP_422 = status.HTTP_422_UNPROCESSABLE_ENTITY


class PulseError(Exception):
	"""Base class for domain errors surfaced to API callers."""

	status_code: int = status.HTTP_400_BAD_REQUEST
	detail: str = "pulse_error"

	def __init__(self, detail: str | None = None) -> None:
		super().__init__(detail or self.detail)
		if detail:
			self.detail = detail


class NotFoundError(PulseError):
	"""Raised when the targeted activity or event does not exist."""

	status_code = status.HTTP_404_NOT_FOUND
	detail = "not_found"


class ValidationError(PulseError):
	"""Raised for validation errors not covered by FastAPI schema validation."""

	status_code = _HTTP_422
	detail = "validation_error"
