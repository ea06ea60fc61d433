"""Failures raised by the car catalog.

None of these know about HTTP. Each carries a stable ``error_code``, a
presentable message and free-form context; the entrypoints decide how a
code is rendered.
"""

from typing import Any

FieldErrors = list[dict[str, str]]


class DomainError(Exception):
    """Root of the catalog error hierarchy."""

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        """Message, code and context flattened into one mapping."""
        payload: dict[str, Any] = {"message": self.message, "code": self.error_code}
        payload.update(self.context)
        return payload


class ValidationError(DomainError):
    """Input rejected before the store is touched.

    Raised for a create without name or category, an update that blanks
    either of them, a related-cars limit below 1, or a detail lookup that
    names neither (or both) of id and slug.

    ``errors`` holds per-field entries shaped
    ``{"field": ..., "message": ..., "code": ...}``.
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str | None = None,
        errors: FieldErrors | None = None,
        **context: Any,
    ) -> None:
        self.errors: FieldErrors | None = errors or None
        default = "Validation failed" if self.errors else "Validation error"
        super().__init__(message or default, **context)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.errors:
            payload["errors"] = self.errors
        return payload


class NotFoundError(DomainError):
    """A car (or homepage target) that must exist does not.

    Plain reads answer None instead; this is only raised where a caller
    needs the car: detail routes, the re-read after an update and saving
    homepage settings.
    """

    error_code: str = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None, **context: Any) -> None:
        if identifier:
            message = f"{resource} with identifier '{identifier}' not found"
        else:
            message = f"{resource} not found"
        super().__init__(message, resource=resource, identifier=identifier, **context)


class StoreError(DomainError):
    """The relational store or the object store failed.

    ``message`` is the translated text of the underlying failure and the
    original exception is chained as ``__cause__``. Nothing is retried.
    """

    error_code: str = "STORE_ERROR"

    def __init__(self, message: str, operation: str | None = None, **context: Any) -> None:
        super().__init__(message, operation=operation, **context)
