"""REST API error response models.

Documents the JSON body every error handler returns, so routes can list
it under ``responses=`` for the OpenAPI schema.
"""

from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """One field that failed validation."""

    field: str
    message: str
    code: str | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "field": "name",
                "message": "Must not be empty",
                "code": "REQUIRED",
            }
        }
    )


class ErrorResponse(BaseModel):
    """Structured error body.

    Examples:
        Missing car:
            {"detail": "Car with identifier 'tesla-model-3' not found", "code": "NOT_FOUND"}

        Store failure (translated message of the underlying error):
            {"detail": "A record with the same unique value already exists", "code": "STORE_ERROR"}
    """

    detail: str
    code: str | None = None
    errors: list[ErrorDetail] | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"detail": "Car with identifier 'tesla-model-3' not found", "code": "NOT_FOUND"},
                {
                    "detail": "Validation failed",
                    "code": "VALIDATION_ERROR",
                    "errors": [
                        {"field": "name", "message": "Must not be empty", "code": "REQUIRED"},
                    ],
                },
                {"detail": "The database is unavailable, please try again later", "code": "STORE_ERROR"},
            ]
        }
    )


NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Car not found"}}
VALIDATION_RESPONSE = {422: {"model": ErrorResponse, "description": "Validation error"}}
STORE_ERROR_RESPONSE = {502: {"model": ErrorResponse, "description": "Store failure"}}
