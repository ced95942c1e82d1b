"""Standardized error response schema."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Error body shared by every failing endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(..., description="Request path that failed")
    timestamp: int = Field(..., description="Epoch milliseconds when the error was produced")
    message: str = Field(..., description="Human-readable error message")
    validation_errors: dict[str, str] | None = Field(
        default=None,
        alias="validationErrors",
        description="Field name -> message, only for validation failures",
    )
