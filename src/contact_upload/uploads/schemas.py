"""
Pydantic schemas for the upload API.
"""

from typing import Literal

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Schema for a successful CSV upload."""

    message: str = Field(
        default="File uploaded successfully",
        description="Human-readable outcome",
    )
    filename: str = Field(..., description="Generated name of the stored file")
    total_contacts: int = Field(..., ge=1, description="Number of data rows parsed")
    status: Literal["success"] = "success"


class UploadedFilesResponse(BaseModel):
    """Schema for the upload directory listing."""

    files: list[str] = Field(default_factory=list)
    total_files: int = Field(..., ge=0)


class ErrorResponse(BaseModel):
    """Schema for failed requests."""

    error: str
    details: str | None = None
    status: Literal["failed"] | None = None


class InvalidRowsErrorResponse(ErrorResponse):
    """Schema for uploads rejected because of malformed phone numbers."""

    invalid_rows: list[dict[str, str]] = Field(default_factory=list)
