"""
Shared exceptions and their HTTP payloads.

Client input problems are ``ValidationError`` subclasses (HTTP 400); anything
the service did not anticipate is wrapped in ``UploadFailedError`` or
``ListingError`` (HTTP 500).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class AppError(Exception):
    message: str = "Application error"
    details: Optional[str] = None

    status_code = 500

    def __str__(self) -> str:
        return self.message

    def to_content(self) -> dict[str, Any]:
        """Build the JSON body returned to the client."""
        content: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            content["details"] = self.details
        content["status"] = "failed"
        return content


class ValidationError(AppError):
    status_code = 400


class InvalidFileTypeError(ValidationError):
    def __init__(self, message: str = "Invalid file type. Please upload a CSV file") -> None:
        super().__init__(message=message)


class NoFileUploadedError(ValidationError):
    def __init__(self, message: str = "No file uploaded") -> None:
        super().__init__(message=message)


class MissingColumnsError(ValidationError):
    def __init__(self, message: str = "Missing required columns: name, phone") -> None:
        super().__init__(message=message)


class InvalidPhoneNumbersError(ValidationError):
    def __init__(
        self,
        invalid_rows: list[dict[str, str]],
        message: str = "Invalid phone numbers found",
    ) -> None:
        super().__init__(message=message)
        self.invalid_rows = invalid_rows

    def to_content(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "invalid_rows": self.invalid_rows,
            "status": "failed",
        }


class EmptyCSVError(ValidationError):
    def __init__(self, message: str = "The CSV file is empty") -> None:
        super().__init__(message=message)


class UploadFailedError(AppError):
    def __init__(self, details: str, message: str = "An unexpected error occurred") -> None:
        super().__init__(message=message, details=details)


class ListingError(AppError):
    def __init__(self, details: str, message: str = "Could not list files") -> None:
        super().__init__(message=message, details=details)

    def to_content(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}
