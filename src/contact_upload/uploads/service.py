"""
Upload service: store, parse and validate contact CSV files.
"""

from typing import Iterable

from fastapi import UploadFile

from contact_upload.contacts.csv_parser import (
    CSVParser,
    ContactRecord,
    has_required_fields,
    validate_phone,
)
from contact_upload.shared.exceptions import (
    AppError,
    EmptyCSVError,
    InvalidFileTypeError,
    InvalidPhoneNumbersError,
    ListingError,
    MissingColumnsError,
    NoFileUploadedError,
    UploadFailedError,
)
from contact_upload.shared.logging import get_logger
from contact_upload.uploads.schemas import UploadedFilesResponse, UploadResponse
from contact_upload.uploads.store import StoredFile, UploadStore

logger = get_logger(__name__)

ALLOWED_EXTENSION = ".csv"


def is_csv_filename(filename: str | None) -> bool:
    """Return True when the client-supplied name ends in .csv (any case)."""
    return bool(filename) and filename.lower().endswith(ALLOWED_EXTENSION)


def validate_records(rows: Iterable[ContactRecord]) -> list[ContactRecord]:
    """Read parsed rows and apply the contact rules.

    Rows are checked in file order. The first row missing ``name`` or
    ``phone`` stops the scan immediately, so it takes precedence over any
    phone problems further down. Phone problems are collected over the whole
    file before being reported.

    Args:
        rows: Parsed rows.

    Returns:
        Every row read.

    Raises:
        MissingColumnsError: A row lacks a required value.
        InvalidPhoneNumbersError: One or more rows have a malformed phone.
        EmptyCSVError: The file has no data rows.
    """
    records: list[ContactRecord] = []
    invalid_rows: list[ContactRecord] = []

    for record in rows:
        records.append(record)

        if not has_required_fields(record):
            raise MissingColumnsError()

        if not validate_phone(record["phone"]):
            invalid_rows.append(record)

    if invalid_rows:
        raise InvalidPhoneNumbersError(invalid_rows=invalid_rows)

    if not records:
        raise EmptyCSVError()

    return records


class UploadService:
    """Service for contact file uploads and listings."""

    def __init__(
        self,
        store: UploadStore,
        parser: CSVParser | None = None,
    ) -> None:
        """Initialize upload service.

        Args:
            store: Upload directory store.
            parser: Optional CSV parser (for DI).
        """
        self._store = store
        self._parser = parser or CSVParser()

    async def upload(self, file: UploadFile | None) -> UploadResponse:
        """Persist and validate an uploaded contact CSV.

        The file is written first and then read back for validation. Every
        failure after the write removes the file before the error propagates,
        so only fully validated uploads stay on disk.

        Args:
            file: Multipart file part, or None when the request carried none.

        Returns:
            Upload summary with the generated filename and row count.

        Raises:
            NoFileUploadedError: No file part in the request.
            InvalidFileTypeError: File name does not end in .csv.
            ValidationError: Content failed a contact rule (see validate_records).
            UploadFailedError: Any unexpected error while writing, reading or parsing.
        """
        if file is None:
            logger.info("Upload rejected: no file part")
            raise NoFileUploadedError()

        if not is_csv_filename(file.filename):
            logger.info(
                "Upload rejected: invalid file type",
                extra={"original_filename": file.filename},
            )
            raise InvalidFileTypeError()

        logger.info(
            "CSV upload started",
            extra={
                "original_filename": file.filename,
                "content_type": file.content_type,
            },
        )

        try:
            stored = await self._store.save(file)
        except Exception as exc:
            logger.exception("Upload error: could not write file")
            raise UploadFailedError(details=str(exc)) from exc

        try:
            content = await self._store.read_bytes(stored)
            records = validate_records(self._parser.parse(content))
        except AppError as exc:
            logger.info(
                "CSV upload rejected",
                extra={
                    "stored_filename": stored.filename,
                    "reason": exc.message,
                },
            )
            await self._discard(stored)
            raise
        except Exception as exc:
            logger.exception(
                "Upload error",
                extra={"stored_filename": stored.filename},
            )
            await self._discard(stored)
            raise UploadFailedError(details=str(exc)) from exc

        logger.info(
            "CSV upload completed",
            extra={
                "stored_filename": stored.filename,
                "total_contacts": len(records),
            },
        )

        return UploadResponse(
            filename=stored.filename,
            total_contacts=len(records),
        )

    async def list_files(self) -> UploadedFilesResponse:
        """List every entry in the upload directory.

        Raises:
            ListingError: The directory could not be read.
        """
        try:
            files = await self._store.list_files()
        except OSError as exc:
            logger.exception("Could not list upload directory")
            raise ListingError(details=str(exc)) from exc

        return UploadedFilesResponse(files=files, total_files=len(files))

    async def _discard(self, stored: StoredFile) -> None:
        # The original failure is what the client sees; a cleanup failure is only logged.
        try:
            await self._store.delete(stored)
        except OSError:
            logger.exception(
                "Could not remove rejected upload",
                extra={"stored_filename": stored.filename},
            )
