"""
CSV parsing and validation for contact uploads.
"""

import csv
import io
import re
from typing import Generator, Mapping

from contact_upload.shared.logging import get_logger

logger = get_logger(__name__)

# One parsed CSV row: header name -> raw cell value, in column order.
ContactRecord = dict[str, str]

REQUIRED_COLUMNS = ("name", "phone")

# ASCII digits only; str.isdigit() would also accept other Unicode digits.
PHONE_DIGITS_PATTERN = re.compile(r"[0-9]+")

# Characters allowed as visual separators inside a phone number
PHONE_SEPARATORS = ("-", " ")


class CSVFormatError(Exception):
    """Raised when file content cannot be parsed as CSV."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        super().__init__(message)
        self.line_number = line_number


def normalize_phone(phone: str) -> str:
    """Strip hyphens and spaces from a raw phone value.

    Args:
        phone: Raw phone string.

    Returns:
        Phone string without separators.
    """
    cleaned = str(phone)
    for separator in PHONE_SEPARATORS:
        cleaned = cleaned.replace(separator, "")
    return cleaned


def validate_phone(phone: str) -> bool:
    """Check that a phone value is non-empty and all digits once separators are removed."""
    return PHONE_DIGITS_PATTERN.fullmatch(normalize_phone(phone)) is not None


def has_required_fields(record: Mapping[str, str]) -> bool:
    """Return True when every required column is present and non-empty."""
    return all(record.get(column) for column in REQUIRED_COLUMNS)


class CSVParser:
    """Parser for contact CSV files."""

    def __init__(
        self,
        delimiter: str = ",",
        encoding: str = "utf-8",
    ) -> None:
        """Initialize CSV parser.

        Args:
            delimiter: CSV field delimiter.
            encoding: Encoding used when content is passed as bytes.
        """
        self.delimiter = delimiter
        self.encoding = encoding

    def decode(self, content: bytes) -> str:
        try:
            return content.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise CSVFormatError(f"File encoding error: {e}") from e

    def parse(self, content: bytes | str) -> Generator[ContactRecord, None, None]:
        """Parse CSV content and yield one record per data row.

        The first non-empty line is the header. Empty lines are skipped
        everywhere. A data row whose field count differs from the header's
        is rejected.

        Args:
            content: Raw CSV file content.

        Yields:
            Records mapping header names to cell values.

        Raises:
            CSVFormatError: Undecodable content, malformed quoting, or a
                row with the wrong number of fields.
        """
        text = self.decode(content) if isinstance(content, bytes) else content
        reader = csv.reader(io.StringIO(text, newline=""), delimiter=self.delimiter)

        header: list[str] | None = None
        try:
            for row in reader:
                if not row:
                    continue

                if header is None:
                    header = row
                    logger.debug("CSV header parsed", extra={"columns": header})
                    continue

                if len(row) != len(header):
                    raise CSVFormatError(
                        f"Invalid record length on line {reader.line_num}: "
                        f"expected {len(header)} fields, got {len(row)}",
                        line_number=reader.line_num,
                    )

                yield dict(zip(header, row))
        except csv.Error as e:
            raise CSVFormatError(
                f"Malformed CSV on line {reader.line_num}: {e}",
                line_number=reader.line_num,
            ) from e
