"""
Directory-backed store for uploaded CSV files.

The upload directory is shared, mutable state with no locking. Writes are not
atomic: a listing taken while an upload is in flight may include a file that
is still being written or is about to be removed by a failed validation. Two
uploads saved within the same wall-clock second get the same name and the
later write replaces the earlier one.
"""

import contextlib
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from contact_upload.shared.logging import get_logger

logger = get_logger(__name__)

FILENAME_PREFIX = "contacts_"
FILENAME_SUFFIX = ".csv"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

DEFAULT_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class StoredFile:
    """A CSV file written to the upload directory."""

    filename: str
    path: Path
    created_at: datetime


class UploadStore:
    """Owns the upload directory: naming, streamed writes, reads, deletes, listing."""

    def __init__(
        self,
        directory: Path | str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the store.

        Args:
            directory: Upload directory.
            chunk_size: Bytes read from the upload per write.
            clock: Returns the current local time; used for file names.
        """
        self.directory = Path(directory)
        self.chunk_size = chunk_size
        self._clock = clock

    def ensure_directory(self) -> None:
        """Create the upload directory if it does not exist."""
        self.directory.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_filename(when: datetime) -> str:
        return f"{FILENAME_PREFIX}{when.strftime(TIMESTAMP_FORMAT)}{FILENAME_SUFFIX}"

    async def save(self, upload: UploadFile) -> StoredFile:
        """Stream an upload to disk under a timestamped name.

        A partially written file is removed before the error propagates.
        """
        created_at = self._clock()
        filename = self.generate_filename(created_at)
        path = self.directory / filename

        try:
            async with aiofiles.open(path, "wb") as f:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    await f.write(chunk)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                await aiofiles.os.remove(path)
            raise

        logger.debug("Upload written to disk", extra={"stored_filename": filename, "path": str(path)})
        return StoredFile(filename=filename, path=path, created_at=created_at)

    async def read_bytes(self, stored: StoredFile) -> bytes:
        async with aiofiles.open(stored.path, "rb") as f:
            return await f.read()

    async def delete(self, stored: StoredFile) -> None:
        """Remove a stored file. A file that is already gone is not an error."""
        with contextlib.suppress(FileNotFoundError):
            await aiofiles.os.remove(stored.path)
        logger.debug("Stored file removed", extra={"stored_filename": stored.filename})

    async def list_files(self) -> list[str]:
        """Return the names of all entries in the upload directory, sorted.

        No filtering is applied, so non-CSV artifacts are listed too.

        Raises:
            OSError: The directory is missing or unreadable.
        """
        return sorted(await aiofiles.os.listdir(self.directory))
