"""
Upload API router.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile, status

from contact_upload.contacts.csv_parser import CSVParser
from contact_upload.uploads.schemas import (
    ErrorResponse,
    InvalidRowsErrorResponse,
    UploadedFilesResponse,
    UploadResponse,
)
from contact_upload.uploads.service import UploadService
from contact_upload.uploads.store import UploadStore

router = APIRouter(tags=["uploads"])


def get_upload_store(request: Request) -> UploadStore:
    """Dependency returning the store created by the application factory."""
    return request.app.state.upload_store


def get_csv_parser(request: Request) -> CSVParser:
    return request.app.state.csv_parser


def get_upload_service(
    store: Annotated[UploadStore, Depends(get_upload_store)],
    parser: Annotated[CSVParser, Depends(get_csv_parser)],
) -> UploadService:
    """Dependency for upload service."""
    return UploadService(store=store, parser=parser)


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload contacts CSV",
    description=(
        "Upload a CSV file of contacts. Every row needs non-empty 'name' and "
        "'phone' values; phones may contain digits, hyphens and spaces only."
    ),
    responses={
        400: {"model": InvalidRowsErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_contacts_csv(
    service: Annotated[UploadService, Depends(get_upload_service)],
    file: Annotated[UploadFile | None, File(description="CSV file with contacts")] = None,
) -> UploadResponse:
    """Store an uploaded contacts CSV if every row is valid.

    Rejected files are removed from the upload directory before the
    error response is sent.
    """
    return await service.upload(file)


@router.get(
    "/uploaded-files",
    response_model=UploadedFilesResponse,
    summary="List uploaded files",
    responses={500: {"model": ErrorResponse}},
)
async def list_uploaded_files(
    service: Annotated[UploadService, Depends(get_upload_service)],
) -> UploadedFilesResponse:
    return await service.list_files()
