"""
HTTP routes for the backend API.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import PlainTextResponse

from firebase_crud.config import Settings, get_settings
from firebase_crud.dependencies import (
    get_document_store,
    get_record_adapter,
    get_storage_client,
)
from firebase_crud.documents import DocumentStore, add_user, list_users
from firebase_crud.errors import InvalidInputError, translate_store_errors
from firebase_crud.records import RecordAdapter
from firebase_crud.schemas import (
    AddDataRequest,
    AddDataResponse,
    AddUserRequest,
    AddUserResponse,
    ErrorResponse,
    MessageResponse,
    UpdateDataRequest,
    UploadResponse,
)
from firebase_crud.storage import StorageClient, store_upload

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("/", response_class=PlainTextResponse)
def root():
    return "Hello World! FastAPI with Firebase is ready."


# --- Document database -------------------------------------------------------


@router.post("/add-user", response_model=AddUserResponse, responses=ERROR_RESPONSES)
def add_user_route(
    payload: AddUserRequest, documents: DocumentStore = Depends(get_document_store)
):
    with translate_store_errors("Failed to add user"):
        user_id = add_user(documents, payload.name, payload.email)
    return AddUserResponse(message="User added successfully", id=user_id)


@router.get("/users", responses=ERROR_RESPONSES)
def users_route(documents: DocumentStore = Depends(get_document_store)):
    with translate_store_errors("Failed to get data"):
        return list_users(documents)


# --- Blob storage ------------------------------------------------------------


@router.post("/upload", response_model=UploadResponse, responses=ERROR_RESPONSES)
async def upload_route(
    gambar: Optional[UploadFile] = File(None),
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    if gambar is None or not gambar.filename:
        raise InvalidInputError("No file uploaded!")

    data = await gambar.read()
    with translate_store_errors("Failed to upload file"):
        file_name, url = await asyncio.to_thread(
            store_upload,
            storage,
            gambar.filename,
            data,
            gambar.content_type,
            settings.upload_folder,
            settings.signed_url_expires_at,
        )
    return UploadResponse(
        message="File uploaded successfully!", fileName=file_name, fileUrl=url
    )


# --- Realtime database -------------------------------------------------------


@router.post("/add-data", response_model=AddDataResponse, responses=ERROR_RESPONSES)
async def add_data(
    payload: AddDataRequest, records: RecordAdapter = Depends(get_record_adapter)
):
    record_id = await records.create(payload.table_name, payload.data)
    return AddDataResponse(
        message="Data added successfully",
        table_name=payload.table_name,
        id=record_id,
    )


@router.get("/get-data/{table_name}", responses=ERROR_RESPONSES)
async def get_data(
    table_name: str, records: RecordAdapter = Depends(get_record_adapter)
) -> Any:
    return await records.list(table_name)


@router.get("/get-data-by-id/{table_name}/{id}", responses=ERROR_RESPONSES)
async def get_data_by_id(
    table_name: str, id: str, records: RecordAdapter = Depends(get_record_adapter)
) -> Any:
    return await records.read_one(table_name, id)


@router.put(
    "/update-data/{table_name}/{id}",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
)
async def update_data(
    table_name: str,
    id: str,
    payload: UpdateDataRequest,
    records: RecordAdapter = Depends(get_record_adapter),
):
    await records.update(table_name, id, payload.data)
    return MessageResponse(message="Data updated successfully")


@router.delete(
    "/delete-data/{table_name}/{id}",
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
)
async def delete_data(
    table_name: str, id: str, records: RecordAdapter = Depends(get_record_adapter)
):
    await records.delete(table_name, id)
    return MessageResponse(message="Data deleted successfully")
