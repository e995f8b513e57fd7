"""
Pydantic schemas for the HTTP API.
"""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel


class AddUserRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class AddUserResponse(BaseModel):
    message: str
    id: str


class UploadResponse(BaseModel):
    message: str
    fileName: str
    fileUrl: str


class AddDataRequest(BaseModel):
    # Presence and shape are checked by the record adapter so that missing
    # fields are reported as invalid input rather than a schema error.
    table_name: Optional[Any] = None
    data: Optional[Any] = None


class AddDataResponse(BaseModel):
    message: str
    table_name: str
    id: str


class UpdateDataRequest(BaseModel):
    data: Optional[Any] = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    kind: Literal["invalid_input", "not_found", "store_failure", "error"]
    message: str
    error: Optional[str] = None
