"""
Dependency wiring for the FastAPI app.

Store handles are created lazily, once per process, and shared by every
request afterwards.
"""

from __future__ import annotations

import logging

from firebase_admin import firestore

from firebase_crud.config import get_settings
from firebase_crud.documents import (
    DocumentStore,
    FirestoreDocumentStore,
    InMemoryDocumentStore,
)
from firebase_crud.firebase import get_firebase_app
from firebase_crud.records import RecordAdapter
from firebase_crud.storage import (
    FirebaseStorageClient,
    InMemoryStorageClient,
    S3StorageClient,
    StorageClient,
)
from firebase_crud.tree_store import FirebaseTreeStore, InMemoryTreeStore, TreeStore

logger = logging.getLogger(__name__)

_tree_store: TreeStore | None = None
_document_store: DocumentStore | None = None
_storage_client: StorageClient | None = None


def get_tree_store() -> TreeStore:
    global _tree_store
    if _tree_store:
        return _tree_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _tree_store = InMemoryTreeStore()
    else:
        _tree_store = FirebaseTreeStore(
            app=get_firebase_app(), url=settings.database_url
        )
    logger.info("Tree store: %s", _tree_store.__class__.__name__)
    return _tree_store


def get_record_adapter() -> RecordAdapter:
    return RecordAdapter(get_tree_store())


def get_document_store() -> DocumentStore:
    global _document_store
    if _document_store:
        return _document_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _document_store = InMemoryDocumentStore()
    else:
        _document_store = FirestoreDocumentStore(
            client=firestore.client(app=get_firebase_app())
        )
    logger.info("Document store: %s", _document_store.__class__.__name__)
    return _document_store


def get_storage_client() -> StorageClient:
    global _storage_client
    if _storage_client:
        return _storage_client

    settings = get_settings()
    if settings.use_in_memory_backends:
        _storage_client = InMemoryStorageClient()
    elif settings.storage_backend == "s3":
        if not settings.s3_bucket:
            raise RuntimeError("S3_BUCKET is required when STORAGE_BACKEND=s3")
        _storage_client = S3StorageClient(
            bucket=settings.s3_bucket,
            region=settings.s3_region or "",
            endpoint=settings.s3_endpoint or "",
            access_key_id=settings.aws_access_key_id or "",
            secret_access_key=settings.aws_secret_access_key or "",
        )
    else:
        _storage_client = FirebaseStorageClient(
            app=get_firebase_app(), bucket_name=settings.storage_bucket
        )
    logger.info("Storage client: %s", _storage_client.__class__.__name__)
    return _storage_client


def reset_dependencies() -> None:
    """Drop cached store handles (useful in tests)."""
    global _tree_store, _document_store, _storage_client
    _tree_store = None
    _document_store = None
    _storage_client = None
