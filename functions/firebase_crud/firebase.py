"""
Firebase Admin app initialization.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import firebase_admin
from firebase_admin import credentials

from firebase_crud.config import Settings, get_settings

logger = logging.getLogger(__name__)

_firebase_app: Optional[firebase_admin.App] = None


def _load_credential(service_account: Optional[str]) -> credentials.Base:
    if not service_account:
        return credentials.ApplicationDefault()
    if service_account.lstrip().startswith("{"):
        return credentials.Certificate(json.loads(service_account))
    if not Path(service_account).exists():
        raise RuntimeError(f"Service account not found: {service_account}")
    return credentials.Certificate(service_account)


def _app_options(settings: Settings) -> dict:
    options = {
        "projectId": settings.project_id,
        "storageBucket": settings.storage_bucket,
        "databaseURL": settings.database_url,
    }
    return {key: value for key, value in options.items() if value}


def get_firebase_app() -> firebase_admin.App:
    """Get or initialize the Firebase Admin app."""
    global _firebase_app

    if _firebase_app is not None:
        return _firebase_app

    try:
        _firebase_app = firebase_admin.get_app()
        return _firebase_app
    except ValueError:
        pass

    settings = get_settings()
    cred = _load_credential(settings.service_account)
    _firebase_app = firebase_admin.initialize_app(cred, _app_options(settings))
    logger.info("Firebase Admin initialized")
    return _firebase_app
