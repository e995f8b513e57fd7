"""
Error taxonomy shared by the stores, the record adapter and the HTTP layer.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional


class CrudError(Exception):
    """Base class for outcomes surfaced to callers as kind + message."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self) -> dict:
        payload = {"kind": self.kind, "message": self.message}
        if self.detail is not None:
            payload["error"] = self.detail
        return payload


class InvalidInputError(CrudError):
    """A collection name, record id or body is missing or empty."""

    kind = "invalid_input"
    status_code = 400


class NotFoundError(CrudError):
    """No data exists at the resolved address."""

    kind = "not_found"
    status_code = 404


class StoreFailureError(CrudError):
    """The underlying store call failed; `detail` carries the store's message."""

    kind = "store_failure"
    status_code = 500


@contextmanager
def translate_store_errors(message: str) -> Iterator[None]:
    """
    Re-raise anything a store call throws as a StoreFailureError.

    Errors that are already part of the taxonomy pass through untouched. The
    original exception is chained so tracebacks keep the SDK's diagnostics.
    """
    try:
        yield
    except CrudError:
        raise
    except Exception as exc:
        raise StoreFailureError(message, str(exc)) from exc
