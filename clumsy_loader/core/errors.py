# clumsy_loader/core/errors.py
from __future__ import annotations
from typing import Optional


class ClumsyLoaderError(Exception):
    """Base class for every fatal error the client reports."""


class TransportError(ClumsyLoaderError):
    """Connection, TLS or HTTP-level failure talking to the panel."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class DecodeError(ClumsyLoaderError):
    """Response body is not the JSON shape we asked for."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class DownloadRejected(ClumsyLoaderError):
    """The signed link served an HTML page instead of the archive."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DownloadIOError(ClumsyLoaderError):
    """Creating or writing the local archive failed."""

    def __init__(self, path, cause: OSError):
        super().__init__(f"Cannot write {path}: {cause}")
        self.path = path
        self.cause = cause
