# clumsy_loader/core/api.py
from __future__ import annotations
import logging
import urllib.parse
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from .errors import DecodeError, TransportError
from .http import SESSION
from .models import Backup, Server
from .utils import media_type, snippet

logger = logging.getLogger(__name__)

T = TypeVar("T")

def _seg(value: str) -> str:
    return urllib.parse.quote(value, safe="")

def _field(attrs: Dict[str, Any], key: str, kind: type) -> Any:
    if key not in attrs:
        raise DecodeError(f"Missing field '{key}' in panel response")
    value = attrs[key]
    # bool is an int subclass; a boolean byte count is still malformed
    if not isinstance(value, kind) or isinstance(value, bool):
        raise DecodeError(f"Field '{key}' should be {kind.__name__}, got {type(value).__name__}")
    return value

def _attributes(obj: Any) -> Dict[str, Any]:
    if not isinstance(obj, dict) or not isinstance(obj.get("attributes"), dict):
        raise DecodeError("Expected an object with an 'attributes' object")
    return obj["attributes"]

def parse_server(obj: Any) -> Server:
    a = _attributes(obj)
    return Server(
        identifier=_field(a, "identifier", str),
        uuid=_field(a, "uuid", str),
        name=_field(a, "name", str),
    )

def parse_backup(obj: Any) -> Backup:
    a = _attributes(obj)
    size = _field(a, "bytes", int)
    if size < 0:
        raise DecodeError(f"Field 'bytes' must not be negative ({size})")
    return Backup(
        uuid=_field(a, "uuid", str),
        name=_field(a, "name", str),
        created_at=_field(a, "created_at", str),
        bytes=size,
    )

def parse_collection(payload: Any, parse: Callable[[Any], T]) -> List[T]:
    """Unwrap {"data": [{"attributes": {...}}, ...]} in response order."""
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
        raise DecodeError("Expected a collection object with a 'data' list")
    return [parse(item) for item in payload["data"]]

def parse_download_url(payload: Any) -> str:
    return _field(_attributes(payload), "url", str)


class PanelClient:
    """Authenticated GETs against the panel's client API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.session = session or SESSION
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    def _get_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("GET %s", path)
        try:
            r = self.session.get(url, headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"Request to {path} failed: {e}") from e

        ctype = media_type(r.headers.get("Content-Type"))
        if ctype == "text/html":
            # Panels answer auth failures and outages with an HTML page
            raise DecodeError(
                f"Panel returned an HTML page for {path} (HTTP {r.status_code}): {snippet(r.text)}",
                status=r.status_code,
            )
        if r.status_code >= 400:
            # an error object is still a body of the wrong shape
            raise DecodeError(
                f"Panel answered HTTP {r.status_code} for {path}: {snippet(r.text)}",
                status=r.status_code,
            )
        try:
            return r.json()
        except ValueError as e:
            raise DecodeError(f"Response for {path} is not valid JSON: {snippet(r.text)}") from e

    def list_servers(self) -> List[Server]:
        servers = parse_collection(self._get_json("/api/client"), parse_server)
        logger.debug("Fetched %d server(s)", len(servers))
        return servers

    def list_backups(self, server_uuid: str) -> List[Backup]:
        path = f"/api/client/servers/{_seg(server_uuid)}/backups"
        backups = parse_collection(self._get_json(path), parse_backup)
        logger.debug("Fetched %d backup(s) for server %s", len(backups), server_uuid)
        return backups

    def get_download_link(self, server_identifier: str, backup_uuid: str) -> str:
        path = (
            f"/api/client/servers/{_seg(server_identifier)}"
            f"/backups/{_seg(backup_uuid)}/download"
        )
        url = parse_download_url(self._get_json(path))
        logger.debug("Got signed download link for backup %s", backup_uuid)
        return url
