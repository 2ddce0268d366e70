# clumsy_loader/core/download.py
from __future__ import annotations
from pathlib import Path
from typing import Callable, Iterable, Optional
import logging

import requests

from .errors import DownloadIOError, DownloadRejected, TransportError
from .http import SESSION
from .models import DownloadResult
from .utils import media_type

logger = logging.getLogger(__name__)

ProgressCB = Callable[[int, int], None]  # (downloaded_bytes, expected_total)

def stream_to_file(
    chunks: Iterable[bytes],
    out_path: Path,
    expected_total: int,
    on_progress: Optional[ProgressCB] = None,
) -> DownloadResult:
    """
    Write a lazy sequence of byte chunks to out_path.
    - The file is created (or truncated) before the first chunk is pulled
    - on_progress(downloaded, expected_total) fires after every chunk
    - A partial file stays on disk if the stream or the disk fails
    """
    downloaded = 0
    try:
        f = open(out_path, "wb")
    except OSError as e:
        raise DownloadIOError(out_path, e) from e

    with f:
        it = iter(chunks)
        while True:
            try:
                chunk = next(it)
            except StopIteration:
                break
            except requests.RequestException as e:
                raise TransportError(f"Download stream broke after {downloaded} bytes: {e}") from e
            if not chunk:
                continue
            try:
                f.write(chunk)
            except OSError as e:
                raise DownloadIOError(out_path, e) from e
            downloaded += len(chunk)
            if on_progress:
                on_progress(downloaded, expected_total)

    if downloaded != expected_total:
        # Panel sizes are approximate; report, don't fail
        logger.warning(
            "Downloaded %d bytes but the panel reported %d for %s",
            downloaded, expected_total, out_path.name,
        )
    logger.debug("Download finished: %s (%d bytes)", out_path, downloaded)
    return DownloadResult(path=out_path, size=downloaded, expected=expected_total)

def download_backup(
    url: str,
    out_path: Path,
    expected_total: int,
    session: Optional[requests.Session] = None,
    on_progress: Optional[ProgressCB] = None,
    chunk_size: int = 128 * 1024,
    timeout: Optional[float] = None,
) -> DownloadResult:
    """
    Fetch a signed backup link into out_path. The link carries its own
    authorization, so no extra headers are sent. An HTML answer means the
    link resolved to an error page: DownloadRejected, nothing written.
    """
    session = session or SESSION
    logger.debug("Starting download -> %s (expected %d bytes)", out_path, expected_total)
    try:
        r = session.get(url, stream=True, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(f"Download request failed: {e}") from e

    with r:
        if media_type(r.headers.get("Content-Type")) == "text/html":
            try:
                message = r.text
            except requests.RequestException as e:
                raise TransportError(f"Reading the rejection page failed: {e}") from e
            raise DownloadRejected(message)
        if r.status_code >= 400:
            raise TransportError(f"Download answered HTTP {r.status_code}", status=r.status_code)
        return stream_to_file(
            r.iter_content(chunk_size=chunk_size), out_path, expected_total, on_progress
        )
