from __future__ import annotations
import math, re
from typing import Optional

ARCHIVE_SUFFIX = ".tar.gz"

def human_size(n: Optional[int]) -> str:
    if not n or n <= 0: return "?"
    units = ["B","KB","MB","GB","TB"]
    i = min(int(math.floor(math.log(n, 1024))), len(units) - 1)
    return f"{n/(1024**i):.2f} {units[i]}"

def safe_filename(name: str) -> str:
    cleaned = re.sub(r'[\\/*?:"<>|\x00-\x1f]+', "_", (name or "")).strip()
    # ".." and "." would still point outside/at the directory itself
    cleaned = cleaned.strip(".")
    return cleaned or "backup"

def backup_filename(backup_uuid: str) -> str:
    """Local archive name for a backup; derived from the uuid only."""
    return f"{safe_filename(backup_uuid)}{ARCHIVE_SUFFIX}"

def media_type(content_type: Optional[str]) -> str:
    """'text/html; charset=UTF-8' -> 'text/html'"""
    return (content_type or "").split(";", 1)[0].strip().lower()

def snippet(text: str, limit: int = 200) -> str:
    text = " ".join((text or "").split())
    return text if len(text) <= limit else text[:limit - 1] + "…"
