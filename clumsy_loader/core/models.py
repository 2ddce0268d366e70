from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Server:
    identifier: str
    uuid: str
    name: str


@dataclass(frozen=True)
class Backup:
    uuid: str
    name: str
    created_at: str
    bytes: int

    @property
    def label(self) -> str:
        return f"{self.name} - {self.created_at}"


@dataclass(frozen=True)
class DownloadLink:
    url: str


@dataclass(frozen=True)
class DownloadResult:
    path: Path
    size: int
    expected: int

    @property
    def complete(self) -> bool:
        return self.size == self.expected
