# clumsy_loader/core/flow.py
"""
Server -> backup -> download navigation as an explicit state machine.

    SERVER_SELECT --pick--> BACKUP_SELECT --pick--> DOWNLOAD --> EXIT
      |     ^                   |
      |     +-- back / empty ---+
      +-- back / empty --> EXIT

The flow only knows its collaborators by the callables it is given, so
the transitions run the same against a terminal menu or a test script.
"""
from __future__ import annotations
import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence

from .models import Backup, DownloadLink, DownloadResult, Server

logger = logging.getLogger(__name__)

BACK_LABEL = "← Back"
SERVER_TITLE = "🎮 Select a Server"
BACKUP_TITLE = "📦 Select a Backup"
NO_SERVERS_MSG = "⚠️  No servers were found in your account."
NO_BACKUPS_MSG = "📦 No backups available for the selected server."

Chooser = Callable[[str, Sequence[str]], Optional[int]]
Notifier = Callable[[str], None]
Downloader = Callable[[DownloadLink, Backup], DownloadResult]


class PanelApi(Protocol):
    def list_servers(self) -> List[Server]: ...
    def list_backups(self, server_uuid: str) -> List[Backup]: ...
    def get_download_link(self, server_identifier: str, backup_uuid: str) -> str: ...


class State(enum.Enum):
    SERVER_SELECT = "server_select"
    BACKUP_SELECT = "backup_select"
    DOWNLOAD = "download"
    EXIT = "exit"


class FlowOutcome(enum.Enum):
    DOWNLOADED = "downloaded"
    NO_SERVERS = "no_servers"
    USER_EXIT = "user_exit"


def with_back(labels: Sequence[str]) -> List[str]:
    return [BACK_LABEL, *labels]

def server_labels(servers: Sequence[Server]) -> List[str]:
    return with_back([s.name for s in servers])

def backup_labels(backups: Sequence[Backup]) -> List[str]:
    return with_back([b.label for b in backups])

def picked(choice: Optional[int], count: int) -> Optional[int]:
    """Map a menu index to a real item index; None for back/cancel."""
    if choice is None or choice == 0:
        return None
    if not 1 <= choice <= count:
        raise IndexError(f"Menu returned {choice} for {count} item(s)")
    return choice - 1


@dataclass
class NavigationFlow:
    api: PanelApi
    choose: Chooser
    notify: Notifier
    download: Downloader
    state: State = State.SERVER_SELECT
    outcome: Optional[FlowOutcome] = None
    server: Optional[Server] = None
    backup: Optional[Backup] = None
    result: Optional[DownloadResult] = None
    history: List[State] = field(default_factory=list)

    def _go(self, state: State, outcome: Optional[FlowOutcome] = None) -> None:
        logger.debug("flow: %s -> %s", self.state.name, state.name)
        self.history.append(self.state)
        self.state = state
        if outcome is not None:
            self.outcome = outcome

    def _server_select(self) -> None:
        self.server = self.backup = None
        servers = self.api.list_servers()
        if not servers:
            self.notify(NO_SERVERS_MSG)
            self._go(State.EXIT, FlowOutcome.NO_SERVERS)
            return
        i = picked(self.choose(SERVER_TITLE, server_labels(servers)), len(servers))
        if i is None:
            self._go(State.EXIT, FlowOutcome.USER_EXIT)
            return
        self.server = servers[i]
        self._go(State.BACKUP_SELECT)

    def _backup_select(self) -> None:
        if self.server is None:
            raise RuntimeError("No server chosen before backup selection")
        backups = self.api.list_backups(self.server.uuid)
        if not backups:
            self.notify(NO_BACKUPS_MSG)
            self._go(State.SERVER_SELECT)
            return
        i = picked(self.choose(BACKUP_TITLE, backup_labels(backups)), len(backups))
        if i is None:
            self._go(State.SERVER_SELECT)
            return
        self.backup = backups[i]
        self._go(State.DOWNLOAD)

    def _download(self) -> None:
        if self.server is None or self.backup is None:
            raise RuntimeError("No backup chosen before download")
        link = DownloadLink(self.api.get_download_link(self.server.identifier, self.backup.uuid))
        self.result = self.download(link, self.backup)
        # one archive per run
        self._go(State.EXIT, FlowOutcome.DOWNLOADED)

    def step(self) -> State:
        handler = {
            State.SERVER_SELECT: self._server_select,
            State.BACKUP_SELECT: self._backup_select,
            State.DOWNLOAD: self._download,
        }.get(self.state)
        if handler is None:
            raise RuntimeError("Flow already finished")
        handler()
        return self.state

    def run(self) -> FlowOutcome:
        while self.state is not State.EXIT:
            self.step()
        if self.outcome is None:
            raise RuntimeError("Flow exited without an outcome")
        return self.outcome
