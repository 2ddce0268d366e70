# clumsy_loader/core/__init__.py
from .api import PanelClient
from .config import config_path, load_cfg, save_cfg, DEFAULT_PANEL_URL
from .download import download_backup, stream_to_file
from .errors import (
    ClumsyLoaderError, DecodeError, DownloadIOError, DownloadRejected, TransportError,
)
from .flow import FlowOutcome, NavigationFlow, State
from .http import SESSION, make_session
from .models import Backup, DownloadLink, DownloadResult, Server
from .utils import backup_filename, human_size

__all__ = [
    "PanelClient",
    "config_path", "load_cfg", "save_cfg", "DEFAULT_PANEL_URL",
    "download_backup", "stream_to_file",
    "ClumsyLoaderError", "DecodeError", "DownloadIOError", "DownloadRejected", "TransportError",
    "FlowOutcome", "NavigationFlow", "State",
    "SESSION", "make_session",
    "Backup", "DownloadLink", "DownloadResult", "Server",
    "backup_filename", "human_size",
    "setup_logging",
]

# ---- simple logging toggle for the package ----
import logging

def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s"
    )
    # quiet down noisy deps
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
