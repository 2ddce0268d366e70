# clumsy_loader/core/config.py
from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

# ---- schema & defaults -------------------------------------------------------
SCHEMA_VERSION = 1
DEFAULT_PANEL_URL = "https://panel.atbphosting.com"
DEFAULT_CFG: Dict[str, Any] = {
    "schema": SCHEMA_VERSION,
    "panel_url": DEFAULT_PANEL_URL,
    "out_dir": ".",        # where <backup uuid>.tar.gz lands
    "timeout": None,       # seconds per request; None waits forever
    "verbose": False,
}
# Never persisted, even if someone hand-edits them in
SECRET_KEYS = ("api_key", "token")

# ---- locations ---------------------------------------------------------------
# Override with env vars:
#   CLUMSY_LOADER_CONFIG=<full path to config.json>
#   CLUMSY_LOADER_DIR=<directory to place config.json>
def _windows_roaming_dir() -> Path:
    return Path(os.environ.get("APPDATA", Path.home() / "AppData/Roaming"))

def _xdg_config_home() -> Path:
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

def config_dir() -> Path:
    env_dir = os.environ.get("CLUMSY_LOADER_DIR")
    if env_dir:
        return Path(env_dir).expanduser().resolve()
    if os.name == "nt":
        return (_windows_roaming_dir() / "ClumsyLoader").resolve()
    return (_xdg_config_home() / "clumsy_loader").resolve()

def config_path() -> Path:
    env_path = os.environ.get("CLUMSY_LOADER_CONFIG")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return config_dir() / "config.json"

# ---- load / save -------------------------------------------------------------
def _merge_defaults(cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = DEFAULT_CFG.copy()
    out.update(cfg or {})
    for k in SECRET_KEYS:
        out.pop(k, None)
    if "schema" not in out:
        out["schema"] = SCHEMA_VERSION
    return out

def load_cfg() -> Dict[str, Any]:
    p = config_path()
    if not p.exists():
        return DEFAULT_CFG.copy()
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        # Keep a .bad copy of a corrupt file and start fresh
        logger.warning("Ignoring unreadable config %s: %s", p, e)
        try:
            p.replace(p.with_suffix(".bad.json"))
        except OSError:
            pass
        return DEFAULT_CFG.copy()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config %s: top level is not an object", p)
        return DEFAULT_CFG.copy()
    return _merge_defaults(raw)

def save_cfg(cfg: Dict[str, Any]) -> Path:
    p = config_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(".tmp")
    data = _merge_defaults(cfg)
    tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    if p.exists():
        p.replace(p.with_suffix(".bak.json"))
    tmp.replace(p)
    logger.debug("Saved config to %s", p)
    return p
