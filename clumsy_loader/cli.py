# clumsy_loader/cli.py
from __future__ import annotations
import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.markup import escape

from .core import (
    ClumsyLoaderError, FlowOutcome, PanelClient, load_cfg, save_cfg, setup_logging,
)
from .core.http import make_session
from .tui import clear_screen
from .ui import console, run_backup_flow

logger = logging.getLogger(__name__)

def parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="ClumsyLoader: download a server backup from the panel")
    ap.add_argument("--panel-url", help="Panel base URL (default from config)")
    ap.add_argument("--out", help="Directory for the downloaded archive")
    ap.add_argument("--timeout", type=float, help="Per-request timeout in seconds (default: none)")
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    ap.add_argument("--save-defaults", action="store_true",
                    help="Remember --panel-url/--out/--timeout/--verbose in the config file")
    return ap.parse_args(argv)

def effective_cfg(args, cfg: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(cfg)
    if args.panel_url:
        out["panel_url"] = args.panel_url
    if args.out:
        out["out_dir"] = args.out
    if args.timeout is not None:
        out["timeout"] = args.timeout
    if args.verbose:
        out["verbose"] = True
    return out

def ask_api_key() -> str:
    console.print("[bold blue]🔐 Enter your [bold cyan]ATBP Hosting[/] API key:[/]")
    try:
        key = console.input(password=True).strip()
    except EOFError:
        key = ""
    if not key:
        raise ClumsyLoaderError("No API key entered")
    return key

def run(cfg: Dict[str, Any]) -> FlowOutcome:
    api_key = ask_api_key()
    clear_screen(console)
    client = PanelClient(cfg["panel_url"], api_key, session=make_session(), timeout=cfg.get("timeout"))
    logger.debug("Using panel %s", client.base_url)
    return run_backup_flow(client, Path(cfg["out_dir"]), timeout=cfg.get("timeout"))

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = effective_cfg(args, load_cfg())
    setup_logging(verbose=bool(cfg.get("verbose")))
    if args.save_defaults:
        path = save_cfg(cfg)
        console.print(f"[dim]Saved defaults to {escape(str(path))}[/]")

    try:
        outcome = run(cfg)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user.[/]")
        return 130
    except (ClumsyLoaderError, OSError) as e:
        logger.debug("Fatal error", exc_info=True)
        console.print(f"[bold red]❌ Error:[/] {escape(str(e))}")
        try:
            console.input("[bold bright_black]🔚 Press Enter to exit...[/]")
        except EOFError:
            pass
        return 1

    logger.debug("Finished: %s", outcome.value)
    return 0
