#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
UI layer for ClumsyLoader

- Server / backup pickers (keyboard menus)
- Status lines between menus
- Streaming download with a live progress bar
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional, Sequence

import requests
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn, DownloadColumn, Progress, SpinnerColumn, TextColumn,
    TimeRemainingColumn, TransferSpeedColumn,
)

from .core import (
    Backup,
    DownloadLink,
    DownloadResult,
    FlowOutcome,
    NavigationFlow,
    PanelClient,
    backup_filename,
    download_backup,
    human_size,
)
from .tui import Menu, section

console = Console()

# ────────────────────────── Menus & status ──────────────────────────
def choose(title: str, labels: Sequence[str]) -> Optional[int]:
    return Menu(console, title, labels).show()

def notify(message: str) -> None:
    console.print(f"[bold yellow]{escape(message)}[/]")

# ────────────────────────── Download ──────────────────────────
def download_with_progress(
    url: str,
    out_path: Path,
    expected_total: int,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> DownloadResult:
    with Progress(
        SpinnerColumn(style="green"),
        TextColumn("[bold]Downloading[/] {task.description}", justify="left"),
        BarColumn(complete_style="cyan", finished_style="blue"),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=False,
    ) as progress:
        task_id = progress.add_task(escape(out_path.name), total=expected_total or None)

        def on_progress(downloaded: int, total: int) -> None:
            progress.update(task_id, completed=downloaded)

        result = download_backup(
            url, out_path, expected_total,
            session=session, on_progress=on_progress, timeout=timeout,
        )
        # the panel's size is a hint; finish the bar on what actually arrived
        progress.update(task_id, total=result.size, completed=result.size)

    console.print("[bold green]✅ Download complete![/]")
    console.print(f"Saved to: [bold]{escape(str(result.path))}[/] ({human_size(result.size)})")
    if not result.complete:
        console.print(
            f"[yellow]Note:[/] panel reported {human_size(result.expected)}, "
            f"received {human_size(result.size)}."
        )
    return result

# ────────────────────────── Browse & download flow ──────────────────────────
def run_backup_flow(
    client: PanelClient,
    out_dir: Path,
    timeout: Optional[float] = None,
) -> FlowOutcome:
    """Pick a server, pick one of its backups, download it. One archive per run."""
    out_dir.mkdir(parents=True, exist_ok=True)

    def download(link: DownloadLink, backup: Backup) -> DownloadResult:
        out_path = out_dir / backup_filename(backup.uuid)
        section(
            console,
            "Download Ready",
            f"Backup: {escape(backup.label)}\nSaving to: {escape(str(out_path))}\n"
            f"Reported size: {human_size(backup.bytes)}\n\nPress Ctrl+C to cancel",
        )
        return download_with_progress(
            link.url, out_path, backup.bytes, session=client.session, timeout=timeout,
        )

    flow = NavigationFlow(api=client, choose=choose, notify=notify, download=download)
    return flow.run()
