"""Console output for the CLI."""

import json
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from .models import SyncStatus
from .utils import format_timestamp


class OutputFormatter:
    """Formats CLI output as rich text or JSON.

    In quiet mode only warnings and errors are printed. In JSON mode,
    informational messages are suppressed and results are emitted as JSON.
    """

    def __init__(
        self,
        json_output: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.json_output = json_output
        self.quiet = quiet
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    def print(self, message: str = "") -> None:
        if not self.quiet and not self.json_output:
            self.console.print(message)

    def info(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(message, style="cyan")

    def success(self, message: str) -> None:
        if not self.quiet and not self.json_output:
            self.console.print(message, style="green")

    def warning(self, message: str) -> None:
        self.err_console.print(message, style="yellow")

    def error(self, message: str) -> None:
        self.err_console.print(f"Error: {message}", style="bold red")

    def print_json(self, data: Any) -> None:
        """Print data as JSON regardless of quiet mode."""
        self.console.print_json(json.dumps(data))

    def result(self, ok: bool, message: str) -> None:
        """Print the outcome of a pull or push."""
        if self.json_output:
            self.print_json({"ok": ok, "message": message})
        elif ok:
            self.success(message)
        else:
            self.error(message)

    def status_table(self, status: SyncStatus) -> None:
        """Print a sync status as a table."""
        if self.json_output:
            self.print_json(status.to_dict())
            return

        table = Table(title=f"Sync status ({status.backend or 'not configured'})")
        table.add_column("Folder")
        table.add_column("Local path")
        table.add_column("Local")
        table.add_column("Cloud")
        table.add_column("Newer")

        rows = [
            (
                "Save",
                status.save_path_used,
                status.save_local_mtime,
                status.save_cloud_mtime,
                status.save_local_newer,
                status.save_cloud_newer,
            ),
            (
                "Mods",
                status.mods_path_used,
                status.mods_local_mtime,
                status.mods_cloud_mtime,
                status.mods_local_newer,
                status.mods_cloud_newer,
            ),
        ]
        for name, path, local, cloud, local_newer, cloud_newer in rows:
            if local_newer:
                newer = "[yellow]local[/yellow]"
            elif cloud_newer:
                newer = "[cyan]cloud[/cyan]"
            else:
                newer = "[green]in sync[/green]" if local is not None else "-"
            table.add_row(
                name,
                path or "-",
                format_timestamp(local),
                format_timestamp(cloud),
                newer,
            )

        self.console.print(table)
        if status.remote_error:
            self.warning(f"Remote unavailable: {status.remote_error}")
