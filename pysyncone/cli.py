"""CLI interface for Syncone."""

import logging
from pathlib import Path
from typing import Any, Callable, Optional

import click

from .config import ConfigStore, SyncConfig
from .exceptions import ProgressRegressionError, SynconeError
from .output import OutputFormatter
from .sync import SyncTarget, get_status, pull, push
from .utils import mask_secret

logger = logging.getLogger(__name__)

TARGET_CHOICE = click.Choice([t.value for t in SyncTarget], case_sensitive=False)


def _load_config(ctx: Any) -> SyncConfig:
    """Load the config or exit with an error message."""
    out: OutputFormatter = ctx.obj["out"]
    store: ConfigStore = ctx.obj["store"]
    try:
        return store.load()
    except SynconeError as e:
        out.error(str(e))
        raise click.exceptions.Exit(1) from e


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="SYNCONE_CONFIG",
    help="Config file (default: ~/Syncone/syncone_config.json)",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--json", is_flag=True, help="Output in JSON format")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose/debug logging output",
)
@click.version_option(package_name="pysyncone")
@click.pass_context
def main(
    ctx: Any,
    config_path: Optional[Path],
    quiet: bool,
    json: bool,
    verbose: bool,
) -> None:
    """Syncone - keep your game save and mods folders in sync."""
    ctx.ensure_object(dict)
    ctx.obj["store"] = ConfigStore(config_path)
    ctx.obj["out"] = OutputFormatter(json_output=json, quiet=quiet)

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("pysyncone").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)


@main.group()
def config() -> None:
    """Show or change the sync settings."""


@config.command("show")
@click.pass_context
def config_show(ctx: Any) -> None:
    """Show the current settings (the key is masked)."""
    out: OutputFormatter = ctx.obj["out"]
    cfg = _load_config(ctx)

    data = cfg.to_dict()
    data["supabase_key"] = mask_secret(cfg.supabase_key)

    if out.json_output:
        out.print_json(data)
        return

    out.info(f"Config file: {ctx.obj['store'].path}")
    for key, value in data.items():
        out.print(f"{key}: {value if value is not None else '(not set)'}")
    mode = "Supabase Storage" if cfg.uses_object_storage else "mirror folder"
    out.print(f"mode: {mode}")


@config.command("set")
@click.option("--save-path", help="Game save folder")
@click.option("--mods-path", help="Game mods folder")
@click.option("--cloud-path", help="Mirror folder (e.g. a shared drive)")
@click.option("--supabase-url", help="Supabase project URL")
@click.option("--supabase-key", help="Supabase API key")
@click.option("--bucket-name", help="Supabase Storage bucket")
@click.pass_context
def config_set(ctx: Any, **values: Optional[str]) -> None:
    """Change settings. Options left out keep their value; '' clears one.

    Examples:
        syncone config set --save-path ~/Saves/123 --mods-path ~/Game/Mods
        syncone config set --cloud-path /mnt/drive/Syncone
        syncone config set --supabase-url https://x.supabase.co \\
            --supabase-key KEY --bucket-name saves
    """
    out: OutputFormatter = ctx.obj["out"]
    store: ConfigStore = ctx.obj["store"]
    cfg = _load_config(ctx)

    data = cfg.to_dict()
    for key, value in values.items():
        if value is not None:
            data[key] = value or None

    try:
        store.save(SyncConfig.from_dict(data))
    except SynconeError as e:
        out.error(str(e))
        ctx.exit(1)
    out.success(f"Saved settings to {store.path}")


@main.command()
@click.pass_context
def status(ctx: Any) -> None:
    """Show which side is newer for the save and mods folders."""
    out: OutputFormatter = ctx.obj["out"]
    cfg = _load_config(ctx)
    out.status_table(get_status(cfg))


def _run_transfer(
    ctx: Any,
    operation: Callable[..., str],
    target: str,
    force: bool,
    yes: bool,
) -> None:
    """Run a pull or push, asking before overriding a progress warning."""
    out: OutputFormatter = ctx.obj["out"]
    cfg = _load_config(ctx)
    sync_target = SyncTarget.from_string(target)

    try:
        try:
            message = operation(cfg, sync_target, force=force)
        except ProgressRegressionError as e:
            if out.json_output and not yes:
                out.result(False, str(e))
                ctx.exit(1)
            out.warning(e.warning_text)
            if not (yes or click.confirm("Proceed anyway?", default=False)):
                out.warning("Cancelled.")
                ctx.exit(1)
            message = operation(cfg, sync_target, force=True)
    except SynconeError as e:
        if out.json_output:
            out.result(False, str(e))
        else:
            out.error(str(e))
        ctx.exit(1)

    out.result(True, message)


@main.command("pull")
@click.option(
    "--target", "-t", type=TARGET_CHOICE, default="both", help="Folders to fetch"
)
@click.option("--force", "-f", is_flag=True, help="Skip the progress check")
@click.option("--yes", "-y", is_flag=True, help="Proceed without asking on warnings")
@click.pass_context
def pull_command(ctx: Any, target: str, force: bool, yes: bool) -> None:
    """Fetch the cloud copy if it is newer than the local folders."""
    _run_transfer(ctx, pull, target, force, yes)


@main.command("push")
@click.option(
    "--target", "-t", type=TARGET_CHOICE, default="both", help="Folders to upload"
)
@click.option("--force", "-f", is_flag=True, help="Skip the progress check")
@click.option("--yes", "-y", is_flag=True, help="Proceed without asking on warnings")
@click.pass_context
def push_command(ctx: Any, target: str, force: bool, yes: bool) -> None:
    """Upload the local folders to the cloud."""
    _run_transfer(ctx, push, target, force, yes)


if __name__ == "__main__":
    main()
