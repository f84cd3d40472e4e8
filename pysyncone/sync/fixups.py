"""Adjustments the game expects in a save that came from another machine."""

import json
import logging
from pathlib import Path
from typing import Any, Callable

from ..exceptions import SynconeFileError
from .guard import save_instance_dirs

logger = logging.getLogger(__name__)

GAME_FILE_NAME = "Game.json"
ORGANISATION_FIELD = "OrganisationName"
SYNCED_SUFFIX = " (Synced)"

PLAYERS_DIR_NAME = "Players"
PLAYER_FILE_NAME = "Player.json"
HAS_EXITED_FIELD = "HasExitedRV"


def _update_json(path: Path, update: Callable[[dict[str, Any]], bool]) -> bool:
    """Apply ``update`` to a JSON object file, writing only if it changed.

    Missing files and files that are not JSON objects are skipped.

    Raises:
        SynconeFileError: If an existing file cannot be read or written
    """
    if not path.is_file():
        return False
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SynconeFileError(f"Failed to read {path}: {e}") from e

    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning(f"Not adjusting {path}: invalid JSON ({e})")
        return False
    if not isinstance(data, dict) or not update(data):
        return False

    try:
        path.write_text(json.dumps(data, indent=4), encoding="utf-8")
    except OSError as e:
        raise SynconeFileError(f"Failed to write {path}: {e}") from e
    logger.debug(f"Adjusted {path}")
    return True


def _stamp_organisation(data: dict[str, Any]) -> bool:
    name = data.get(ORGANISATION_FIELD)
    if not isinstance(name, str) or name.endswith(SYNCED_SUFFIX):
        return False
    data[ORGANISATION_FIELD] = name + SYNCED_SUFFIX
    return True


def _mark_exited(data: dict[str, Any]) -> bool:
    if data.get(HAS_EXITED_FIELD) is True:
        return False
    data[HAS_EXITED_FIELD] = True
    return True


def stamp_organisation_name(save_root: Path) -> int:
    """Mark every save instance's organisation name as synced.

    Returns:
        Number of files changed
    """
    changed = 0
    for instance in save_instance_dirs(save_root):
        if _update_json(instance / GAME_FILE_NAME, _stamp_organisation):
            changed += 1
    return changed


def mark_players_exited(save_root: Path) -> int:
    """Set the has-exited flag on every player of every save instance.

    Returns:
        Number of files changed
    """
    changed = 0
    for instance in save_instance_dirs(save_root):
        players = instance / PLAYERS_DIR_NAME
        if not players.is_dir():
            continue
        for player_dir in sorted(players.iterdir()):
            if _update_json(player_dir / PLAYER_FILE_NAME, _mark_exited):
                changed += 1
    return changed


def apply_pull_fixups(save_root: Path) -> None:
    """Run all adjustments on a freshly pulled save folder."""
    exited = mark_players_exited(save_root)
    stamped = stamp_organisation_name(save_root)
    logger.debug(
        f"Post-pull fix-ups on {save_root}: {exited} players, {stamped} organisations"
    )
