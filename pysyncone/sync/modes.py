"""Sync targets: which managed folders an operation applies to."""

from enum import Enum


class SyncTarget(str, Enum):
    """Which part to sync: save only, mods only, or both."""

    SAVE = "save"
    MODS = "mods"
    BOTH = "both"

    @property
    def includes_save(self) -> bool:
        """Whether the save folder is affected."""
        return self in (SyncTarget.SAVE, SyncTarget.BOTH)

    @property
    def includes_mods(self) -> bool:
        """Whether the mods folder is affected."""
        return self in (SyncTarget.MODS, SyncTarget.BOTH)

    @property
    def sub_targets(self) -> list["SyncTarget"]:
        """Single-folder targets in processing order (save before mods)."""
        targets = []
        if self.includes_save:
            targets.append(SyncTarget.SAVE)
        if self.includes_mods:
            targets.append(SyncTarget.MODS)
        return targets

    @property
    def label(self) -> str:
        """Capitalized name used in messages ("Save", "Mods")."""
        return self.value.capitalize()

    @classmethod
    def from_string(cls, value: str) -> "SyncTarget":
        """Parse a target name, case-insensitively.

        Raises:
            ValueError: If the name is not a known target
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(
                f"Invalid sync target '{value}'. Valid targets: {valid}"
            ) from None
