"""Configuration handling for git-worktree-keeper

Settings come from three layers: the persisted config file, flags given on the
command line, and negation flags (``--no-open`` and friends). ``merge`` folds
them left to right onto an immutable base; a negation always wins.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Optional

from git_worktree_keeper.exceptions import ConflictingFlagsError


def _validate_bools(instance) -> None:
    for f in fields(instance):
        value = getattr(instance, f.name)
        if not isinstance(value, bool):
            raise ValueError(f"{f.name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class AddSettings:
    """Defaults for ``gw add``."""

    open: bool = False
    sync: bool = False
    sync_ignored: bool = False

    def __post_init__(self):
        _validate_bools(self)


@dataclass(frozen=True)
class CloseSettings:
    """Defaults for ``gw close``."""

    force: bool = False

    def __post_init__(self):
        _validate_bools(self)


@dataclass(frozen=True)
class RmSettings:
    """Defaults for ``gw rm``."""

    force: bool = False
    branch: bool = False

    def __post_init__(self):
        _validate_bools(self)


@dataclass(frozen=True)
class Config:
    """Effective configuration for one command invocation."""

    add: AddSettings = field(default_factory=AddSettings)
    close: CloseSettings = field(default_factory=CloseSettings)
    rm: RmSettings = field(default_factory=RmSettings)
    editor: str = ""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not isinstance(self.editor, str):
            raise ValueError(f"editor must be a string, got {self.editor!r}")

    @property
    def editor_command(self) -> str:
        """Editor to launch after ``add``; empty unless ``add.open`` is on."""
        if not self.add.open:
            return ""
        return self.editor

    def to_dict(self) -> dict:
        """Convert config to the persisted document layout."""
        return {
            "add": {
                "open": self.add.open,
                "sync": self.add.sync,
                "sync_ignored": self.add.sync_ignored,
            },
            "close": {"force": self.close.force},
            "rm": {"force": self.rm.force, "branch": self.rm.branch},
            "editor": self.editor,
        }

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from a persisted document, ignoring unknown keys."""
        if not isinstance(config_dict, dict):
            raise ValueError("configuration must be a mapping")

        def section(name: str, settings_cls):
            raw = config_dict.get(name) or {}
            if not isinstance(raw, dict):
                raise ValueError(f"{name} must be a mapping")
            known = {f.name for f in fields(settings_cls)}
            return settings_cls(**{k: v for k, v in raw.items() if k in known})

        editor = config_dict.get("editor")
        return cls(
            add=section("add", AddSettings),
            close=section("close", CloseSettings),
            rm=section("rm", RmSettings),
            editor="" if editor is None else editor,
        )


@dataclass(frozen=True)
class FlagOverrides:
    """Positive flags from the command line; None means "not supplied"."""

    open: Optional[bool] = None
    sync: Optional[bool] = None
    sync_ignored: Optional[bool] = None
    close_force: Optional[bool] = None
    rm_force: Optional[bool] = None
    rm_branch: Optional[bool] = None
    editor: Optional[str] = None


@dataclass(frozen=True)
class NegationFlags:
    """Negation flags from the command line; each forces its setting to False."""

    no_open: bool = False
    no_sync: bool = False
    no_sync_ignored: bool = False
    close_no_force: bool = False
    rm_no_force: bool = False
    rm_no_branch: bool = False


# (section, setting, positive flag field, negation flag field, flag names for messages)
_BOOL_SETTINGS = (
    ("add", "open", "open", "no_open", ("--open", "--no-open")),
    ("add", "sync", "sync", "no_sync", ("--sync", "--no-sync")),
    ("add", "sync_ignored", "sync_ignored", "no_sync_ignored",
     ("--sync-ignored", "--no-sync-ignored")),
    ("close", "force", "close_force", "close_no_force", ("--yes", "--no-yes")),
    ("rm", "force", "rm_force", "rm_no_force", ("--force/--yes", "--no-force/--no-yes")),
    ("rm", "branch", "rm_branch", "rm_no_branch", ("--branch", "--no-branch")),
)


def check_flag_conflicts(flags: FlagOverrides, negations: NegationFlags) -> None:
    """Reject invocations that pass a flag together with its negation.

    Raises:
        ConflictingFlagsError: if any positive flag is True while its negation is set
    """
    conflicts = [
        names
        for _, _, flag_name, negation_name, names in _BOOL_SETTINGS
        if getattr(flags, flag_name) is True and getattr(negations, negation_name)
    ]
    if conflicts:
        raise ConflictingFlagsError(conflicts)


def merge(base: Config, flags: FlagOverrides, negations: NegationFlags) -> Config:
    """Combine persisted defaults, explicit flags and negation flags.

    Precedence per setting is negation > explicit flag > base. An empty editor
    flag counts as not supplied.
    """
    sections = {"add": base.add, "close": base.close, "rm": base.rm}

    for section_name, setting, flag_name, negation_name, _ in _BOOL_SETTINGS:
        flag_value = getattr(flags, flag_name)
        if flag_value is not None:
            sections[section_name] = replace(sections[section_name], **{setting: flag_value})
        if getattr(negations, negation_name):
            sections[section_name] = replace(sections[section_name], **{setting: False})

    editor = base.editor
    if flags.editor:
        editor = flags.editor

    return Config(add=sections["add"], close=sections["close"], rm=sections["rm"], editor=editor)


class SyncMode(Enum):
    """Which files to copy from the main worktree into a new one."""
    NONE = "none"
    ALL = "all"  # Every changed or untracked file
    IGNORED = "ignored"  # Gitignored files only


def determine_sync_mode(config: Config, flags: Optional[FlagOverrides] = None) -> SyncMode:
    """Pick the sync mode; explicit flags beat config-derived settings."""
    if flags is not None:
        if flags.sync and config.add.sync:
            return SyncMode.ALL
        if flags.sync_ignored and config.add.sync_ignored:
            return SyncMode.IGNORED
    if config.add.sync:
        return SyncMode.ALL
    if config.add.sync_ignored:
        return SyncMode.IGNORED
    return SyncMode.NONE
