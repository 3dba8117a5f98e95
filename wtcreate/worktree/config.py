"""Configuration for wtcreate.

Settings are layered: built-in defaults, then the user file
(``$XDG_CONFIG_HOME/wtcreate/config.toml``), then the project file
(``.worktreerc.toml`` at the repository root). Later layers override earlier
ones key by key inside each table.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import tomli
import tomli_w

from .errors import ConfigError

logger = logging.getLogger(__name__)

PROJECT_CONFIG_NAME = ".worktreerc.toml"
PACKAGE_MANAGERS = ("npm", "yarn", "pnpm", "bun")


@dataclass
class WorktreeSection:
    """Where worktrees are placed."""

    prefix: str = ""  # Empty means the repository directory name
    location: str = ""  # Template with {prefix}, {branch}, {original-branch}


@dataclass
class GitSection:
    """Remote and branch settings."""

    remote: str = "origin"
    default_branch: str = "main"
    fetch: bool = True
    push_new_branches: bool = False


@dataclass
class EnvSection:
    """Env file copying."""

    copy: bool = True
    patterns: List[str] = field(default_factory=lambda: [".env*"])
    exclude: List[str] = field(default_factory=list)


@dataclass
class PackageManagerSection:
    """Dependency installation."""

    install: bool = True
    force: str = ""
    command: str = ""

    def __post_init__(self):
        if self.force and self.force not in PACKAGE_MANAGERS:
            raise ConfigError(
                f"Unknown package manager '{self.force}' "
                f"(expected one of: {', '.join(PACKAGE_MANAGERS)})"
            )


@dataclass
class EditorSection:
    """Editor launched on the new worktree."""

    open: bool = True
    command: str = "code"
    args: List[str] = field(default_factory=list)


def _table(data: Dict, name: str) -> Dict:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"Config section [{name}] must be a table, got {value!r}")
    return value


def _string_list(table: Dict, key: str, default: List[str]) -> List[str]:
    """Read a list-of-strings setting; key is the dotted name for messages."""
    value = table.get(key.rsplit(".", 1)[-1], default)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"Config key {key} must be a list of strings, got {value!r}")
    return list(value)


@dataclass
class WtConfig:
    """Complete wtcreate configuration."""

    worktree: WorktreeSection = field(default_factory=WorktreeSection)
    git: GitSection = field(default_factory=GitSection)
    env: EnvSection = field(default_factory=EnvSection)
    package_manager: PackageManagerSection = field(default_factory=PackageManagerSection)
    editor: EditorSection = field(default_factory=EditorSection)
    post_create: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """Convert to dictionary for TOML serialization."""
        return {
            "worktree": {
                "prefix": self.worktree.prefix,
                "location": self.worktree.location,
            },
            "git": {
                "remote": self.git.remote,
                "default_branch": self.git.default_branch,
                "fetch": self.git.fetch,
                "push_new_branches": self.git.push_new_branches,
            },
            "env": {
                "copy": self.env.copy,
                "patterns": list(self.env.patterns),
                "exclude": list(self.env.exclude),
            },
            "package_manager": {
                "install": self.package_manager.install,
                "force": self.package_manager.force,
                "command": self.package_manager.command,
            },
            "editor": {
                "open": self.editor.open,
                "command": self.editor.command,
                "args": list(self.editor.args),
            },
            "hooks": {
                "post_create": list(self.post_create),
            },
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "WtConfig":
        """Create from dictionary, falling back to defaults for missing keys."""
        worktree_data = _table(data, "worktree")
        git_data = _table(data, "git")
        env_data = _table(data, "env")
        pm_data = _table(data, "package_manager")
        editor_data = _table(data, "editor")
        hooks_data = _table(data, "hooks")

        return cls(
            worktree=WorktreeSection(
                prefix=worktree_data.get("prefix", ""),
                location=worktree_data.get("location", ""),
            ),
            git=GitSection(
                remote=git_data.get("remote", "origin"),
                default_branch=git_data.get("default_branch", "main"),
                fetch=git_data.get("fetch", True),
                push_new_branches=git_data.get("push_new_branches", False),
            ),
            env=EnvSection(
                copy=env_data.get("copy", True),
                patterns=_string_list(env_data, "env.patterns", [".env*"]),
                exclude=_string_list(env_data, "env.exclude", []),
            ),
            package_manager=PackageManagerSection(
                install=pm_data.get("install", True),
                force=pm_data.get("force", ""),
                command=pm_data.get("command", ""),
            ),
            editor=EditorSection(
                open=editor_data.get("open", True),
                command=editor_data.get("command", "code"),
                args=_string_list(editor_data, "editor.args", []),
            ),
            post_create=_string_list(hooks_data, "hooks.post_create", []),
        )


def get_config_path() -> Path:
    """Get the path to the user config file."""
    config_dir = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return config_dir / "wtcreate" / "config.toml"


def merge_config(base: Dict, override: Dict) -> Dict:
    """Merge two raw config dicts, one level deep (per table)."""
    merged = {key: dict(value) if isinstance(value, dict) else value for key, value in base.items()}
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def read_config_file(path: Path) -> Dict:
    """Read one TOML config file, returning {} if it is missing or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            data = tomli.load(f)
    except (tomli.TOMLDecodeError, OSError) as e:
        logger.warning(f"Warning: Failed to parse config file {path}: {e}")
        return {}

    logger.debug(f"Loaded config from: {path}")
    return data


def load_config(repo_root: Optional[Union[Path, str]] = None) -> Dict:
    """Load the layered raw configuration."""
    config = read_config_file(get_config_path())
    if repo_root is not None:
        project = read_config_file(Path(repo_root) / PROJECT_CONFIG_NAME)
        config = merge_config(config, project)
    return config


def save_config(config: Dict, path: Optional[Path] = None) -> Path:
    """Save configuration to file (the user config file by default)."""
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)
    return config_path


def get_wt_config(repo_root: Optional[Union[Path, str]] = None) -> WtConfig:
    """Get the effective configuration for a repository."""
    return WtConfig.from_dict(load_config(repo_root))
