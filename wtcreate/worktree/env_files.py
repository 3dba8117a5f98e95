"""Copy env files from the current checkout into a new worktree."""

import fnmatch
import logging
import os
import shutil
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = (".env*",)
SKIP_DIRS = {".git"}


def _matches(name: str, patterns: Sequence[str]) -> bool:
    return any(fnmatch.fnmatchcase(name, pattern) for pattern in patterns)


def find_env_files(
    source_root: Path,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    exclude: Sequence[str] = (),
    skip: Optional[Path] = None,
) -> List[Path]:
    """Find regular files under source_root whose name matches a pattern.

    Both include and exclude patterns are matched against the file name
    only, never against the directory part. ``skip`` names a directory that
    is left out of the walk entirely (the target worktree, when it lives
    inside the source tree).
    """
    source_root = Path(source_root).resolve()
    skip_dir = Path(skip).resolve() if skip is not None else None

    found = set()
    for dirpath, dirnames, filenames in os.walk(source_root):
        current = Path(dirpath)
        dirnames[:] = [
            d for d in dirnames if d not in SKIP_DIRS and (current / d) != skip_dir
        ]
        for name in filenames:
            path = current / name
            if not path.is_file():
                continue
            if _matches(name, patterns):
                found.add(path)

    if exclude:
        found = {path for path in found if not _matches(path.name, exclude)}

    return sorted(found)


def migrate_env_files(
    source_root: Path,
    target_root: Path,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    exclude: Sequence[str] = (),
) -> List[str]:
    """Copy matching env files to the same relative paths under target_root.

    Returns the relative paths that were copied. A file that cannot be
    copied is logged and skipped; files copied before it stay in place.
    """
    source_root = Path(source_root).resolve()
    target_root = Path(target_root).resolve()

    copied = []
    for env_file in find_env_files(source_root, patterns, exclude, skip=target_root):
        relative_path = env_file.relative_to(source_root)
        target_path = target_root / relative_path
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(env_file, target_path)
        except OSError as e:
            logger.warning(f"Warning: Could not copy {relative_path}: {e}")
            continue

        logger.info(f"Copied: {relative_path}")
        copied.append(relative_path.as_posix())

    return copied
