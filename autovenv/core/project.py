"""
Project directory helpers: resolve, create, and sanitize the target folder.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Optional

from .exceptions import InvalidEnvNameError, ProjectDirectoryError

logger = logging.getLogger(__name__)

# The hook embeds the project path in a shell `case` pattern
UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


@dataclass
class SanitizeResult:
    path: Path
    renamed_from: Optional[Path] = None
    relocated: bool = False

    @property
    def renamed(self) -> bool:
        return self.renamed_from is not None


def resolve_project_dir(raw: Optional[str], cwd: Optional[Path] = None) -> Path:
    """Absolute, symlink-free path for `raw` (defaults to the working directory)."""
    base = Path(cwd) if cwd else Path.cwd()
    path = Path(raw).expanduser() if raw else base
    if not path.is_absolute():
        path = base / path
    return path.resolve()


def validate_env_name(env_name: str) -> str:
    """
    The env must live inside the project: relative, non-empty, no `..` parts.
    Returns the name unchanged.
    """
    parts = PurePath(env_name).parts if env_name else ()
    if not parts or PurePath(env_name).is_absolute() or ".." in parts:
        raise InvalidEnvNameError(
            f"Invalid env name {env_name!r}: must be a relative directory inside the project"
        )
    return env_name


def ensure_project_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ProjectDirectoryError(f"Cannot create project directory {path}: {e}") from e


def sanitize_dirname(name: str) -> str:
    return UNSAFE_CHARS.sub("_", name)


def _current_dir() -> Optional[Path]:
    try:
        return Path.cwd().resolve()
    except OSError:
        return None


def sanitize_project_dir(path: Path) -> SanitizeResult:
    """
    Rename `path` in place when its name has characters outside [A-Za-z0-9._-].
    If the process was working inside the old folder, follow it to the new one.
    """
    safe_name = sanitize_dirname(path.name)
    if safe_name == path.name:
        return SanitizeResult(path=path)

    new_path = path.with_name(safe_name)
    if new_path.exists():
        raise ProjectDirectoryError(
            f"Cannot rename '{path.name}' to '{safe_name}': {new_path} already exists"
        )

    # Must be read before the rename; afterwards getcwd() already reports the new name.
    cwd = _current_dir()

    try:
        path.rename(new_path)
    except OSError as e:
        raise ProjectDirectoryError(f"Cannot rename {path} to {new_path}: {e}") from e
    logger.info(f"Renamed project folder {path} -> {new_path}")

    relocated = False
    if cwd is not None and (cwd == path or path in cwd.parents):
        target = new_path / cwd.relative_to(path)
        try:
            os.chdir(target)
        except OSError as e:
            raise ProjectDirectoryError(f"Cannot change directory to {target}: {e}") from e
        relocated = True
        logger.debug(f"Relocated working directory to {target}")

    return SanitizeResult(path=new_path, renamed_from=path, relocated=relocated)
