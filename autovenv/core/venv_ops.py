"""
Helpers for creating a project venv and installing into it.
"""
from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

from .exceptions import DependencyInstallError, EnvironmentCreationError

logger = logging.getLogger(__name__)


def _bin_dir(venv_dir: Path) -> Path:
    return venv_dir / ("Scripts" if os.name == "nt" else "bin")


def venv_python(venv_dir: Path) -> Path:
    """
    Return the python executable inside the venv.
    """
    return _bin_dir(venv_dir) / ("python.exe" if os.name == "nt" else "python")


def venv_exists(venv_dir: Path) -> bool:
    """
    Check whether the venv python exists.
    """
    return venv_python(venv_dir).exists()


def resolve_python(candidate: Optional[str] = None) -> str:
    """
    Resolve the interpreter used to create the venv.
    Defaults to the interpreter running autovenv.
    """
    if not candidate:
        return sys.executable
    candidate_path = Path(candidate).expanduser()
    if candidate_path.is_file():
        return str(candidate_path)
    resolved = shutil.which(candidate)
    if not resolved:
        raise EnvironmentCreationError(f"Python interpreter not found: {candidate}")
    return resolved


def create_venv(venv_dir: Path, python_cmd: Optional[str] = None) -> bool:
    """
    Create a venv at `venv_dir`. Returns False when the directory already exists.
    """
    if venv_dir.exists():
        logger.info(f"venv already exists at {venv_dir}")
        return False
    python_cmd = resolve_python(python_cmd)
    logger.info(f"Creating venv at {venv_dir} with {python_cmd}")
    try:
        subprocess.check_call([python_cmd, "-m", "venv", str(venv_dir)])
    except subprocess.CalledProcessError as exc:
        raise EnvironmentCreationError(
            f"`{python_cmd} -m venv {venv_dir}` failed with exit code {exc.returncode}",
            returncode=exc.returncode,
        ) from exc
    except OSError as exc:
        raise EnvironmentCreationError(f"Cannot run {python_cmd}: {exc}") from exc
    return True


def _run_pip(venv_dir: Path, args: List[str], cwd: Optional[Path] = None) -> None:
    cmd = [str(venv_python(venv_dir)), "-m", "pip", *args]
    env = os.environ.copy()
    env["PIP_NO_INPUT"] = "1"
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        subprocess.check_call(cmd, cwd=cwd, env=env)
    except subprocess.CalledProcessError as exc:
        raise DependencyInstallError(
            f"`pip {' '.join(args)}` failed with exit code {exc.returncode}",
            returncode=exc.returncode,
        ) from exc
    except OSError as exc:
        raise DependencyInstallError(f"Cannot run pip from {venv_dir}: {exc}") from exc


def upgrade_pip(venv_dir: Path) -> None:
    _run_pip(venv_dir, ["install", "--upgrade", "pip"])


def install_requirements(venv_dir: Path, requirements: Path) -> None:
    # No --user here: it is rejected inside a venv
    _run_pip(venv_dir, ["install", "-r", str(requirements)], cwd=requirements.parent)
