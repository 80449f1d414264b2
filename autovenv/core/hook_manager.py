"""
Install and remove the auto-activate hook in a shell startup file.

Each hook is a marker-delimited block:

    # >>> Auto-manage venv [<id>] >>>
    cd_auto_venv_<id>() { ... }
    ...pre-prompt registration...
    # <<< Auto-manage venv [<id>] <<<

`<id>` is a hash of the project path, so installing twice for the same folder
is a no-op. Uninstall drops every block carrying the generic prefix, whatever
project it was written for.
"""
from __future__ import annotations

import hashlib
import logging
import shlex
import string
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

from .shell import ShellStartupFile

logger = logging.getLogger(__name__)

HASH_PREFERENCE: Tuple[str, ...] = ("md5", "sha1")
FALLBACK_IDENTIFIER = "nohash"

MARKER_LABEL = "Auto-manage venv"
START_PREFIX = f"# >>> {MARKER_LABEL} ["
END_PREFIX = f"# <<< {MARKER_LABEL} ["


class _HookTemplate(string.Template):
    # `$` belongs to the shell
    delimiter = "@"


HOOK_TEMPLATE = _HookTemplate("""\
# >>> @marker >>>
@func_name() {
  local project_dir=@project_dir
  local env_path="$project_dir/"@env_name

  # Are we inside the project (or any subdir)?
  case "$PWD/" in
    "$project_dir"/*)
      if [ -f "$env_path/bin/activate" ]; then
        # Activate only if not already active
        if [ -z "${VIRTUAL_ENV-}" ] || [ "$VIRTUAL_ENV" != "$env_path" ]; then
          echo "(auto) Activating: $env_path"
          # shellcheck disable=SC1090
          . "$env_path/bin/activate"
        fi
      fi
      ;;
    *)
      # If we leave the project while that env is active, deactivate it
      if [ -n "${VIRTUAL_ENV-}" ] && [ "$VIRTUAL_ENV" = "$env_path" ]; then
        echo "(auto) Deactivating: $env_path"
        deactivate
      fi
      ;;
  esac
}

# Attach to prompt loop (Zsh precmd hook, Bash PROMPT_COMMAND fallback)
if [ -n "${ZSH_VERSION-}" ]; then
  autoload -Uz add-zsh-hook 2>/dev/null || true
  if command -v add-zsh-hook >/dev/null 2>&1; then
    add-zsh-hook precmd @func_name
  else
    if [ -n "${PROMPT_COMMAND-}" ]; then
      PROMPT_COMMAND="@func_name;$PROMPT_COMMAND"
    else
      PROMPT_COMMAND="@func_name"
    fi
  fi
else
  if [ -n "${PROMPT_COMMAND-}" ]; then
    PROMPT_COMMAND="@func_name;$PROMPT_COMMAND"
  else
    PROMPT_COMMAND="@func_name"
  fi
fi
# <<< @marker <<<
""")


def compute_identifier(project_dir: Path, algorithms: Iterable[str] = HASH_PREFERENCE) -> str:
    """
    Hex digest of the absolute project path using the first usable algorithm.
    Falls back to a constant when none is available (e.g. FIPS builds without md5/sha1),
    which means every project then shares one marker.
    """
    data = str(project_dir).encode("utf-8")
    for name in algorithms:
        try:
            digest = hashlib.new(name, data, usedforsecurity=False)
        except (ValueError, TypeError):
            logger.debug(f"Hash algorithm {name!r} unavailable, trying next")
            continue
        return digest.hexdigest()
    logger.debug(f"No hash algorithm available; using {FALLBACK_IDENTIFIER!r}")
    return FALLBACK_IDENTIFIER


def marker_for(identifier: str) -> str:
    return f"{MARKER_LABEL} [{identifier}]"


def function_name_for(identifier: str) -> str:
    return f"cd_auto_venv_{identifier}"


def render_hook(project_dir: Path, env_name: str, identifier: str) -> str:
    return HOOK_TEMPLATE.substitute(
        marker=marker_for(identifier),
        func_name=function_name_for(identifier),
        project_dir=shlex.quote(str(project_dir)),
        env_name=shlex.quote(env_name),
    )


def strip_hook_blocks(lines: List[str]) -> Tuple[List[str], int]:
    """
    Drop every start..end marker block (inclusive).
    A start marker without a matching end line is kept as-is.
    """
    kept: List[str] = []
    pending: List[str] = []
    removed = 0
    in_block = False
    for line in lines:
        if not in_block:
            if START_PREFIX in line:
                in_block = True
                pending = [line]
            else:
                kept.append(line)
            continue
        pending.append(line)
        if END_PREFIX in line:
            in_block = False
            pending = []
            removed += 1
    if in_block:
        logger.warning(f"Unterminated hook block starting with {pending[0].rstrip()!r}; leaving it in place")
        kept.extend(pending)
    return kept, removed


@dataclass
class HookInstallResult:
    status: str  # "installed" | "already_present"
    identifier: str
    marker: str
    function_name: str
    rc_path: Path

    @property
    def installed(self) -> bool:
        return self.status == "installed"


@dataclass
class HookUninstallResult:
    rc_path: Path
    file_found: bool
    removed: int = 0


class HookManager:
    """Installs and removes auto-activate blocks in one shell startup file."""

    def __init__(self, startup_file: ShellStartupFile):
        self.startup_file = startup_file

    def install(self, project_dir: Path, env_name: str) -> HookInstallResult:
        project_dir = Path(project_dir)
        identifier = compute_identifier(project_dir)
        marker = marker_for(identifier)
        result = HookInstallResult(
            status="already_present",
            identifier=identifier,
            marker=marker,
            function_name=function_name_for(identifier),
            rc_path=self.startup_file.path,
        )

        self.startup_file.touch()
        if self.startup_file.contains(marker):
            logger.info(f"Hook {marker} already present in {self.startup_file.path}")
            return result

        self.startup_file.append("\n" + render_hook(project_dir, env_name, identifier))
        logger.info(f"Installed hook {marker} for {project_dir} into {self.startup_file.path}")
        result.status = "installed"
        return result

    def uninstall(self) -> HookUninstallResult:
        rc_path = self.startup_file.path
        if not self.startup_file.exists():
            return HookUninstallResult(rc_path=rc_path, file_found=False)

        lines = self.startup_file.read_text().splitlines(keepends=True)
        kept, removed = strip_hook_blocks(lines)
        if removed:
            self.startup_file.rewrite("".join(kept))
            logger.info(f"Removed {removed} hook block(s) from {rc_path}")
        return HookUninstallResult(rc_path=rc_path, file_found=True, removed=removed)
