"""
Set up a project venv and auto-activate it from the shell prompt.

Usage:
  autovenv                                # current directory, env name: venv
  autovenv /path/to/project               # from anywhere
  autovenv /path/to/project .venv         # custom env name
  autovenv install /path/to/project       # same as above, explicit
  autovenv uninstall                      # remove every auto-activate hook from your shell rc

Environment overrides:
  AUTOVENV_ENV_NAME           Default env name (default: venv)
  AUTOVENV_PYTHON             Interpreter used to create the venv
  AUTOVENV_UPGRADE_PIP        Set to 0/false to skip the pip upgrade
  AUTOVENV_REQUIREMENTS_FILE  Dependency manifest (default: requirements.txt)
  AUTOVENV_RC_FILE            Shell rc file to edit (default: ~/.bashrc or ~/.zshrc)
  LOG_LEVEL                   Logging level (default: WARNING)
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import AutoVenvSettings, CriticalConfigError, load_settings
from .core.exceptions import AutoVenvError
from .core.hook_manager import HookManager
from .core.shell import ShellFlavor, ShellStartupFile
from .core.use_cases.project_setup import ProjectSetupUseCase
from .infrastructure.logging import setup_logging

logger = logging.getLogger(__name__)

COMMANDS = ("install", "uninstall")


def _build_parser(command: str, settings: AutoVenvSettings) -> argparse.ArgumentParser:
    if command == "uninstall":
        parser = argparse.ArgumentParser(
            prog="autovenv uninstall",
            description="Remove every auto-activate hook from your shell rc file.",
        )
    else:
        parser = argparse.ArgumentParser(
            prog="autovenv",
            description="Create a venv for a project and auto-activate it when you cd into it.",
        )
        parser.add_argument("target_dir", nargs="?", help="Project directory (defaults to the current directory).")
        parser.add_argument(
            "env_name",
            nargs="?",
            default=settings.AUTOVENV_ENV_NAME,
            help=f"Venv directory name inside the project (default: {settings.AUTOVENV_ENV_NAME}).",
        )
        parser.add_argument(
            "--python",
            default=settings.AUTOVENV_PYTHON,
            help="Path to the python executable used to create the venv (defaults to the current interpreter).",
        )
        parser.add_argument(
            "--no-upgrade-pip",
            action="store_true",
            help="Skip pip upgrade step.",
        )
    parser.add_argument(
        "--rc-file",
        default=settings.AUTOVENV_RC_FILE,
        help="Shell startup file to edit (defaults to ~/.bashrc, or ~/.zshrc under zsh).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _startup_file(rc_file: Optional[str], flavor: ShellFlavor) -> ShellStartupFile:
    if rc_file:
        return ShellStartupFile(Path(rc_file).expanduser())
    return ShellStartupFile.for_flavor(flavor)


def _split_command(argv: List[str]) -> tuple[str, List[str]]:
    if argv and argv[0] in COMMANDS:
        return argv[0], argv[1:]
    return "install", argv


def run_install(args: argparse.Namespace, settings: AutoVenvSettings, flavor: ShellFlavor) -> int:
    startup_file = _startup_file(args.rc_file, flavor)
    use_case = ProjectSetupUseCase(
        hook_manager=HookManager(startup_file),
        python_cmd=args.python,
        upgrade_pip=settings.AUTOVENV_UPGRADE_PIP and not args.no_upgrade_pip,
        requirements_file=settings.AUTOVENV_REQUIREMENTS_FILE,
    )
    report = use_case.run(args.target_dir, args.env_name)

    print(">>> Done!")
    print(">>> Reload your shell to enable auto-manage:")
    print(f"    source {startup_file.path}")
    print(">>> Test:")
    print(f"    cd ~ && cd \"{report.project_dir}\"    # auto-activate")
    print("    cd ~                           # auto-deactivate")
    if report.relocated:
        print(f">>> Your project folder moved; run: cd \"{report.project_dir}\"")
    return 0


def run_uninstall(args: argparse.Namespace, flavor: ShellFlavor) -> int:
    startup_file = _startup_file(args.rc_file, flavor)
    result = HookManager(startup_file).uninstall()
    if not result.file_found:
        print(f"No {result.rc_path} found.")
    elif result.removed:
        print(f"Removed auto-activate hooks from {result.rc_path}")
        print(f"Reload your shell: source \"{result.rc_path}\"")
    else:
        print(f"No auto-activate hooks found in {result.rc_path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    command, rest = _split_command(list(sys.argv[1:] if argv is None else argv))

    try:
        settings = load_settings()
    except CriticalConfigError as e:
        print(str(e), file=sys.stderr)
        return 1

    args = _build_parser(command, settings).parse_args(rest)
    setup_logging("DEBUG" if args.verbose else settings.LOG_LEVEL)
    flavor = ShellFlavor.detect(settings.ZSH_VERSION, settings.SHELL)
    logger.debug(f"Command={command} shell={flavor.value}")

    try:
        if command == "uninstall":
            return run_uninstall(args, flavor)
        return run_install(args, settings, flavor)
    except AutoVenvError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return e.returncode


if __name__ == "__main__":
    sys.exit(main())
