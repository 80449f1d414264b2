import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .. import venv_ops
from ..hook_manager import HookInstallResult, HookManager
from ..project import ensure_project_dir, resolve_project_dir, sanitize_project_dir, validate_env_name


@dataclass
class SetupReport:
    project_dir: Path
    env_name: str
    venv_dir: Path
    renamed_from: Optional[Path] = None
    relocated: bool = False
    venv_created: bool = False
    pip_upgraded: bool = False
    requirements_installed: bool = False
    hook: Optional[HookInstallResult] = None


class ProjectSetupUseCase:
    """Use case for preparing a project: folder, venv, dependencies, and the shell hook"""

    def __init__(
            self,
            hook_manager: HookManager,
            python_cmd: Optional[str] = None,
            upgrade_pip: bool = True,
            requirements_file: str = "requirements.txt",
            echo: Callable[[str], None] = print,
    ):
        self.hook_manager = hook_manager
        self.python_cmd = python_cmd
        self.upgrade_pip = upgrade_pip
        self.requirements_file = requirements_file
        self.echo = echo
        self.logger = logging.getLogger(__name__)

    def run(self, target: Optional[str], env_name: str) -> SetupReport:
        """
        Run every step in order. The first failure propagates; finished steps are not undone.
        """
        validate_env_name(env_name)
        project_dir = resolve_project_dir(target)
        ensure_project_dir(project_dir)

        sanitized = sanitize_project_dir(project_dir)
        if sanitized.renamed:
            self.echo(">>> Renaming project folder:")
            self.echo(f"    '{sanitized.renamed_from.name}'  ->  '{sanitized.path.name}'")
        project_dir = sanitized.path

        venv_dir = project_dir / env_name
        report = SetupReport(
            project_dir=project_dir,
            env_name=env_name,
            venv_dir=venv_dir,
            renamed_from=sanitized.renamed_from,
            relocated=sanitized.relocated,
        )
        self.echo(f">>> Project: {project_dir}")
        self.echo(f">>> Env:     {env_name}")

        if venv_dir.exists():
            self.echo(">>> Virtual environment already exists, skipping create.")
        else:
            self.echo(">>> Creating virtual environment...")
            report.venv_created = venv_ops.create_venv(venv_dir, self.python_cmd)

        if self.upgrade_pip:
            self.echo(">>> Upgrading pip...")
            venv_ops.upgrade_pip(venv_dir)
            report.pip_upgraded = True

        requirements = project_dir / self.requirements_file
        if requirements.is_file():
            self.echo(f">>> Installing dependencies from {self.requirements_file}...")
            venv_ops.install_requirements(venv_dir, requirements)
            report.requirements_installed = True
        else:
            self.echo(f">>> No {self.requirements_file} found, skipping dependency install.")

        rc_path = self.hook_manager.startup_file.path
        report.hook = self.hook_manager.install(project_dir, env_name)
        if report.hook.installed:
            self.echo(f">>> Added auto-activation/deactivation hook to {rc_path}")
        else:
            self.echo(">>> Hook already present, skipping.")

        self.logger.info(f"Setup finished for {project_dir}")
        return report
