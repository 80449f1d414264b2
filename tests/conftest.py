import subprocess
from pathlib import Path

import pytest

from autovenv.core import venv_ops
from autovenv.core.hook_manager import HookManager
from autovenv.core.shell import ShellStartupFile


@pytest.fixture
def rc_path(tmp_path):
    return tmp_path / "home" / ".bashrc"


@pytest.fixture
def hook_manager(rc_path):
    return HookManager(ShellStartupFile(rc_path))


@pytest.fixture
def subprocess_calls(monkeypatch):
    """
    Record subprocess calls made by venv_ops instead of running them.
    `python -m venv DIR` creates DIR/bin/python so later steps see a venv.
    """
    calls = []

    def fake_check_call(cmd, **kwargs):
        calls.append(list(cmd))
        if cmd[1:3] == ["-m", "venv"]:
            python = venv_ops.venv_python(Path(cmd[3]))
            python.parent.mkdir(parents=True)
            python.write_text("")
        return 0

    monkeypatch.setattr(venv_ops.subprocess, "check_call", fake_check_call)
    return calls


@pytest.fixture
def failing_subprocess(monkeypatch):
    def fail(returncode):
        def fake_check_call(cmd, **kwargs):
            raise subprocess.CalledProcessError(returncode, cmd)
        monkeypatch.setattr(venv_ops.subprocess, "check_call", fake_check_call)
    return fail


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in (
        "AUTOVENV_ENV_NAME",
        "AUTOVENV_PYTHON",
        "AUTOVENV_UPGRADE_PIP",
        "AUTOVENV_REQUIREMENTS_FILE",
        "AUTOVENV_RC_FILE",
        "ZSH_VERSION",
        "SHELL",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    # keep any .env in the invoking directory out of the settings
    monkeypatch.chdir(tmp_path)
