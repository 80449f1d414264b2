from pathlib import Path

import pytest

from autovenv.cli import main
from autovenv.core.hook_manager import START_PREFIX


def test_install_default_form(tmp_path, rc_path, subprocess_calls, capsys):
    project = tmp_path / "proj"

    assert main(["--rc-file", str(rc_path), str(project), ".venv"]) == 0

    out = capsys.readouterr().out
    assert f">>> Project: {project.resolve()}" in out
    assert ">>> Done!" in out
    assert f"source {rc_path}" in out
    assert rc_path.read_text().count(START_PREFIX) == 1


def test_explicit_install_keyword(tmp_path, rc_path, subprocess_calls):
    assert main(["install", str(tmp_path / "proj"), "--rc-file", str(rc_path)]) == 0
    assert (tmp_path / "proj" / "venv").is_dir()


def test_target_defaults_to_cwd(tmp_path, rc_path, subprocess_calls, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["--rc-file", str(rc_path)]) == 0
    assert (tmp_path / "venv").is_dir()


def test_env_name_from_settings(tmp_path, rc_path, subprocess_calls, monkeypatch):
    monkeypatch.setenv("AUTOVENV_ENV_NAME", ".env-py")
    assert main(["--rc-file", str(rc_path), str(tmp_path / "proj")]) == 0
    assert (tmp_path / "proj" / ".env-py").is_dir()


def test_rc_file_from_settings(tmp_path, subprocess_calls, monkeypatch):
    rc = tmp_path / "custom.rc"
    monkeypatch.setenv("AUTOVENV_RC_FILE", str(rc))
    assert main([str(tmp_path / "proj")]) == 0
    assert START_PREFIX in rc.read_text()


def test_zsh_uses_zshrc(tmp_path, subprocess_calls, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.setenv("SHELL", "/bin/zsh")
    assert main([str(tmp_path / "proj")]) == 0
    assert (home / ".zshrc").exists()
    assert not (home / ".bashrc").exists()


def test_no_upgrade_pip_flag(tmp_path, rc_path, subprocess_calls):
    assert main(["--no-upgrade-pip", "--rc-file", str(rc_path), str(tmp_path / "p")]) == 0
    assert not any("--upgrade" in call for call in subprocess_calls)


def test_upgrade_pip_disabled_by_settings(tmp_path, rc_path, subprocess_calls, monkeypatch):
    monkeypatch.setenv("AUTOVENV_UPGRADE_PIP", "false")
    assert main(["--rc-file", str(rc_path), str(tmp_path / "p")]) == 0
    assert not any("--upgrade" in call for call in subprocess_calls)


def test_install_failure_exits_with_tool_returncode(tmp_path, rc_path, failing_subprocess, capsys):
    failing_subprocess(4)
    assert main(["--rc-file", str(rc_path), str(tmp_path / "proj")]) == 4
    assert "Error:" in capsys.readouterr().err
    assert not rc_path.exists()


def test_uninstall_reports_removed(tmp_path, rc_path, subprocess_calls, capsys):
    main(["--rc-file", str(rc_path), str(tmp_path / "a")])
    main(["--rc-file", str(rc_path), str(tmp_path / "b")])
    capsys.readouterr()

    assert main(["uninstall", "--rc-file", str(rc_path)]) == 0

    assert f"Removed auto-activate hooks from {rc_path}" in capsys.readouterr().out
    assert START_PREFIX not in rc_path.read_text()


def test_uninstall_without_hooks(rc_path, capsys):
    rc_path.parent.mkdir(parents=True)
    rc_path.write_text("# nothing here\n")
    assert main(["uninstall", "--rc-file", str(rc_path)]) == 0
    assert f"No auto-activate hooks found in {rc_path}" in capsys.readouterr().out
    assert rc_path.read_text() == "# nothing here\n"


def test_uninstall_without_rc_file(rc_path, capsys):
    assert main(["uninstall", "--rc-file", str(rc_path)]) == 0
    assert f"No {rc_path} found." in capsys.readouterr().out
    assert not rc_path.exists()


def test_invalid_settings_exit_nonzero(monkeypatch, capsys):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    assert main(["uninstall"]) == 1
    assert "LOG_LEVEL" in capsys.readouterr().err


def test_uninstall_rejects_positional_args(rc_path):
    with pytest.raises(SystemExit):
        main(["uninstall", "/some/dir", "--rc-file", str(rc_path)])


def test_absolute_env_name_is_rejected(tmp_path, rc_path, subprocess_calls, capsys):
    assert main(["--rc-file", str(rc_path), str(tmp_path / "proj"), "/opt/env"]) == 1
    assert "Invalid env name" in capsys.readouterr().err
    assert subprocess_calls == []
    assert not rc_path.exists()
