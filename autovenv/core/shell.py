"""
Shell flavor detection and the shell startup (rc) file resource.
"""
from __future__ import annotations

import enum
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .exceptions import ShellStartupFileError

logger = logging.getLogger(__name__)

# rc files are edited byte-for-byte: no newline translation, undecodable bytes round-trip
RC_ENCODING = "utf-8"
RC_ERRORS = "surrogateescape"


class ShellFlavor(enum.Enum):
    BASH = "bash"
    ZSH = "zsh"

    @property
    def rc_filename(self) -> str:
        return ".zshrc" if self is ShellFlavor.ZSH else ".bashrc"

    @classmethod
    def detect(cls, zsh_version: Optional[str] = None, shell: Optional[str] = None) -> "ShellFlavor":
        """
        Pick the flavor once at startup.
        ZSH_VERSION wins when set; otherwise the basename of $SHELL decides.
        """
        if zsh_version:
            return cls.ZSH
        if shell and os.path.basename(shell.strip()) == "zsh":
            return cls.ZSH
        return cls.BASH


class ShellStartupFile:
    """A shell rc file that is only ever appended to or atomically rewritten."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def for_flavor(cls, flavor: ShellFlavor, home: Optional[Path] = None) -> "ShellStartupFile":
        home = Path(home) if home else Path.home()
        return cls(home / flavor.rc_filename)

    def __repr__(self) -> str:
        return f"ShellStartupFile({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.is_file()

    def touch(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(exist_ok=True)
        except OSError as e:
            raise ShellStartupFileError(f"Cannot create {self.path}: {e}") from e

    def read_text(self) -> str:
        try:
            with self.path.open(encoding=RC_ENCODING, errors=RC_ERRORS, newline="") as f:
                return f.read()
        except OSError as e:
            raise ShellStartupFileError(f"Cannot read {self.path}: {e}") from e

    def contains(self, text: str) -> bool:
        return self.exists() and text in self.read_text()

    def append(self, text: str) -> None:
        try:
            with self.path.open("a", encoding=RC_ENCODING, errors=RC_ERRORS, newline="") as f:
                f.write(text)
        except OSError as e:
            raise ShellStartupFileError(f"Cannot append to {self.path}: {e}") from e
        logger.debug(f"Appended {len(text)} chars to {self.path}")

    def rewrite(self, text: str) -> None:
        """
        Replace the whole file content.
        Writes to a temp file beside the original and swaps it in with os.replace,
        so an interrupted run leaves either the old or the new content.
        """
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        except OSError as e:
            raise ShellStartupFileError(f"Cannot rewrite {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding=RC_ENCODING, errors=RC_ERRORS, newline="") as f:
                f.write(text)
            if self.path.exists():
                shutil.copymode(self.path, tmp_name)
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise ShellStartupFileError(f"Cannot rewrite {self.path}: {e}") from e
        logger.debug(f"Rewrote {self.path}")
