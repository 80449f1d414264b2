class AutoVenvError(Exception):
    """Base exception for fatal setup failures."""

    def __init__(self, message: str, returncode: int = 1):
        super().__init__(message)
        self.returncode = returncode or 1


class EnvironmentCreationError(AutoVenvError):
    """Raised when the interpreter is missing or `python -m venv` fails."""
    pass


class ProjectDirectoryError(AutoVenvError):
    """Raised when the project directory cannot be created or renamed."""
    pass


class DependencyInstallError(AutoVenvError):
    """Raised when pip cannot upgrade itself or install the requirements."""
    pass


class ShellStartupFileError(AutoVenvError):
    """Raised when the shell rc file cannot be read or written."""
    pass


class InvalidEnvNameError(AutoVenvError):
    """Raised when the env name is not a relative path inside the project."""
    pass
