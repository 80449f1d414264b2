"""Create a project venv and auto-activate it from the shell prompt."""

__version__ = "0.1.0"
