from pydantic_settings import BaseSettings
from pydantic import Field, ValidationError, field_validator
from typing import Optional, Literal
import logging

from .core.exceptions import InvalidEnvNameError
from .core.project import validate_env_name

logger = logging.getLogger(__name__)


class CriticalConfigError(Exception):
    """Custom exception for critical configuration failures."""
    pass


class AutoVenvSettings(BaseSettings):
    # Pydantic model configuration
    model_config = {
        'extra': 'ignore',
        'env_file': '.env',
        'env_file_encoding': 'utf-8',
        'validate_default': True,
    }

    # -- Environment --
    AUTOVENV_ENV_NAME: str = Field(
        default="venv",
        min_length=1,
        description="Name of the venv directory created inside the project."
    )
    AUTOVENV_PYTHON: Optional[str] = Field(
        default=None,
        description="Interpreter used to create the venv. Defaults to the one running autovenv."
    )
    AUTOVENV_UPGRADE_PIP: bool = Field(
        default=True,
        description="Upgrade pip inside the venv before installing dependencies."
    )
    AUTOVENV_REQUIREMENTS_FILE: str = Field(
        default="requirements.txt",
        description="Dependency manifest, relative to the project directory."
    )

    # -- Shell hook --
    AUTOVENV_RC_FILE: Optional[str] = Field(
        default=None,
        description="Shell startup file to edit. Defaults to ~/.bashrc or ~/.zshrc."
    )
    ZSH_VERSION: Optional[str] = Field(default=None, description="Set when running under zsh.")
    SHELL: Optional[str] = Field(default=None, description="Login shell path.")

    LOG_LEVEL: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR'] = Field(
        default='WARNING',
        description="Logging level for autovenv internals."
    )

    @field_validator("AUTOVENV_ENV_NAME")
    @classmethod
    def _env_name_inside_project(cls, value: str) -> str:
        try:
            return validate_env_name(value)
        except InvalidEnvNameError as e:
            raise ValueError(str(e)) from e


def load_settings() -> AutoVenvSettings:
    """
    Load, validate, and return settings.
    Raises CriticalConfigError listing every invalid field.
    """
    try:
        return AutoVenvSettings()
    except ValidationError as e:
        # Log the detailed validation error
        error_messages = []
        for error in e.errors():
            field = ".".join(str(loc) for loc in error['loc'])
            message = error['msg']
            error_messages.append(f"  - Field '{field}': {message}")

        full_error_message = "Environment variable validation failed!\n" + "\n".join(error_messages) + \
                             "\nPlease check your .env file or environment settings."
        logger.error(full_error_message)

        # Re-raise a custom error
        raise CriticalConfigError(full_error_message) from e
