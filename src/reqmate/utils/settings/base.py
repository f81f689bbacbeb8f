"""
Shared base for reqmate settings.

Each concern (wiki connection, application output) gets its own settings
class with an env prefix, e.g. ``CONFLUENCE_TOKEN`` or ``APP_OUTPUT_DIR``.
Values come from the process environment, or from the first env file found
under ``.envs/``.
"""

from pathlib import Path
from typing import TypeVar
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger

T = TypeVar('T', bound='ABCBaseSettings')


DEFAULT_ENV_PATH = Path(".envs")
DEFAULT_ENV_FILE_CANDIDATES = [
    DEFAULT_ENV_PATH.joinpath("local.env"),
    DEFAULT_ENV_PATH.joinpath("dev.env"),
]


def find_env_file_if_exists() -> Path | None:
    """First of ``.envs/local.env`` and ``.envs/dev.env`` that exists, else None."""
    for env_path in DEFAULT_ENV_FILE_CANDIDATES:
        if env_path.exists():
            logger.info(f"Found env file: {env_path}")
            return env_path
    logger.debug("No env file under .envs, reading settings from the environment")
    return None


class ABCBaseSettings(BaseSettings):
    """Base for prefixed settings; unknown variables are ignored, names are case-insensitive."""

    model_config = SettingsConfigDict(
        env_file=find_env_file_if_exists(),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @classmethod
    def from_env_file(cls: type[T], env_path: str | Path) -> T:
        """
        Load settings from an explicit env file, e.g. ``reqmate load --env-file prod.env``.

        The subclass env prefix still applies, so one file can carry both
        ``CONFLUENCE_*`` and ``APP_*`` variables.

        Args:
            env_path: Path to the env file

        Returns:
            Instance of the calling settings class

        Raises:
            FileNotFoundError: if the file does not exist
        """
        env_path = Path(env_path)
        if not env_path.exists():
            raise FileNotFoundError(f"Env file {env_path} does not exist.")

        class EnvFileSettings(cls):  # same fields and prefix, different source file
            model_config = SettingsConfigDict(
                env_file=env_path,
                env_file_encoding="utf-8",
                extra="ignore",
                case_sensitive=False,
                env_prefix=cls.model_config.get("env_prefix", ""),
            )

        return EnvFileSettings()  # type: ignore[return-value]
