from pathlib import Path
from pydantic import Field
from .base import ABCBaseSettings


class ConfluenceSettings(ABCBaseSettings):
    """Confluence REST API settings"""
    base_url: str = Field(default="https://wiki.example.com", description="Confluence base URL")
    token: str | None = Field(default=None, description="Personal access token used as Bearer auth")
    default_space_key: str = Field(default="BJS", description="Space key used when the page URL carries none")
    requirements_limit: int = Field(default=2000, description="numberOfRequirements requested from the requirements endpoint")
    timeout_seconds: float = Field(default=30.0, description="HTTP timeout per request")
    max_attempts: int = Field(default=3, description="Attempts per request before giving up")
    backoff_min_seconds: float = Field(default=2.0, description="Lower bound of the exponential backoff")
    backoff_max_seconds: float = Field(default=30.0, description="Upper bound of the exponential backoff")
    local_page_path: Path | None = Field(default=None, description="Local storage-format HTML used instead of the API")
    local_requirements_path: Path | None = Field(default=None, description="Local requirements JSON used instead of the API")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "CONFLUENCE_"

    @property
    def api_base_url(self) -> str:
        """Base URL without trailing slash"""
        return self.base_url.rstrip("/")

    @property
    def uses_local_files(self) -> bool:
        """Whether both local substitutes are configured"""
        return self.local_page_path is not None and self.local_requirements_path is not None


class AppSettings(ABCBaseSettings):
    """Application settings"""
    app_name: str = Field(default="Reqmate", description="Application name")
    environment: str = Field(default="local", description="Environment (local, dev, prod)")
    debug: bool = Field(default=False, description="Debug mode")
    output_dir: Path = Field(default=Path("data/confluence_output"), description="Directory for debug artifacts")
    save_artifacts: bool = Field(default=False, description="Persist enriched HTML and plain text for debugging")
    excerpt_max_chars: int | None = Field(default=None, description="Truncate requirement excerpts in annotations")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "APP_"
