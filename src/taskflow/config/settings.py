"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings.

    Values come from CLI flags first, then ``TASKFLOW_*`` environment
    variables. ``api_url`` overrides the url in taskflow.yml when set.
    """

    project_root: Path = Field(
        default=Path(),
        description="Directory containing taskflow.yml",
    )

    api_url: str | None = Field(
        default=None,
        description="Task server base url (overrides taskflow.yml)",
    )

    token: str | None = Field(
        default=None,
        description="Bearer token sent with every request",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "TASKFLOW_",
    }
