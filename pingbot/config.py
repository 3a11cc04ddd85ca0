import os
import tomllib
from pathlib import Path
from typing import List, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pingbot.domain.exceptions import ConfigurationException
from pingbot.domain.membership import DEFAULT_MEMBER_SUFFIXES
from pingbot.domain.models import RepositoryRef

DEFAULT_CONFIG_PATH = "config.toml"


class Settings(BaseModel):
    """
    Run configuration, read once at startup from a TOML file.
    Keys use the hyphenated spelling of the file (``github-token``, ``discourse-base-url``, ...).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    github_token: str = Field("", alias="github-token")
    repos: List[str] = Field(default_factory=list)

    discourse_base_url: str = Field(..., min_length=1, alias="discourse-base-url")
    discourse_categories: List[str] = Field(default_factory=list, alias="discourse-categories")
    discourse_members: List[str] = Field(default_factory=list, alias="discourse-members")
    member_suffixes: List[str] = Field(
        default_factory=lambda: list(DEFAULT_MEMBER_SUFFIXES), alias="member-suffixes"
    )

    max_age_hours: float = Field(72, gt=0, alias="max-age-hours")
    show_empty_sections: bool = Field(True, alias="show-empty-sections")

    slack_token: str = Field("", alias="slack-token")
    slack_channel: str = Field("", alias="slack-channel")

    @property
    def repositories(self) -> List[RepositoryRef]:
        return [RepositoryRef.parse(raw) for raw in self.repos]

    @property
    def notify_slack(self) -> bool:
        return bool(self.slack_token and self.slack_channel)


def load_settings(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Settings:
    """
    Loads and validates the configuration file.

    Tokens missing from the file are taken from the ``GITHUB_TOKEN`` and
    ``SLACK_TOKEN`` environment variables, after loading a ``.env`` file if present.

    Raises:
        ConfigurationException: If the file is unreadable, invalid, lacks a required
            field, or names a repository not in ``owner/name`` form.
    """
    load_dotenv()

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigurationException(f"Config file not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationException(f"Invalid TOML in {path}: {e}") from e

    if not data.get("github-token"):
        data["github-token"] = os.getenv("GITHUB_TOKEN", "")
    if not data.get("slack-token"):
        data["slack-token"] = os.getenv("SLACK_TOKEN", "")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationException(f"Invalid configuration in {path}: {e}") from e

    if not settings.github_token:
        raise ConfigurationException("github-token is not set in the config file or GITHUB_TOKEN.")

    # Fail on malformed repositories before any request is made
    for raw in settings.repos:
        RepositoryRef.parse(raw)
    return settings
