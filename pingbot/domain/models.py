from datetime import datetime
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from pingbot.domain.exceptions import ConfigurationException

GITHUB_HTML_URL = "https://github.com"


class RepositoryRef(BaseModel):
    """
    A GitHub repository named by its owner and name.
    Built from an ``owner/name`` configuration string.
    """
    model_config = ConfigDict(frozen=True)

    owner: str = Field(..., min_length=1, description="Login of the repository owner")
    name: str = Field(..., min_length=1, description="Name of the repository")

    @classmethod
    def parse(cls, raw: str) -> "RepositoryRef":
        parts = raw.split("/")
        if len(parts) != 2 or not all(parts):
            raise ConfigurationException(
                f"Invalid repository '{raw}', expected the form 'owner/name'."
            )
        return cls(owner=parts[0], name=parts[1])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class Issue(BaseModel):
    """
    Immutable domain model representing an open GitHub issue or pull request.
    ``owner`` and ``repo`` are filled in after the listing is fetched.
    """
    model_config = ConfigDict(frozen=True)

    number: int = Field(..., description="Issue number within its repository")
    title: str = Field(..., description="Issue title")
    created_at: datetime = Field(..., description="Timestamp the issue was opened")
    author_association: str = Field("NONE", description="Author's relationship to the repository")
    is_pull_request: bool = Field(False, description="Whether the listing entry is a pull request")
    owner: str = Field("", description="Owner of the repository the issue belongs to")
    repo: str = Field("", description="Name of the repository the issue belongs to")

    @property
    def html_url(self) -> str:
        return f"{GITHUB_HTML_URL}/{self.owner}/{self.repo}/issues/{self.number}"


class Comment(BaseModel):
    model_config = ConfigDict(frozen=True)

    author_association: str = "NONE"
    html_url: str = ""


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str

    def __str__(self) -> str:
        return f"{self.id}: {self.name}"


class DiscourseUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str = ""
    username: str


class Poster(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: int


class Topic(BaseModel):
    """
    Immutable domain model representing a Discourse topic.
    ``base_url`` is filled in once the topic survives filtering, for display.
    """
    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    created_at: datetime
    posters: Tuple[Poster, ...] = ()
    base_url: str = ""

    @property
    def url(self) -> str:
        return f"{self.base_url}/t/topic/{self.id}"


class CategoryContent(BaseModel):
    """Users and topics listed on a single category page."""
    model_config = ConfigDict(frozen=True)

    users: List[DiscourseUser] = Field(default_factory=list)
    topics: List[Topic] = Field(default_factory=list)
