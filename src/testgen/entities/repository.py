"""Repository entity - a GitHub repository known to the service."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from testgen.entities.base import Entity, utcnow


class Repository(Entity):
    """A repository synced from GitHub.

    The id is the GitHub full name (``owner/name``) and stays stable for the
    lifetime of the process; every downstream operation looks it up by id.
    """

    id: str = Field(..., description="Externally assigned id (GitHub full name)")
    name: str
    full_name: str = Field(..., description="owner/name")
    owner: str
    description: Optional[str] = None
    language: Optional[str] = None
    is_private: bool = False
    access_token: Optional[str] = Field(default=None, exclude=True, repr=False)
    default_branch: str = "main"
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("id", "name", "full_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Repository identifiers cannot be empty")
        return v

    def split_full_name(self) -> Optional[tuple[str, str]]:
        """(owner, repo) when the full name has exactly two non-empty segments."""
        parts = self.full_name.split("/")
        if len(parts) != 2 or not all(parts):
            return None
        return parts[0], parts[1]
