"""RepositoryFile entity - one synced path in a repository."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from testgen.entities.base import Entity, new_id


class FileType(str, Enum):
    """Kinds of tree entries we keep."""

    FILE = "file"
    DIR = "dir"


class RepositoryFile(Entity):
    """A file discovered during sync.

    ``(repository_id, path)`` is unique. Content is filled in lazily the first
    time an operation needs it and cached on the record afterwards.
    """

    id: str = Field(default_factory=new_id)
    repository_id: str
    path: str
    name: str
    type: FileType = FileType.FILE
    size: Optional[str] = Field(None, description="Byte count as reported by GitHub")
    content: Optional[str] = None
    language: Optional[str] = None
    is_selected: bool = False

    @property
    def has_content(self) -> bool:
        return bool(self.content)


class RemoteEntry(BaseModel):
    """One item of a GitHub contents listing."""

    name: str
    path: str
    type: str
    size: Optional[int] = None
    download_url: Optional[str] = None
