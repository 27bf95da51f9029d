"""Abstract base class for persistence backends.

Why this exists:
- Keeps the sync / generation / pull request services independent of where
  records live
- Enables testing with the in-memory implementation
- A durable backend (SQL, document store) can be added without touching the
  pipeline

How to extend:
1. Subclass Store
2. Implement all abstract methods; return copies, never live objects
3. Register it in ``testgen.storage.create_store``
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from testgen.config.schema import StorageConfig
from testgen.entities import Repository, RepositoryFile, TestCaseSummary, TestTemplate


class Store(ABC):
    """Create / read / update / filter-by-parent for every entity kind.

    ``update_*`` methods take a partial patch of field names and return the
    updated record, or None when the id is unknown.
    """

    def __init__(self, config: StorageConfig) -> None:
        """Initialize storage with configuration."""
        self.config = config

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create tables, connect, ...)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close connections and cleanup resources."""
        pass

    # Repositories

    @abstractmethod
    async def add_repository(self, repository: Repository) -> Repository:
        """Store a repository under its external id.

        Raises:
            StorageError: If the id is already taken
        """
        pass

    @abstractmethod
    async def get_repository(self, repository_id: str) -> Optional[Repository]:
        pass

    @abstractmethod
    async def list_repositories(self) -> list[Repository]:
        pass

    @abstractmethod
    async def update_repository(self, repository_id: str, changes: dict[str, Any]) -> Optional[Repository]:
        pass

    # Files

    @abstractmethod
    async def add_file(self, file: RepositoryFile) -> RepositoryFile:
        """Store a file record.

        Raises:
            StorageError: If the repository already has a record for the path
        """
        pass

    @abstractmethod
    async def get_file(self, file_id: str) -> Optional[RepositoryFile]:
        pass

    @abstractmethod
    async def list_files(self, repository_id: str, selected: Optional[bool] = None) -> list[RepositoryFile]:
        """List a repository's files, optionally filtered by selection flag."""
        pass

    @abstractmethod
    async def update_file(self, file_id: str, changes: dict[str, Any]) -> Optional[RepositoryFile]:
        pass

    # Test case summaries

    @abstractmethod
    async def add_test_case(self, summary: TestCaseSummary) -> TestCaseSummary:
        pass

    @abstractmethod
    async def get_test_case(self, test_case_id: str) -> Optional[TestCaseSummary]:
        pass

    @abstractmethod
    async def list_test_cases(self, repository_id: str) -> list[TestCaseSummary]:
        pass

    @abstractmethod
    async def update_test_case(self, test_case_id: str, changes: dict[str, Any]) -> Optional[TestCaseSummary]:
        pass

    @abstractmethod
    async def delete_test_case(self, test_case_id: str) -> bool:
        """Delete a summary. Returns False if not found."""
        pass

    # Templates

    @abstractmethod
    async def add_template(self, template: TestTemplate) -> TestTemplate:
        pass

    @abstractmethod
    async def get_template(self, template_id: str) -> Optional[TestTemplate]:
        pass

    @abstractmethod
    async def list_templates(
        self, framework: Optional[str] = None, category: Optional[str] = None
    ) -> list[TestTemplate]:
        pass


class StorageError(Exception):
    """Base exception for storage errors."""

    def __init__(self, message: str, storage_type: str, original_error: Optional[Exception] = None):
        self.message = message
        self.storage_type = storage_type
        self.original_error = original_error
        super().__init__(self.message)
