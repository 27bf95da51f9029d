"""In-memory store implementation.

Process-wide maps keyed by id, one per entity kind. Nothing survives a
restart and there is no locking: overlapping writers to the same record are
last-writer-wins. Useful for:
- Testing without external dependencies
- Development and single-user deployments
"""

from typing import Any, Optional, TypeVar

from pydantic import BaseModel

from testgen.config.schema import StorageConfig
from testgen.entities import Repository, RepositoryFile, TestCaseSummary, TestTemplate
from testgen.storage.base import Store, StorageError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _copy(record: ModelT) -> ModelT:
    return record.model_copy(deep=True)


def _patched(record: ModelT, changes: dict[str, Any]) -> ModelT:
    """Re-validate a record with a partial patch applied."""
    unknown = set(changes) - set(type(record).model_fields)
    if unknown:
        raise ValueError(f"Unknown fields: {', '.join(sorted(unknown))}")
    # dict(record) keeps fields excluded from serialization (access_token)
    return type(record).model_validate({**dict(record), **changes})


class InMemoryStore(Store):
    """In-memory store for repositories, files, summaries and templates."""

    def __init__(self, config: Optional[StorageConfig] = None) -> None:
        """Initialize empty maps."""
        super().__init__(config or StorageConfig())
        self.repositories: dict[str, Repository] = {}
        self.files: dict[str, RepositoryFile] = {}
        self.test_cases: dict[str, TestCaseSummary] = {}
        self.templates: dict[str, TestTemplate] = {}

    async def initialize(self) -> None:
        """Initialize the store."""
        pass

    async def close(self) -> None:
        """Drop all records."""
        self.repositories.clear()
        self.files.clear()
        self.test_cases.clear()
        self.templates.clear()

    async def add_repository(self, repository: Repository) -> Repository:
        if repository.id in self.repositories:
            raise StorageError(
                message=f"Repository '{repository.id}' already exists",
                storage_type="memory",
            )
        self.repositories[repository.id] = _copy(repository)
        return _copy(repository)

    async def get_repository(self, repository_id: str) -> Optional[Repository]:
        repository = self.repositories.get(repository_id)
        return _copy(repository) if repository else None

    async def list_repositories(self) -> list[Repository]:
        return [_copy(repo) for repo in self.repositories.values()]

    async def update_repository(self, repository_id: str, changes: dict[str, Any]) -> Optional[Repository]:
        existing = self.repositories.get(repository_id)
        if existing is None:
            return None
        changes = {k: v for k, v in changes.items() if k != "id"}
        updated = _patched(existing, changes)
        self.repositories[repository_id] = updated
        return _copy(updated)

    async def add_file(self, file: RepositoryFile) -> RepositoryFile:
        for existing in self.files.values():
            if existing.repository_id == file.repository_id and existing.path == file.path:
                raise StorageError(
                    message=f"File '{file.path}' already stored for repository '{file.repository_id}'",
                    storage_type="memory",
                )
        self.files[file.id] = _copy(file)
        return _copy(file)

    async def get_file(self, file_id: str) -> Optional[RepositoryFile]:
        file = self.files.get(file_id)
        return _copy(file) if file else None

    async def list_files(self, repository_id: str, selected: Optional[bool] = None) -> list[RepositoryFile]:
        files = [f for f in self.files.values() if f.repository_id == repository_id]
        if selected is not None:
            files = [f for f in files if f.is_selected == selected]
        return [_copy(f) for f in files]

    async def update_file(self, file_id: str, changes: dict[str, Any]) -> Optional[RepositoryFile]:
        existing = self.files.get(file_id)
        if existing is None:
            return None
        # ownership and path identify the record
        changes = {k: v for k, v in changes.items() if k not in {"id", "repository_id", "path"}}
        updated = _patched(existing, changes)
        self.files[file_id] = updated
        return _copy(updated)

    async def add_test_case(self, summary: TestCaseSummary) -> TestCaseSummary:
        self.test_cases[summary.id] = _copy(summary)
        return _copy(summary)

    async def get_test_case(self, test_case_id: str) -> Optional[TestCaseSummary]:
        summary = self.test_cases.get(test_case_id)
        return _copy(summary) if summary else None

    async def list_test_cases(self, repository_id: str) -> list[TestCaseSummary]:
        return [_copy(s) for s in self.test_cases.values() if s.repository_id == repository_id]

    async def update_test_case(self, test_case_id: str, changes: dict[str, Any]) -> Optional[TestCaseSummary]:
        existing = self.test_cases.get(test_case_id)
        if existing is None:
            return None
        changes = {k: v for k, v in changes.items() if k not in {"id", "repository_id"}}
        updated = _patched(existing, changes)
        self.test_cases[test_case_id] = updated
        return _copy(updated)

    async def delete_test_case(self, test_case_id: str) -> bool:
        if test_case_id not in self.test_cases:
            return False
        del self.test_cases[test_case_id]
        return True

    async def add_template(self, template: TestTemplate) -> TestTemplate:
        self.templates[template.id] = _copy(template)
        return _copy(template)

    async def get_template(self, template_id: str) -> Optional[TestTemplate]:
        template = self.templates.get(template_id)
        return _copy(template) if template else None

    async def list_templates(
        self, framework: Optional[str] = None, category: Optional[str] = None
    ) -> list[TestTemplate]:
        templates = list(self.templates.values())
        if framework:
            templates = [t for t in templates if t.framework == framework]
        if category:
            templates = [t for t in templates if t.category == category]
        return [_copy(t) for t in templates]
