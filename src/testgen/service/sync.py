"""Repository sync and file selection.

Provides:
- Importing a GitHub account's repositories
- Additive, idempotent file-tree sync with type/size filtering
- Per-file selection toggle, select-all and clear-selection
- Content-load-once: file content is fetched from GitHub at most once
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from testgen.clients.github import GitHubClient
from testgen.config.schema import SyncConfig
from testgen.core.errors import BadRequestError, NotFoundError
from testgen.core.languages import is_allowed_extension, is_skipped_dir, language_for
from testgen.core.traversal import EntryPredicate, walk_tree
from testgen.entities import FileType, RemoteEntry, Repository, RepositoryFile
from testgen.observability.logging import get_logger
from testgen.storage.base import Store, StorageError

logger = get_logger(__name__)


@dataclass
class SyncResult:
    """Outcome of a file-tree sync."""

    files: list[RepositoryFile] = field(default_factory=list)
    failed_paths: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.files)


def make_descend_predicate(skip_dirs: list[str]) -> EntryPredicate:
    def should_descend(entry: RemoteEntry) -> bool:
        return not is_skipped_dir(entry.name, skip_dirs)

    return should_descend


def make_accept_predicate(max_file_bytes: int) -> EntryPredicate:
    def should_accept(entry: RemoteEntry) -> bool:
        if not is_allowed_extension(entry.name):
            return False
        return entry.size is None or entry.size < max_file_bytes

    return should_accept


class SyncEngine:
    """Keeps stored repository files in step with GitHub."""

    def __init__(self, store: Store, github: GitHubClient, config: Optional[SyncConfig] = None):
        """Initialize the engine.

        Args:
            store: Persistence for repositories and files
            github: GitHub API client
            config: Size ceiling and directory skip list
        """
        self.store = store
        self.github = github
        self.config = config or SyncConfig()

    async def get_repository(self, repository_id: str) -> Repository:
        """Look up a repository.

        Raises:
            NotFoundError: If the id is unknown
        """
        repository = await self.store.get_repository(repository_id)
        if repository is None:
            raise NotFoundError(f"Repository not found: {repository_id}")
        return repository

    @staticmethod
    def remote_coordinates(repository: Repository) -> tuple[str, str, str]:
        """(owner, repo, token) for GitHub calls.

        Raises:
            BadRequestError: If the repository has no token or a malformed full name
        """
        if not repository.access_token:
            raise BadRequestError("Repository access token not found")
        parts = repository.split_full_name()
        if parts is None:
            raise BadRequestError(f"Invalid repository format: {repository.full_name}")
        return parts[0], parts[1], repository.access_token

    async def import_repositories(self, access_token: str) -> list[Repository]:
        """Store every repository visible to the token that is not known yet.

        Returns:
            The newly stored repositories
        """
        if not access_token:
            raise BadRequestError("Access token required")

        remote_repos = await self.github.list_user_repositories(access_token)
        created = []
        for remote in remote_repos:
            if await self.store.get_repository(remote.full_name):
                continue
            repository = Repository(
                id=remote.full_name,
                name=remote.name,
                full_name=remote.full_name,
                owner=remote.owner.login,
                description=remote.description or "",
                language=remote.language or "",
                is_private=remote.private,
                access_token=access_token,
                default_branch=remote.default_branch,
            )
            created.append(await self.store.add_repository(repository))

        logger.info("repositories_imported", remote_count=len(remote_repos), new_count=len(created))
        return created

    async def update_repository(self, repository_id: str, changes: dict[str, Any]) -> Repository:
        try:
            updated = await self.store.update_repository(repository_id, changes)
        except ValueError as e:
            raise BadRequestError(f"Invalid repository update: {e}") from e
        if updated is None:
            raise NotFoundError(f"Repository not found: {repository_id}")
        return updated

    async def sync_files(self, repository_id: str) -> SyncResult:
        """Walk the remote tree and store files not seen before.

        Already stored paths are left untouched, so running the sync again on
        an unchanged tree stores nothing.

        Raises:
            NotFoundError: If the repository is unknown
            BadRequestError: If the repository cannot be addressed on GitHub
        """
        repository = await self.get_repository(repository_id)
        owner, repo, token = self.remote_coordinates(repository)
        logger.info("repository_sync_started", repository_id=repository_id)

        existing_paths = {f.path for f in await self.store.list_files(repository_id)}

        async def list_directory(path: str) -> list[RemoteEntry]:
            return await self.github.list_directory(owner, repo, path, token)

        walk = await walk_tree(
            list_directory,
            should_descend=make_descend_predicate(self.config.skip_dirs),
            should_accept=make_accept_predicate(self.config.max_file_bytes),
        )

        result = SyncResult(failed_paths=walk.failed_paths)
        for entry in walk.files:
            if entry.path in existing_paths:
                continue
            record = RepositoryFile(
                repository_id=repository_id,
                path=entry.path,
                name=entry.name,
                type=FileType.FILE,
                size=str(entry.size) if entry.size is not None else None,
                language=language_for(entry.name),
                is_selected=False,
            )
            try:
                result.files.append(await self.store.add_file(record))
            except StorageError as e:
                logger.warning("file_store_failed", path=entry.path, error=e.message)
                continue
            existing_paths.add(entry.path)

        logger.info(
            "repository_sync_completed",
            repository_id=repository_id,
            new_files=result.count,
            failed_dirs=len(result.failed_paths),
        )
        return result

    async def list_files(self, repository_id: str) -> list[RepositoryFile]:
        return await self.store.list_files(repository_id)

    async def list_selected_files(self, repository_id: str) -> list[RepositoryFile]:
        return await self.store.list_files(repository_id, selected=True)

    async def set_file_selection(self, file_id: str, selected: bool) -> RepositoryFile:
        """Set one file's selection flag.

        Raises:
            NotFoundError: If the file id is unknown
        """
        updated = await self.store.update_file(file_id, {"is_selected": selected})
        if updated is None:
            raise NotFoundError(f"File not found: {file_id}")
        return updated

    async def select_all(self, repository_id: str) -> list[RepositoryFile]:
        """Select every file record of the repository; directories are skipped."""
        updated = []
        for file in await self.store.list_files(repository_id):
            if file.type != FileType.FILE:
                continue
            record = await self.store.update_file(file.id, {"is_selected": True})
            if record:
                updated.append(record)

        logger.info("files_selected", repository_id=repository_id, count=len(updated))
        return updated

    async def clear_selection(self, repository_id: str) -> list[RepositoryFile]:
        """Deselect every selected record of the repository."""
        updated = []
        for file in await self.store.list_files(repository_id, selected=True):
            record = await self.store.update_file(file.id, {"is_selected": False})
            if record:
                updated.append(record)

        logger.info("selection_cleared", repository_id=repository_id, count=len(updated))
        return updated

    async def load_content(self, repository: Repository, file: RepositoryFile) -> RepositoryFile:
        """Return ``file`` with content, fetching and caching it on first use.

        Raises:
            BadRequestError: If the repository cannot be addressed on GitHub
            GitHubAPIError: If the fetch fails
        """
        if file.has_content:
            return file

        owner, repo, token = self.remote_coordinates(repository)
        content = await self.github.get_file_content(owner, repo, file.path, token)
        updated = await self.store.update_file(file.id, {"content": content})
        logger.info("file_content_loaded", repository_id=repository.id, path=file.path, chars=len(content))
        return updated or file.model_copy(update={"content": content})

    async def get_file_content(self, repository_id: str, file_id: str) -> str:
        """Content of one file, loading it from GitHub if needed.

        Raises:
            NotFoundError: If the repository or file is unknown
        """
        repository = await self.get_repository(repository_id)
        file = await self.store.get_file(file_id)
        if file is None or file.repository_id != repository_id:
            raise NotFoundError(f"File not found: {file_id}")

        loaded = await self.load_content(repository, file)
        return loaded.content or ""
