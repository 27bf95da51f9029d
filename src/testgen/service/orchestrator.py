"""Test generation orchestration.

Turns selected (interactive) or all eligible (batch) repository files into
stored test-case summaries, and stored summaries into test code.

How to use:
    orchestrator = TestGenerationOrchestrator(store, sync_engine, generator)
    summaries = await orchestrator.generate_summaries("octo/app", "Pytest")
    result = await orchestrator.generate_code(summaries[0].id)
"""

from dataclasses import dataclass
from typing import Any, Optional

from testgen.core.errors import BadRequestError, NotFoundError, TestGenError
from testgen.core.languages import is_programming_language, language_for, path_traverses_skipped_dir
from testgen.entities import FileType, GeneratedTestCode, Repository, RepositoryFile, TestCaseSummary
from testgen.generation import ContentGenerator, SourceFile
from testgen.observability.logging import get_logger
from testgen.service.sync import SyncEngine
from testgen.storage.base import Store

logger = get_logger(__name__)


@dataclass
class CodeGenerationResult:
    """Generated artifact plus the summary it was stored on."""

    code: GeneratedTestCode
    summary: TestCaseSummary


def to_source_file(file: RepositoryFile) -> SourceFile:
    return SourceFile(path=file.path, language=file.language or language_for(file.name), content=file.content or "")


class TestGenerationOrchestrator:
    """Coordinates content loading, LLM calls and summary persistence."""

    __test__ = False

    def __init__(self, store: Store, sync: SyncEngine, generator: ContentGenerator):
        self.store = store
        self.sync = sync
        self.generator = generator

    async def _load_contents(self, repository: Repository, files: list[RepositoryFile]) -> list[RepositoryFile]:
        """Load missing contents one file at a time; failed files are left out."""
        loaded = []
        for file in files:
            try:
                loaded.append(await self.sync.load_content(repository, file))
            except TestGenError as e:
                logger.warning("file_content_load_failed", repository_id=repository.id, path=file.path, error=e.message)
        return [f for f in loaded if f.has_content]

    async def _summarize(
        self, repository: Repository, files: list[RepositoryFile], framework: str
    ) -> list[TestCaseSummary]:
        proposals = await self.generator.generate_summaries([to_source_file(f) for f in files], framework)

        stored = []
        for proposal in proposals:
            summary = TestCaseSummary(
                repository_id=repository.id,
                test_framework=framework,
                **proposal.model_dump(),
            )
            stored.append(await self.store.add_test_case(summary))

        logger.info(
            "test_cases_generated",
            repository_id=repository.id,
            framework=framework,
            file_count=len(files),
            summary_count=len(stored),
        )
        return stored

    async def generate_summaries(self, repository_id: str, framework: str) -> list[TestCaseSummary]:
        """Propose and store summaries for the repository's selected files.

        Raises:
            NotFoundError: If the repository is unknown
            BadRequestError: If nothing is selected, or nothing selected has content
            RemoteServiceError: If the LLM call fails
        """
        if not framework:
            raise BadRequestError("Test framework is required")
        repository = await self.sync.get_repository(repository_id)

        selected = [f for f in await self.store.list_files(repository_id, selected=True) if f.type == FileType.FILE]
        if not selected:
            raise BadRequestError("No files selected")

        files = await self._load_contents(repository, selected)
        if not files:
            raise BadRequestError("Selected files have no content after loading")

        return await self._summarize(repository, files, framework)

    async def batch_generate(self, repository_id: str, framework: str) -> list[TestCaseSummary]:
        """Propose and store summaries for every code file with loaded content.

        Selection is ignored. Files are eligible when their content is already
        loaded, their language is a programming language and their path does
        not run through a skipped directory.

        Raises:
            NotFoundError: If the repository is unknown
            BadRequestError: If no file is eligible
        """
        if not framework:
            raise BadRequestError("Test framework is required")
        repository = await self.sync.get_repository(repository_id)

        skip_dirs = self.sync.config.skip_dirs
        eligible = [
            f
            for f in await self.store.list_files(repository_id)
            if f.type == FileType.FILE
            and f.has_content
            and is_programming_language(f.language)
            and not path_traverses_skipped_dir(f.path, skip_dirs)
        ]
        if not eligible:
            raise BadRequestError("No code files found for batch processing")

        logger.info("batch_generation_started", repository_id=repository_id, file_count=len(eligible))
        return await self._summarize(repository, eligible, framework)

    async def generate_code(self, test_case_id: str, template_id: Optional[str] = None) -> CodeGenerationResult:
        """Generate test code for a stored summary and store it on the summary.

        Any previously generated code is replaced.

        Raises:
            NotFoundError: If the summary, its repository or the template is unknown
            BadRequestError: If none of the referenced files has content
            RemoteServiceError: If the LLM call fails
        """
        summary = await self.store.get_test_case(test_case_id)
        if summary is None:
            raise NotFoundError(f"Test case not found: {test_case_id}")

        template_text = None
        if template_id:
            template = await self.store.get_template(template_id)
            if template is None:
                raise NotFoundError(f"Template not found: {template_id}")
            template_text = template.template

        repository = await self.sync.get_repository(summary.repository_id)
        referenced = set(summary.files)
        candidates = [f for f in await self.store.list_files(repository.id) if f.path in referenced]
        files = await self._load_contents(repository, candidates)
        if not files:
            raise BadRequestError("Referenced files have no content")

        code = await self.generator.generate_test_code(summary, [to_source_file(f) for f in files], template_text)
        updated = await self.store.update_test_case(summary.id, {"generated_code": code.content})
        if updated is None:
            raise NotFoundError(f"Test case not found: {test_case_id}")

        logger.info("test_code_generated", test_case_id=summary.id, filename=code.filename, chars=len(code.content))
        return CodeGenerationResult(code=code, summary=updated)

    async def generate_custom_test(
        self,
        repository_id: str,
        custom_prompt: str,
        framework: str,
        file_ids: Optional[list[str]] = None,
    ) -> GeneratedTestCode:
        """Generate a test file from a free-form prompt. Nothing is stored.

        Raises:
            NotFoundError: If the repository is unknown
            BadRequestError: If the prompt or framework is missing, or no target file has content
        """
        if not custom_prompt or not framework:
            raise BadRequestError("Custom prompt and test framework are required")
        repository = await self.sync.get_repository(repository_id)

        files = [f for f in await self.store.list_files(repository_id) if f.type == FileType.FILE]
        if file_ids:
            wanted = set(file_ids)
            files = [f for f in files if f.id in wanted]

        loaded = await self._load_contents(repository, files)
        if not loaded:
            raise BadRequestError("No file content available for custom test generation")

        code = await self.generator.generate_custom_test(custom_prompt, [to_source_file(f) for f in loaded], framework)
        logger.info("custom_test_generated", repository_id=repository_id, filename=code.filename)
        return code

    async def generate_documentation(self, repository_id: str, framework: str) -> str:
        """Markdown documentation for the repository's stored summaries."""
        await self.sync.get_repository(repository_id)

        summaries = await self.store.list_test_cases(repository_id)
        if not summaries:
            raise BadRequestError("No test cases found for documentation")

        return await self.generator.generate_documentation(summaries, framework)

    async def list_test_cases(self, repository_id: str) -> list[TestCaseSummary]:
        return await self.store.list_test_cases(repository_id)

    async def update_test_case(self, test_case_id: str, changes: dict[str, Any]) -> TestCaseSummary:
        try:
            updated = await self.store.update_test_case(test_case_id, changes)
        except ValueError as e:
            raise BadRequestError(f"Invalid test case update: {e}") from e
        if updated is None:
            raise NotFoundError(f"Test case not found: {test_case_id}")
        return updated

    async def delete_test_case(self, test_case_id: str) -> None:
        if not await self.store.delete_test_case(test_case_id):
            raise NotFoundError(f"Test case not found: {test_case_id}")
