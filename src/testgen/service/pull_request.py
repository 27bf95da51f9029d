"""Pull request assembly: branch, one commit per test file, pull request."""

import time
from dataclasses import dataclass, field
from typing import Optional

from testgen.clients.github import GitHubAPIError, GitHubClient
from testgen.core.errors import BadRequestError, NotFoundError, TestGenError
from testgen.core.frameworks import build_test_filename, build_test_path, convention_for, framework_slug
from testgen.entities import TestCaseSummary
from testgen.observability.logging import get_logger
from testgen.service.orchestrator import TestGenerationOrchestrator
from testgen.storage.base import Store

logger = get_logger(__name__)


@dataclass
class PullRequestResult:
    url: str
    number: int
    title: str
    branch: str
    files: list[str] = field(default_factory=list)
    test_case_count: int = 0


def branch_name(framework: str, now_ms: Optional[int] = None) -> str:
    """``testgen/<framework-slug>-<epoch-ms>``."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"testgen/{framework_slug(framework)}-{stamp}"


def default_title(summaries: list[TestCaseSummary]) -> str:
    frameworks = sorted({s.test_framework for s in summaries})
    return f"Add generated {', '.join(frameworks)} tests ({len(summaries)} test case{'s' if len(summaries) != 1 else ''})"


def default_body(summaries: list[TestCaseSummary]) -> str:
    frameworks = sorted({s.test_framework for s in summaries})
    commands = sorted({convention_for(f).test_command for f in frameworks})

    lines = ["## Generated test cases", ""]
    lines += [f"- **{s.title}** ({s.test_framework}, {s.priority} priority): {s.description}" for s in summaries]
    lines += ["", "## Frameworks", ""]
    lines += [f"- {f}" for f in frameworks]
    lines += ["", "## Running the tests", "", "```bash"]
    lines += commands
    lines += ["```"]
    return "\n".join(lines)


def unique_path(path: str, taken: set[str]) -> str:
    """``path``, or ``<stem>-2.<ext>``, ``<stem>-3.<ext>``... when it is already taken.

    >>> unique_path("tests/calc.test.py", {"tests/calc.test.py"})
    'tests/calc-2.test.py'
    """
    if path not in taken:
        return path

    directory, slash, filename = path.rpartition("/")
    stem, dot, extension = filename.partition(".")
    suffix = 2
    while True:
        candidate = f"{directory}{slash}{stem}-{suffix}{dot}{extension}"
        if candidate not in taken:
            return candidate
        suffix += 1


class PullRequestAssembler:
    """Commits generated test code to a new branch and opens a pull request."""

    def __init__(self, store: Store, github: GitHubClient, orchestrator: TestGenerationOrchestrator):
        self.store = store
        self.github = github
        self.orchestrator = orchestrator

    async def _with_code(self, summaries: list[TestCaseSummary]) -> list[TestCaseSummary]:
        """Summaries that have code, generating it once for those that do not."""
        ready = []
        for summary in summaries:
            if summary.generated_code:
                ready.append(summary)
                continue
            try:
                result = await self.orchestrator.generate_code(summary.id)
            except TestGenError as e:
                logger.warning("on_demand_generation_failed", test_case_id=summary.id, error=e.message)
                continue
            ready.append(result.summary)
        return ready

    async def create_pull_request(
        self,
        repository_id: str,
        test_case_ids: list[str],
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PullRequestResult:
        """Open a pull request adding one test file per summary.

        Unknown and repeated test case ids are skipped. Summaries that map to
        the same test file get numbered paths. Summaries without generated code get
        a single generation attempt; those that still have none are left out.

        Raises:
            BadRequestError: On an empty id list, when no summary has code, on a
                malformed repository name, or when GitHub reports a conflict
            NotFoundError: If the repository is unknown
            RemoteServiceError: On any other GitHub failure
        """
        if not test_case_ids:
            raise BadRequestError("Test case IDs are required")

        repository = await self.store.get_repository(repository_id)
        if repository is None:
            raise NotFoundError(f"Repository not found: {repository_id}")
        if not repository.access_token:
            raise BadRequestError("Repository access token not found")

        found = []
        for test_case_id in dict.fromkeys(test_case_ids):
            summary = await self.store.get_test_case(test_case_id)
            if summary is None:
                logger.warning("test_case_skipped", test_case_id=test_case_id, reason="not_found")
                continue
            found.append(summary)

        summaries = await self._with_code(found)
        if not summaries:
            raise BadRequestError("No test cases with generated code found")

        parts = repository.split_full_name()
        if parts is None:
            raise BadRequestError(f"Invalid repository format: {repository.full_name}")
        owner, repo = parts
        token = repository.access_token

        branch = branch_name(summaries[0].test_framework)
        pr_title = title or default_title(summaries)
        pr_body = description or default_body(summaries)

        committed = []
        try:
            await self.github.create_branch(owner, repo, branch, repository.default_branch, token)
            for summary in summaries:
                filename = build_test_filename(summary.files, summary.test_framework, summary.category)
                path = unique_path(build_test_path(filename, summary.test_framework), set(committed))
                await self.github.create_or_update_file(
                    owner,
                    repo,
                    path,
                    summary.generated_code or "",
                    f"Add {summary.test_framework} tests: {summary.title}",
                    branch,
                    token,
                )
                committed.append(path)

            pull = await self.github.create_pull_request(
                owner, repo, pr_title, pr_body, head=branch, base=repository.default_branch, access_token=token
            )
        except GitHubAPIError as e:
            if e.is_conflict:
                raise BadRequestError(
                    f"GitHub rejected the pull request: the branch or a pull request may already exist ({e.message})"
                ) from e
            raise

        logger.info(
            "pull_request_created",
            repository_id=repository_id,
            number=pull.number,
            branch=branch,
            file_count=len(committed),
        )
        return PullRequestResult(
            url=pull.html_url,
            number=pull.number,
            title=pull.title or pr_title,
            branch=branch,
            files=committed,
            test_case_count=len(summaries),
        )
