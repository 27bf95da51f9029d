"""Request and response bodies for the HTTP API (camelCase on the wire)."""

from typing import Optional

from pydantic import Field

from testgen.entities import GeneratedTestCode, Priority, RepositoryFile, TestCaseSummary, TestCategory
from testgen.entities.base import Entity


class SyncRepositoriesRequest(Entity):
    access_token: str = Field(..., min_length=1)


class RepositoryPatch(Entity):
    name: Optional[str] = None
    description: Optional[str] = None
    language: Optional[str] = None
    is_private: Optional[bool] = None
    access_token: Optional[str] = None
    default_branch: Optional[str] = None


class FileSelectionRequest(Entity):
    is_selected: bool


class FrameworkRequest(Entity):
    """Body of the summary, batch and documentation endpoints."""

    test_framework: Optional[str] = None


class GenerateCodeRequest(Entity):
    template_id: Optional[str] = None


class TestCasePatch(Entity):
    __test__ = False

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[Priority] = None
    test_framework: Optional[str] = None
    files: Optional[list[str]] = None
    test_case_count: Optional[str] = None
    estimated_time: Optional[str] = None
    generated_code: Optional[str] = None
    category: Optional[TestCategory] = None


class CreatePullRequestRequest(Entity):
    test_case_ids: list[str] = Field(default_factory=list)
    pr_title: Optional[str] = None
    pr_description: Optional[str] = None


class CustomTestRequest(Entity):
    custom_prompt: str
    test_framework: str
    file_ids: Optional[list[str]] = None


class TemplateCreate(Entity):
    framework: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    template: str = Field(..., min_length=1)
    description: str = ""


class SyncFilesResponse(Entity):
    files: list[RepositoryFile]
    count: int
    failed_paths: list[str] = Field(default_factory=list)


class FileContentResponse(Entity):
    content: str


class CodeGenerationResponse(Entity):
    code: GeneratedTestCode
    test_case: TestCaseSummary


class PullRequestResponse(Entity):
    url: str
    number: int
    title: str
    branch: str
    files: list[str]
    test_case_count: int


class DocumentationResponse(Entity):
    documentation: str
