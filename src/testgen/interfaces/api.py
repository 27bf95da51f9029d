"""FastAPI application: the HTTP surface of the service.

Routes live under ``/api``. Services raise ``testgen.core.errors`` exceptions;
the handlers here turn them into ``{"message": ..., "code": ...}`` bodies.

Repository ids are GitHub full names (``owner/name``), so repository routes
use a ``path`` converter and the catch-all ``/repositories/{id}`` routes are
registered after the more specific ones.
"""

from contextlib import asynccontextmanager
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from testgen.config.schema import AppConfig
from testgen.core.errors import BadRequestError, NotFoundError, RemoteServiceError
from testgen.entities import GeneratedTestCode, Repository, RepositoryFile, TestCaseSummary, TestTemplate
from testgen.entities.base import utcnow
from testgen.interfaces.schemas import (
    CodeGenerationResponse,
    CreatePullRequestRequest,
    CustomTestRequest,
    DocumentationResponse,
    FileContentResponse,
    FileSelectionRequest,
    FrameworkRequest,
    GenerateCodeRequest,
    PullRequestResponse,
    RepositoryPatch,
    SyncFilesResponse,
    SyncRepositoriesRequest,
    TemplateCreate,
    TestCasePatch,
)
from testgen.observability.logging import get_logger
from testgen.service import Services, build_services

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """Machine-readable error codes carried in error bodies."""

    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    REMOTE_SERVICE_ERROR = "REMOTE_SERVICE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def _error(status_code: int, message: str, code: ErrorCode) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "code": code.value})


def get_services(request: Request) -> Services:
    return request.app.state.services


def _framework(body: Optional[FrameworkRequest], services: Services) -> str:
    if body and body.test_framework:
        return body.test_framework
    return services.config.generation.default_framework


# Health

health_router = APIRouter(tags=["Health"])


@health_router.get("/health")
async def health_check():
    """Simple API health check."""
    return {"status": "healthy", "timestamp": utcnow().isoformat(), "service": "testgen"}


# Repositories and files

repositories_router = APIRouter(tags=["Repositories"])


@repositories_router.get("/repositories", response_model=list[Repository])
async def list_repositories(services: Services = Depends(get_services)):
    return await services.store.list_repositories()


@repositories_router.post("/repositories/sync", response_model=list[Repository])
async def import_repositories(body: SyncRepositoriesRequest, services: Services = Depends(get_services)):
    """Import the token's GitHub repositories; returns the ones not seen before."""
    return await services.sync.import_repositories(body.access_token)


@repositories_router.get("/repositories/{repository_id:path}/files/selected", response_model=list[RepositoryFile])
async def list_selected_files(repository_id: str, services: Services = Depends(get_services)):
    return await services.sync.list_selected_files(repository_id)


@repositories_router.post("/repositories/{repository_id:path}/files/sync", response_model=SyncFilesResponse)
async def sync_files(repository_id: str, services: Services = Depends(get_services)):
    """Walk the GitHub tree and store new files."""
    result = await services.sync.sync_files(repository_id)
    return SyncFilesResponse(files=result.files, count=result.count, failed_paths=result.failed_paths)


@repositories_router.post("/repositories/{repository_id:path}/files/select-all", response_model=list[RepositoryFile])
async def select_all_files(repository_id: str, services: Services = Depends(get_services)):
    return await services.sync.select_all(repository_id)


@repositories_router.post(
    "/repositories/{repository_id:path}/files/clear-selection", response_model=list[RepositoryFile]
)
async def clear_selection(repository_id: str, services: Services = Depends(get_services)):
    return await services.sync.clear_selection(repository_id)


@repositories_router.get(
    "/repositories/{repository_id:path}/files/{file_id}/content", response_model=FileContentResponse
)
async def get_file_content(repository_id: str, file_id: str, services: Services = Depends(get_services)):
    """File content, fetched from GitHub on first access."""
    content = await services.sync.get_file_content(repository_id, file_id)
    return FileContentResponse(content=content)


@repositories_router.get("/repositories/{repository_id:path}/files", response_model=list[RepositoryFile])
async def list_files(repository_id: str, services: Services = Depends(get_services)):
    return await services.sync.list_files(repository_id)


@repositories_router.patch("/files/{file_id}", response_model=RepositoryFile)
async def set_file_selection(file_id: str, body: FileSelectionRequest, services: Services = Depends(get_services)):
    return await services.sync.set_file_selection(file_id, body.is_selected)


# Test generation

test_cases_router = APIRouter(tags=["Test Cases"])


@test_cases_router.get("/repositories/{repository_id:path}/test-cases", response_model=list[TestCaseSummary])
async def list_test_cases(repository_id: str, services: Services = Depends(get_services)):
    return await services.orchestrator.list_test_cases(repository_id)


@test_cases_router.post(
    "/repositories/{repository_id:path}/test-cases/generate", response_model=list[TestCaseSummary]
)
async def generate_test_cases(
    repository_id: str,
    body: Optional[FrameworkRequest] = None,
    services: Services = Depends(get_services),
):
    """Propose test-case summaries for the selected files."""
    return await services.orchestrator.generate_summaries(repository_id, _framework(body, services))


@test_cases_router.post(
    "/repositories/{repository_id:path}/test-cases/batch-generate", response_model=list[TestCaseSummary]
)
async def batch_generate_test_cases(
    repository_id: str,
    body: Optional[FrameworkRequest] = None,
    services: Services = Depends(get_services),
):
    """Propose test-case summaries for every loaded code file."""
    return await services.orchestrator.batch_generate(repository_id, _framework(body, services))


@test_cases_router.post("/test-cases/{test_case_id}/generate-code", response_model=CodeGenerationResponse)
async def generate_test_code(
    test_case_id: str,
    body: Optional[GenerateCodeRequest] = None,
    services: Services = Depends(get_services),
):
    result = await services.orchestrator.generate_code(test_case_id, body.template_id if body else None)
    return CodeGenerationResponse(code=result.code, test_case=result.summary)


@test_cases_router.patch("/test-cases/{test_case_id}", response_model=TestCaseSummary)
async def update_test_case(test_case_id: str, body: TestCasePatch, services: Services = Depends(get_services)):
    return await services.orchestrator.update_test_case(test_case_id, body.model_dump(exclude_unset=True))


@test_cases_router.delete("/test-cases/{test_case_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_test_case(test_case_id: str, services: Services = Depends(get_services)):
    await services.orchestrator.delete_test_case(test_case_id)


@test_cases_router.post("/repositories/{repository_id:path}/custom-test", response_model=GeneratedTestCode)
async def generate_custom_test(
    repository_id: str, body: CustomTestRequest, services: Services = Depends(get_services)
):
    return await services.orchestrator.generate_custom_test(
        repository_id, body.custom_prompt, body.test_framework, body.file_ids
    )


@test_cases_router.post(
    "/repositories/{repository_id:path}/generate-documentation", response_model=DocumentationResponse
)
async def generate_documentation(
    repository_id: str,
    body: Optional[FrameworkRequest] = None,
    services: Services = Depends(get_services),
):
    documentation = await services.orchestrator.generate_documentation(repository_id, _framework(body, services))
    return DocumentationResponse(documentation=documentation)


@test_cases_router.post("/repositories/{repository_id:path}/create-pr", response_model=PullRequestResponse)
async def create_pull_request(
    repository_id: str, body: CreatePullRequestRequest, services: Services = Depends(get_services)
):
    """Commit generated tests to a new branch and open a pull request."""
    result = await services.pull_requests.create_pull_request(
        repository_id, body.test_case_ids, title=body.pr_title, description=body.pr_description
    )
    return PullRequestResponse(
        url=result.url,
        number=result.number,
        title=result.title,
        branch=result.branch,
        files=result.files,
        test_case_count=result.test_case_count,
    )


# Templates

templates_router = APIRouter(tags=["Templates"])


@templates_router.get("/test-templates", response_model=list[TestTemplate])
async def list_templates(
    framework: Optional[str] = None,
    category: Optional[str] = None,
    services: Services = Depends(get_services),
):
    return await services.store.list_templates(framework=framework, category=category)


@templates_router.post("/test-templates", response_model=TestTemplate, status_code=status.HTTP_201_CREATED)
async def create_template(body: TemplateCreate, services: Services = Depends(get_services)):
    return await services.store.add_template(TestTemplate(**body.model_dump()))


# Catch-all repository routes, after every /repositories/{id}/... route

repository_router = APIRouter(tags=["Repositories"])


@repository_router.get("/repositories/{repository_id:path}", response_model=Repository)
async def get_repository(repository_id: str, services: Services = Depends(get_services)):
    return await services.sync.get_repository(repository_id)


@repository_router.patch("/repositories/{repository_id:path}", response_model=Repository)
async def update_repository(repository_id: str, body: RepositoryPatch, services: Services = Depends(get_services)):
    return await services.sync.update_repository(repository_id, body.model_dump(exclude_unset=True))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(status.HTTP_404_NOT_FOUND, exc.message, ErrorCode.NOT_FOUND)

    @app.exception_handler(BadRequestError)
    async def bad_request_handler(request: Request, exc: BadRequestError):
        return _error(status.HTTP_400_BAD_REQUEST, exc.message, ErrorCode.BAD_REQUEST)

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in exc.errors()
        )
        return _error(status.HTTP_400_BAD_REQUEST, f"Invalid request: {details}", ErrorCode.VALIDATION_ERROR)

    @app.exception_handler(RemoteServiceError)
    async def remote_service_handler(request: Request, exc: RemoteServiceError):
        logger.error("remote_service_failed", service=exc.service, path=request.url.path, error=exc.message)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"{exc.service} request failed: {exc.message}",
            ErrorCode.REMOTE_SERVICE_ERROR,
        )

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        logger.exception("request_failed", path=request.url.path, error_type=type(exc).__name__)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", ErrorCode.INTERNAL_ERROR)


def create_app(config: Optional[AppConfig] = None, services: Optional[Services] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Application configuration (defaults from the environment)
        services: Pre-built services; when omitted they are built on startup
            and closed on shutdown

    Returns:
        Configured FastAPI app
    """
    config = services.config if services else (config or AppConfig())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = services is None
        app.state.services = services or await build_services(config)
        logger.info("api_started", app_name=config.app_name)
        try:
            yield
        finally:
            if owned:
                await app.state.services.close()
            logger.info("api_stopped")

    app = FastAPI(
        title="Test Generation API",
        description="Sync GitHub repositories, generate tests with an LLM and open pull requests",
        version="0.1.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix="/api")
    app.include_router(repositories_router, prefix="/api")
    app.include_router(test_cases_router, prefix="/api")
    app.include_router(templates_router, prefix="/api")
    app.include_router(repository_router, prefix="/api")

    register_exception_handlers(app)
    return app
